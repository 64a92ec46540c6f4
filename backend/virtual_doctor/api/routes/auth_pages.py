"""
Authentication web pages
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from virtual_doctor.api.routes.chat import CHAT_COOKIE
from virtual_doctor.core.auth import SESSION_COOKIE
from virtual_doctor.core.conversation_store import (ConversationStore,
                                                    get_conversation_store)
from virtual_doctor.core.database import get_db
from virtual_doctor.core.templates import render_template
from virtual_doctor.models.user import UserRole
from virtual_doctor.services.auth_service import AuthService

router = APIRouter(tags=["auth_pages"])


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    """Login page"""
    return render_template("auth/login.html", request, roles=list(UserRole))


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(request: Request):
    """Signup page"""
    return render_template("auth/signup.html", request, roles=list(UserRole))


@router.get("/logout")
async def logout(
    request: Request,
    db: Session = Depends(get_db),
    store: ConversationStore = Depends(get_conversation_store),
):
    """End the login session and the chat conversation, then go back to login"""
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        AuthService(db).logout(token)

    chat_session_id = request.cookies.get(CHAT_COOKIE)
    if chat_session_id:
        store.discard(chat_session_id)

    response = RedirectResponse(url="/login", status_code=303)
    response.delete_cookie(key=SESSION_COOKIE)
    response.delete_cookie(key=CHAT_COOKIE)
    return response
