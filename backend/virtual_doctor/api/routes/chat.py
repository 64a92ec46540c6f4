"""
Virtual doctor chat routes
"""
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field, field_validator

from virtual_doctor.core.config import get_settings
from virtual_doctor.core.conversation_store import (ConversationStore,
                                                    get_conversation_store)
from virtual_doctor.core.logging_config import LoggingConfig
from virtual_doctor.core.templates import render_template

router = APIRouter(tags=["chat"])
logger = LoggingConfig.get_logger(__name__)

CHAT_COOKIE = "chat_session_id"


class ChatMessage(BaseModel):
    """Chat message model"""
    message: str = Field(..., description="User message")
    session_id: Optional[str] = Field(
        default=None,
        max_length=128,
        description="Conversation id; falls back to the chat cookie"
    )

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v


class ChatResponse(BaseModel):
    """Chat response model"""
    response: str
    session_id: str


def resolve_chat_session_id(request: Request, explicit: Optional[str] = None) -> Optional[str]:
    """Conversation id from the request body/query, then the chat cookie"""
    return explicit or request.cookies.get(CHAT_COOKIE)


def set_chat_cookie(response: Response, session_id: str):
    settings = get_settings()
    response.set_cookie(
        key=CHAT_COOKIE,
        value=session_id,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.get("/chat", response_class=HTMLResponse)
async def chat_page(request: Request):
    """Chat page"""
    return render_template("chat.html", request)


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: ChatMessage,
    request: Request,
    response: Response,
    store: ConversationStore = Depends(get_conversation_store),
):
    """Answer one chat message within the caller's conversation"""
    session_id = resolve_chat_session_id(request, payload.session_id) or uuid.uuid4().hex

    result = store.submit(session_id, payload.message)
    logger.info(
        "Chat reply sent",
        extra={"session_id": session_id, "intent": result.intent.value},
    )

    set_chat_cookie(response, session_id)
    return ChatResponse(response=result.reply, session_id=session_id)


@router.delete("/chat", status_code=status.HTTP_204_NO_CONTENT)
async def end_chat(
    request: Request,
    response: Response,
    session_id: Optional[str] = None,
    store: ConversationStore = Depends(get_conversation_store),
):
    """End the caller's conversation so the next message starts over"""
    resolved = resolve_chat_session_id(request, session_id)
    if resolved:
        store.discard(resolved)
    response.delete_cookie(key=CHAT_COOKIE)
    return None
