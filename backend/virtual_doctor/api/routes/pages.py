"""
Page routes for web interface
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from virtual_doctor.core.auth import get_current_user_optional
from virtual_doctor.core.templates import render_template
from virtual_doctor.models.user import User

router = APIRouter(tags=["pages"])

# path -> (template, title)
PUBLIC_PAGES = {
    "/client": ("client.html", "Our Clients"),
    "/health-info": ("health.html", "Health"),
    "/contact": ("contact.html", "Contact"),
    "/medicine": ("medicine.html", "Medicine"),
    "/news": ("news.html", "News"),
}

# Anything here redirects to /login without a valid session
PROTECTED_PAGES = {
    "/dashboard": ("dashboard.html", "Dashboard"),
    "/aindex": ("aindex.html", "Admin Home"),
    "/widget": ("panel.html", "Widgets"),
    "/typography": ("panel.html", "Typography"),
    "/table": ("panel.html", "Tables"),
    "/form": ("panel.html", "Forms"),
    "/element": ("panel.html", "Elements"),
    "/chart": ("panel.html", "Charts"),
    "/button": ("panel.html", "Buttons"),
    "/blank": ("panel.html", "Blank Page"),
    "/404": ("404.html", "Page Not Found"),
}


@router.get("/", response_class=HTMLResponse)
@router.get("/index", response_class=HTMLResponse)
async def index(
    request: Request,
    user: Optional[User] = Depends(get_current_user_optional),
):
    """Landing page"""
    return render_template("index.html", request, user=user)


def _add_public_page(path: str, template: str, title: str):
    async def page(
        request: Request,
        user: Optional[User] = Depends(get_current_user_optional),
    ):
        return render_template(template, request, user=user, title=title)

    page.__name__ = f"page_{template.split('.')[0]}"
    router.add_api_route(path, page, methods=["GET"], response_class=HTMLResponse)


def _add_protected_page(path: str, template: str, title: str):
    async def page(
        request: Request,
        user: Optional[User] = Depends(get_current_user_optional),
    ):
        if not user:
            return RedirectResponse(url="/login", status_code=303)
        return render_template(template, request, user=user, title=title)

    page.__name__ = f"protected_{path.strip('/')}"
    router.add_api_route(path, page, methods=["GET"], response_class=HTMLResponse)


for _path, (_template, _title) in PUBLIC_PAGES.items():
    _add_public_page(_path, _template, _title)

for _path, (_template, _title) in PROTECTED_PAGES.items():
    _add_protected_page(_path, _template, _title)
