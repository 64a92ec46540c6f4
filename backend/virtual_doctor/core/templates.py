"""
Template rendering utilities
"""
from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

# frontend/ sits next to backend/ at the project root
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
FRONTEND_DIR = BASE_DIR / "frontend"
TEMPLATES_DIR = FRONTEND_DIR / "templates"
STATIC_DIR = FRONTEND_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render_template(template_name: str, request: Request, **context):
    """Render template with context"""
    return templates.TemplateResponse(request, template_name, context)
