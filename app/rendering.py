from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from app.services.date_formatter import (
    format_date_or_placeholder,
    format_edited_at_or_none,
)
from app.services.rich_text import as_html
from app.settings import settings

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["post_date"] = format_date_or_placeholder
templates.env.filters["edited_at"] = format_edited_at_or_none
templates.env.filters["rich_text"] = lambda blocks: Markup(as_html(blocks))
templates.env.globals["settings"] = settings


def render_template(
    request: Request, template_name: str, context: dict, status_code: int = 200
):
    """Render template with context"""
    return templates.TemplateResponse(
        request, template_name, context, status_code=status_code
    )
