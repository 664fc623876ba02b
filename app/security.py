from typing import Optional

from fastapi import Security
from fastapi.security import APIKeyCookie

from app.settings import settings

preview_cookie = APIKeyCookie(name=settings.PREVIEW_COOKIE_NAME, auto_error=False)


def get_preview_ref(preview_ref: Optional[str] = Security(preview_cookie)) -> Optional[str]:
    """The content ref of an active preview session, if the reader is in one."""
    return preview_ref or None
