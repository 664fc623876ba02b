import logging
import time
import uuid
from typing import Dict, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse

from app import dependencies as deps
from app.rendering import render_template
from app.schemas.blog import PostPageState
from app.security import get_preview_ref
from app.services.listing_service import ListingService, ListingSession
from app.services.posts_service import PostsService, loading_page
from app.services.static_paths import StaticPathRegistry
from app.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()
MAX_LISTING_SESSIONS = 512
_listing_sessions: Dict[str, Tuple[float, ListingSession]] = {}


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    service: ListingService = Depends(deps.get_listing_service),
):
    """Listing page, starting a fresh pagination session."""
    session = await _start_session(service)
    return _render_listing(request, session, _store_session(session))


@router.post("/load-more", response_class=HTMLResponse)
async def load_more(
    request: Request,
    service: ListingService = Depends(deps.get_listing_service),
):
    session_id = request.cookies.get(settings.LISTING_COOKIE_NAME)
    session = _get_session(session_id)
    if session is None:
        logger.info("Listing session missing or expired, starting over")
        session = await _start_session(service)
    else:
        try:
            session = await service.load_more(session)
        except Exception as e:
            logger.error(f"Unexpected error loading more posts: {e}")
            raise HTTPException(status_code=500, detail="Failed to load more posts")

    return _render_listing(request, session, _store_session(session, session_id))


@router.get("/post/{slug}", response_class=HTMLResponse)
async def post_detail(
    slug: str,
    request: Request,
    service: PostsService = Depends(deps.get_posts_service),
    registry: StaticPathRegistry = Depends(deps.get_static_paths),
    preview_ref: Optional[str] = Depends(get_preview_ref),
):
    preview = preview_ref is not None

    if (
        settings.POST_FALLBACK_LOADING
        and not preview
        and not registry.is_resolved(slug)
        and not registry.is_pending(slug)
    ):
        # first hit renders the loading state; the refresh resolves the post
        registry.mark_pending(slug)
        return render_template(request, "post.html", {"page": loading_page(slug)})

    try:
        page = await service.get_post_page(slug, ref=preview_ref, preview=preview)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")

    if page.state == PostPageState.NOT_FOUND:
        registry.discard(slug)
        return render_template(
            request, "not_found.html", {"preview": preview}, status_code=404
        )

    registry.mark_resolved(slug)
    return render_template(request, "post.html", {"page": page})


async def _start_session(service: ListingService) -> ListingSession:
    try:
        return await service.start_session()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


def _render_listing(request: Request, session: ListingSession, session_id: str):
    response = render_template(request, "home.html", {"session": session})
    response.set_cookie(
        settings.LISTING_COOKIE_NAME, session_id, httponly=True, samesite="lax"
    )
    return response


def _get_session(session_id: Optional[str]) -> Optional[ListingSession]:
    if not session_id:
        return None
    entry = _listing_sessions.get(session_id)
    if not entry:
        return None
    stored_at, session = entry
    if time.monotonic() - stored_at >= settings.LISTING_SESSION_TTL_SECONDS:
        _listing_sessions.pop(session_id, None)
        return None
    return session


def _store_session(session: ListingSession, session_id: Optional[str] = None) -> str:
    now = time.monotonic()
    session_id = session_id or uuid.uuid4().hex
    _listing_sessions[session_id] = (now, session)
    if len(_listing_sessions) > MAX_LISTING_SESSIONS:
        _prune_sessions(now)
        _evict_oldest_sessions()
    return session_id


def _prune_sessions(now: float) -> None:
    stale_keys = [
        key
        for key, (ts, _session) in _listing_sessions.items()
        if now - ts >= settings.LISTING_SESSION_TTL_SECONDS
    ]
    for key in stale_keys:
        _listing_sessions.pop(key, None)


def _evict_oldest_sessions() -> None:
    overflow = len(_listing_sessions) - MAX_LISTING_SESSIONS
    if overflow <= 0:
        return
    by_age = sorted(_listing_sessions.items(), key=lambda item: item[1][0])
    for key, _entry in by_age[:overflow]:
        _listing_sessions.pop(key, None)
