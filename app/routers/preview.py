import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse

from app.db.prismic import PrismicClient, get_prismic
from app.exceptions import ContentStoreError, DataShapeError, DocumentNotFoundError
from app.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/preview")
async def preview(
    token: Optional[str] = None,
    document_id: Optional[str] = Query(None, alias="documentId"),
    client: PrismicClient = Depends(get_prismic),
):
    """Enter preview mode for a draft and jump to its page."""
    if not token or not document_id:
        raise HTTPException(status_code=400, detail="Missing preview token or document")

    try:
        doc = await client.get_by_id(document_id, ref=token)
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail="Preview document not found")
    except (ContentStoreError, DataShapeError) as e:
        logger.error(f"Failed to resolve preview document {document_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to start preview")

    response = RedirectResponse(resolve_link(doc), status_code=307)
    response.set_cookie(
        settings.PREVIEW_COOKIE_NAME, token, httponly=True, samesite="lax"
    )
    logger.info(f"Preview started for document {document_id}")
    return response


@router.get("/exit-preview")
async def exit_preview():
    response = RedirectResponse("/", status_code=307)
    response.delete_cookie(settings.PREVIEW_COOKIE_NAME)
    return response


def resolve_link(doc: dict) -> str:
    if doc.get("type") == settings.POSTS_DOCUMENT_TYPE and doc.get("uid"):
        return f"/post/{doc['uid']}"
    return "/"
