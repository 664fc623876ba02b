import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app import dependencies as deps
from app.schemas.blog import PostPage, PostPageState, PostPagination
from app.security import get_preview_ref
from app.services.listing_service import ListingService
from app.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/posts", response_model=PostPagination)
async def list_posts(service: ListingService = Depends(deps.get_listing_service)):
    """First page of posts, in the same shape as the content store's next pages."""
    try:
        return await service.get_first_page()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/posts/{slug}", response_model=PostPage)
async def get_post(
    slug: str,
    service: PostsService = Depends(deps.get_posts_service),
    preview_ref: Optional[str] = Depends(get_preview_ref),
):
    """Get a single post by slug, with reading time and navigation."""
    try:
        page = await service.get_post_page(
            slug, ref=preview_ref, preview=preview_ref is not None
        )
        if page.state == PostPageState.NOT_FOUND:
            raise HTTPException(status_code=404, detail="Post not found")
        return page
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")
