import logging
from typing import List, Optional

from pydantic import ValidationError

from app.db.prismic import PrismicClient, at
from app.exceptions import DataShapeError, DocumentNotFoundError
from app.schemas.blog import PostDetail, PostPagination, PostSummary, SiblingPost
from app.settings import settings

logger = logging.getLogger(__name__)

PREVIOUS_ORDERING = "[document.first_publication_date desc]"
NEXT_ORDERING = "[document.first_publication_date]"


class PrismicPostsRepo:
    def __init__(self, client: PrismicClient, document_type: Optional[str] = None):
        self.client = client
        self.document_type = document_type or settings.POSTS_DOCUMENT_TYPE

    async def get_first_page(self, page_size: int) -> PostPagination:
        payload = await self.client.query(
            [at("document.type", self.document_type)], page_size=page_size
        )
        return parse_pagination(payload)

    async def get_page(self, url: str) -> PostPagination:
        return parse_pagination(await self.client.fetch_page(url))

    async def get_post(self, uid: str, ref: Optional[str] = None) -> Optional[PostDetail]:
        try:
            doc = await self.client.get_by_uid(self.document_type, uid, ref=ref)
        except DocumentNotFoundError:
            return None
        return parse_post_detail(doc)

    async def get_sibling(
        self, document_id: str, orderings: str, ref: Optional[str] = None
    ) -> SiblingPost:
        payload = await self.client.query(
            [at("document.type", self.document_type)],
            page_size=1,
            after=document_id,
            orderings=orderings,
            ref=ref,
        )
        if not payload["results"]:
            return SiblingPost()
        doc = payload["results"][0]
        data = (doc.get("data") or {}) if isinstance(doc, dict) else None
        if not isinstance(data, dict):
            logger.warning(f"Unexpected sibling payload after {document_id}: {doc!r}")
            raise DataShapeError(f"Malformed sibling of {document_id}")
        try:
            return SiblingPost(uid=doc.get("uid") or None, title=data.get("title") or None)
        except ValidationError as e:
            raise DataShapeError(
                f"Malformed sibling of {document_id}", original_error=e
            ) from e

    async def list_uids(self, page_size: int) -> List[str]:
        page = await self.get_first_page(page_size)
        return [post.uid for post in page.results]


def parse_pagination(payload: dict) -> PostPagination:
    """Keep only the listing fields of a search response."""
    try:
        return PostPagination(
            next_page=payload.get("next_page"),
            results=[PostSummary.model_validate(doc) for doc in payload["results"]],
        )
    except (ValidationError, KeyError, AttributeError, TypeError) as e:
        logger.warning(f"Unexpected listing payload: {e}")
        raise DataShapeError("Malformed posts page", original_error=e) from e


def parse_post_detail(doc: dict) -> PostDetail:
    try:
        return PostDetail.model_validate(doc)
    except ValidationError as e:
        uid = doc.get("uid") if isinstance(doc, dict) else None
        logger.warning(f"Unexpected post payload for {uid}: {e}")
        raise DataShapeError(f"Malformed post {uid}", original_error=e) from e
