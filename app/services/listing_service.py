import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from app.exceptions import ContentStoreError, DataShapeError
from app.schemas.blog import PostPagination, PostSummary
from app.settings import settings

logger = logging.getLogger(__name__)

LOAD_MORE_ERROR = "Não foi possível carregar mais posts. Tente novamente."


class ListingSession(BaseModel):
    """
    Pagination state of one reader's listing page.
    Posts are only ever appended, in the order the pages arrive.
    """

    next_page: Optional[str] = None
    posts: List[PostSummary] = Field(default_factory=list)
    pending: bool = False
    error: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return self.next_page is not None


class ListingService:
    def __init__(self, repo, page_size: Optional[int] = None):
        self.repo = repo
        self.page_size = page_size or settings.POSTS_PAGE_SIZE

    async def get_first_page(self) -> PostPagination:
        return await self.repo.get_first_page(self.page_size)

    async def start_session(self) -> ListingSession:
        return start_session(await self.get_first_page())

    async def load_more(self, session: ListingSession) -> ListingSession:
        """
        Append the page behind the session's cursor.
        No-op once the cursor is exhausted or while another load is running.
        A failed fetch keeps the cursor so the reader can retry.
        """
        if not session.has_more or session.pending:
            return session

        url = session.next_page
        session.pending = True
        try:
            page = await self.repo.get_page(url)
        except (ContentStoreError, DataShapeError) as e:
            logger.warning(f"Failed to load next posts page {url}: {e}")
            session.error = LOAD_MORE_ERROR
            return session
        finally:
            session.pending = False

        session.posts.extend(page.results)
        session.next_page = page.next_page
        session.error = None
        return session


def start_session(initial_page: PostPagination) -> ListingSession:
    if initial_page is None:
        raise ValueError("initial page must not be None")
    return ListingSession(
        next_page=initial_page.next_page, posts=list(initial_page.results)
    )
