import asyncio
import logging
import math
from typing import Iterable, Optional

from app.repos.posts_repo import NEXT_ORDERING, PREVIOUS_ORDERING
from app.schemas.blog import (
    ContentSection,
    PostNavigation,
    PostPage,
    PostPageState,
)
from app.services import rich_text
from app.settings import settings

logger = logging.getLogger(__name__)


class PostsService:
    def __init__(self, repo, words_per_minute: Optional[int] = None):
        self.repo = repo
        self.words_per_minute = words_per_minute or settings.WORDS_PER_MINUTE

    async def get_post_page(
        self, slug: str, ref: Optional[str] = None, preview: bool = False
    ) -> PostPage:
        post = await self.repo.get_post(slug, ref=ref)
        if not post:
            logger.info(f"Post not found: {slug}")
            return PostPage(state=PostPageState.NOT_FOUND, slug=slug, preview=preview)

        navigation = await self.get_navigation(post.id, ref=ref)
        return PostPage(
            state=PostPageState.READY,
            slug=slug,
            post=post,
            navigation=navigation,
            readingTime=calculate_reading_time(
                post.data.content, self.words_per_minute
            ),
            preview=preview,
        )

    async def get_navigation(
        self, document_id: str, ref: Optional[str] = None
    ) -> PostNavigation:
        prev_post, next_post = await asyncio.gather(
            self.repo.get_sibling(document_id, PREVIOUS_ORDERING, ref=ref),
            self.repo.get_sibling(document_id, NEXT_ORDERING, ref=ref),
        )
        return PostNavigation(prevPost=prev_post, nextPost=next_post)


def count_words(text: Optional[str]) -> int:
    return len(text.split()) if text else 0


def calculate_reading_time(
    content: Iterable[ContentSection], words_per_minute: Optional[int] = None
) -> int:
    """Minutes to read every heading and body, rounded up. Empty content reads in 0."""
    words_per_minute = words_per_minute or settings.WORDS_PER_MINUTE
    words = sum(
        count_words(section.heading) + count_words(rich_text.as_text(section.body))
        for section in content
    )
    return math.ceil(words / words_per_minute)


def loading_page(slug: str, preview: bool = False) -> PostPage:
    return PostPage(state=PostPageState.LOADING, slug=slug, preview=preview)
