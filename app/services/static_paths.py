import logging
from typing import Dict, Iterable, Set

from app.exceptions import ContentStoreError, DataShapeError

logger = logging.getLogger(__name__)

MAX_PENDING_SLUGS = 256


class StaticPathRegistry:
    """
    Slugs whose post page has been resolved at least once.
    Slugs that got the loading page but were not fetched yet are kept apart,
    oldest first, and capped at `max_pending`.
    """

    def __init__(self, slugs: Iterable[str] = (), max_pending: int = MAX_PENDING_SLUGS):
        self._resolved: Set[str] = set(slugs)
        self._pending: Dict[str, None] = {}
        self.max_pending = max_pending

    def is_resolved(self, slug: str) -> bool:
        return slug in self._resolved

    def is_pending(self, slug: str) -> bool:
        return slug in self._pending

    def mark_pending(self, slug: str) -> None:
        self._pending[slug] = None
        while len(self._pending) > self.max_pending:
            self._pending.pop(next(iter(self._pending)))

    def mark_resolved(self, slug: str) -> None:
        self._pending.pop(slug, None)
        self._resolved.add(slug)

    def discard(self, slug: str) -> None:
        self._pending.pop(slug, None)
        self._resolved.discard(slug)

    def __len__(self) -> int:
        return len(self._resolved)


async def prime_static_paths(repo, registry: StaticPathRegistry, page_size: int) -> int:
    """Resolve the first page of slugs ahead of any request."""
    try:
        uids = await repo.list_uids(page_size)
    except (ContentStoreError, DataShapeError) as e:
        logger.warning(f"Could not prime static post paths: {e}")
        return 0

    for uid in uids:
        registry.mark_resolved(uid)
    logger.info(f"Primed {len(uids)} static post paths")
    return len(uids)


static_paths = StaticPathRegistry()
