from app.exceptions import ContentStoreError, DocumentNotFoundError
from app.repos.posts_repo import NEXT_ORDERING, PREVIOUS_ORDERING
from app.schemas.blog import PostDetail, PostPagination, SiblingPost


# --- Document builders ---


def summary_doc(
    uid: str,
    title: str | None = None,
    first_publication_date: str | None = "2021-03-25T19:25:28+0000",
    subtitle: str = "Subtitle",
    author: str = "Joseph Oliveira",
) -> dict:
    """A Prismic `posts` document as returned by a search."""
    return {
        "id": f"id-{uid}",
        "uid": uid,
        "type": "posts",
        "first_publication_date": first_publication_date,
        "last_publication_date": first_publication_date,
        "data": {
            "title": title or uid.replace("-", " ").title(),
            "subtitle": subtitle,
            "author": author,
        },
    }


def post_doc(uid: str, content: list | None = None, **kwargs) -> dict:
    doc = summary_doc(uid, **kwargs)
    doc["data"]["banner"] = {"url": f"https://images.prismic.io/{uid}.png"}
    doc["data"]["content"] = content if content is not None else []
    return doc


def paragraph(text: str, spans: list | None = None) -> dict:
    return {"type": "paragraph", "text": text, "spans": spans or []}


def words(count: int) -> str:
    return " ".join(["palavra"] * count)


def section(heading: str | None, *texts: str) -> dict:
    return {"heading": heading, "body": [paragraph(t) for t in texts]}


def search_page(docs: list, next_page: str | None = None) -> dict:
    return {
        "page": 1,
        "results_per_page": len(docs),
        "next_page": next_page,
        "prev_page": None,
        "results": docs,
    }


# --- Fakes ---


class FakePrismicClient:
    """
    Minimal PrismicClient stand-in.
    Queued payloads are answered to query() in order.
    """

    def __init__(self, responses=None, documents=None, pages=None):
        self.responses = list(responses or [])
        self.documents = documents or {}
        self.pages = pages or {}
        self.calls = []

    async def query(self, predicates, **kwargs):
        self.calls.append(("query", predicates, kwargs))
        if self.responses:
            return self.responses.pop(0)
        return search_page([])

    async def get_by_uid(self, document_type, uid, *, ref=None):
        self.calls.append(("get_by_uid", document_type, uid, ref))
        if uid not in self.documents:
            raise DocumentNotFoundError(uid)
        return self.documents[uid]

    async def get_by_id(self, document_id, *, ref=None):
        self.calls.append(("get_by_id", document_id, ref))
        for doc in self.documents.values():
            if doc.get("id") == document_id:
                return doc
        raise DocumentNotFoundError(document_id)

    async def fetch_page(self, url):
        self.calls.append(("fetch_page", url))
        return self.pages[url]


class FakePostsRepo:
    """
    Minimal repo stand-in used in service tests.
    `posts` are kept in ascending publication order so siblings can be derived.
    """

    def __init__(self, first_page=None, pages=None, posts=None, failing_urls=()):
        self.first_page = first_page or PostPagination()
        self.pages = pages or {}
        self.posts = [PostDetail.model_validate(p) for p in (posts or [])]
        self.failing_urls = set(failing_urls)
        self.calls = []

    async def get_first_page(self, page_size):
        self.calls.append(("first_page", page_size))
        return self.first_page

    async def get_page(self, url):
        self.calls.append(("page", url))
        if url in self.failing_urls:
            raise ContentStoreError("Content store error: 503", status_code=503)
        return self.pages[url]

    async def get_post(self, uid, ref=None):
        self.calls.append(("post", uid, ref))
        return next((p for p in self.posts if p.uid == uid), None)

    async def get_sibling(self, document_id, orderings, ref=None):
        self.calls.append(("sibling", document_id, orderings, ref))
        ids = [p.id for p in self.posts]
        index = ids.index(document_id)
        if orderings == PREVIOUS_ORDERING and index > 0:
            sibling = self.posts[index - 1]
        elif orderings == NEXT_ORDERING and index < len(self.posts) - 1:
            sibling = self.posts[index + 1]
        else:
            return SiblingPost()
        return SiblingPost(uid=sibling.uid, title=sibling.data.title)

    async def list_uids(self, page_size):
        return [p.uid for p in self.first_page.results][:page_size]


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(self, page=None):
        self.page = page
        self.calls = []

    async def get_post_page(self, slug, ref=None, preview=False):
        self.calls.append((slug, ref, preview))
        return self.page.model_copy(update={"slug": slug, "preview": preview})
