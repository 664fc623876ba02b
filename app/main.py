import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from app.db.prismic import PrismicClient
from app.repos.posts_repo import PrismicPostsRepo
from app.routers import pages, posts, preview
from app.services.static_paths import prime_static_paths, static_paths
from app.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="spacetraveling", description="Blog front-end over Prismic")


@asynccontextmanager
async def lifespan(app: FastAPI):
    http_client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
    app.state.http_client = http_client

    try:
        repo = PrismicPostsRepo(PrismicClient(http_client))
        await prime_static_paths(repo, static_paths, settings.STATIC_PATHS_PAGE_SIZE)
        yield
    finally:
        await http_client.aclose()
        logger.info("Content store HTTP client closed")


app.router.lifespan_context = lifespan

app.include_router(pages.router)
app.include_router(posts.router)
app.include_router(preview.router)


@app.get("/health")
async def health():
    return {"message": "spacetraveling is running"}
