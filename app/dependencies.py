from fastapi import Depends

from app.db.prismic import get_prismic
from app.repos.posts_repo import PrismicPostsRepo
from app.services.listing_service import ListingService
from app.services.posts_service import PostsService
from app.services.static_paths import StaticPathRegistry, static_paths


def get_posts_repo(client=Depends(get_prismic)):
    return PrismicPostsRepo(client)


def get_listing_service(repo=Depends(get_posts_repo)):
    return ListingService(repo)


def get_posts_service(repo=Depends(get_posts_repo)):
    return PostsService(repo)


def get_static_paths() -> StaticPathRegistry:
    return static_paths
