from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class PostSummaryData(BaseModel):
    title: str
    subtitle: Optional[str] = None
    author: Optional[str] = None


class PostSummary(BaseModel):
    uid: str
    first_publication_date: Optional[str] = None
    data: PostSummaryData


class PostPagination(BaseModel):
    next_page: Optional[str] = None
    results: List[PostSummary] = Field(default_factory=list)


class Banner(BaseModel):
    url: Optional[str] = None


class ContentSection(BaseModel):
    heading: Optional[str] = None
    body: List[Dict[str, Any]] = Field(default_factory=list)


class PostDetailData(BaseModel):
    title: str
    subtitle: Optional[str] = None
    banner: Banner = Field(default_factory=Banner)
    author: Optional[str] = None
    content: List[ContentSection] = Field(default_factory=list)


class PostDetail(BaseModel):
    id: str
    uid: str
    first_publication_date: Optional[str] = None
    last_publication_date: Optional[str] = None
    data: PostDetailData


class SiblingPost(BaseModel):
    uid: Optional[str] = None
    title: Optional[str] = None


class PostNavigation(BaseModel):
    prevPost: SiblingPost = Field(default_factory=SiblingPost)
    nextPost: SiblingPost = Field(default_factory=SiblingPost)


class PostPageState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    NOT_FOUND = "not_found"


class PostPage(BaseModel):
    state: PostPageState
    slug: str
    post: Optional[PostDetail] = None
    navigation: PostNavigation = Field(default_factory=PostNavigation)
    readingTime: Optional[int] = None
    preview: bool = False
