import logging
from typing import Any, Dict, List, Optional

import httpx
from fastapi import Depends, Request

from app.exceptions import ContentStoreError, DataShapeError, DocumentNotFoundError
from app.settings import settings

logger = logging.getLogger(__name__)


def at(path: str, value: str) -> str:
    """Render an equality predicate in the Prismic query syntax."""
    return f'[at({path}, "{value}")]'


class PrismicClient:
    """
    Thin async client for the Prismic REST API (v2).
    Every query runs against a ref: the master ref by default, or a
    preview ref when one is supplied.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        endpoint: Optional[str] = None,
        access_token: Optional[str] = None,
    ):
        self.http = http
        self.endpoint = (endpoint or settings.PRISMIC_API_ENDPOINT).rstrip("/")
        self.access_token = (
            access_token
            if access_token is not None
            else settings.PRISMIC_ACCESS_TOKEN
        )
        self._master_ref: Optional[str] = None

    @property
    def search_url(self) -> str:
        return f"{self.endpoint}/documents/search"

    async def get_master_ref(self) -> str:
        if self._master_ref is None:
            payload = await self._get_json(self.endpoint, self._auth_params())
            refs = payload.get("refs") if isinstance(payload, dict) else None
            master = next(
                (r for r in refs or [] if isinstance(r, dict) and r.get("isMasterRef")),
                None,
            )
            if not master or not master.get("ref"):
                raise DataShapeError("Content store API root has no master ref")
            self._master_ref = master["ref"]
        return self._master_ref

    async def query(
        self,
        predicates: List[str],
        *,
        page_size: int = 20,
        orderings: Optional[str] = None,
        after: Optional[str] = None,
        ref: Optional[str] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "ref": ref or await self.get_master_ref(),
            "q": f"[{''.join(predicates)}]",
            "pageSize": page_size,
            **self._auth_params(),
        }
        if orderings:
            params["orderings"] = orderings
        if after:
            params["after"] = after

        return _check_results(await self._get_json(self.search_url, params))

    async def get_by_uid(
        self, document_type: str, uid: str, *, ref: Optional[str] = None
    ) -> Dict[str, Any]:
        payload = await self.query(
            [at(f"my.{document_type}.uid", uid)], page_size=1, ref=ref
        )
        if not payload["results"]:
            raise DocumentNotFoundError(uid)
        return payload["results"][0]

    async def get_by_id(
        self, document_id: str, *, ref: Optional[str] = None
    ) -> Dict[str, Any]:
        payload = await self.query(
            [at("document.id", document_id)], page_size=1, ref=ref
        )
        if not payload["results"]:
            raise DocumentNotFoundError(document_id)
        return payload["results"][0]

    async def fetch_page(self, url: str) -> Dict[str, Any]:
        """Fetch a `next_page` URL handed out by a previous search response."""
        return _check_results(await self._get_json(url))

    def _auth_params(self) -> Dict[str, str]:
        if self.access_token:
            return {"access_token": self.access_token}
        return {}

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None):
        try:
            response = await self.http.get(url, params=params)
        except httpx.RequestError as e:
            logger.error(f"Request to content store failed ({url}): {e}")
            raise ContentStoreError(f"Content store request failed: {e}") from e

        if response.status_code >= 400:
            raise ContentStoreError(
                f"Content store error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise DataShapeError(
                "Content store returned invalid JSON", original_error=e
            ) from e


def _check_results(payload) -> Dict[str, Any]:
    if not isinstance(payload, dict) or not isinstance(payload.get("results"), list):
        raise DataShapeError("Search response has no results list")
    return payload


def get_http_client(request: Request) -> httpx.AsyncClient:
    """The shared client opened by the application lifespan."""
    return request.app.state.http_client


def get_prismic(http: httpx.AsyncClient = Depends(get_http_client)) -> PrismicClient:
    """
    Create a Prismic client bound to the shared HTTP client.
    Called per request so the master ref is looked up fresh.
    """
    return PrismicClient(http)
