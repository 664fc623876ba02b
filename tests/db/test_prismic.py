"""PrismicClient tests; respx mocks every HTTP call."""

import httpx
import pytest
import respx

from app.db.prismic import PrismicClient, at
from app.exceptions import ContentStoreError, DataShapeError, DocumentNotFoundError
from tests.conftest import search_page, summary_doc

ENDPOINT = "https://blog.cdn.prismic.io/api/v2"
SEARCH_URL = f"{ENDPOINT}/documents/search"
API_ROOT = {
    "refs": [
        {"id": "preview-x", "ref": "draft-ref", "isMasterRef": False},
        {"id": "master", "ref": "master-ref", "isMasterRef": True},
    ]
}


def make_client(http: httpx.AsyncClient, token: str = "") -> PrismicClient:
    return PrismicClient(http, endpoint=ENDPOINT, access_token=token)


def test_at_renders_predicate():
    assert at("document.type", "posts") == '[at(document.type, "posts")]'


@pytest.mark.asyncio
@respx.mock
async def test_query_uses_master_ref_and_encodes_options():
    respx.get(ENDPOINT).mock(return_value=httpx.Response(200, json=API_ROOT))
    search = respx.get(SEARCH_URL).mock(
        return_value=httpx.Response(200, json=search_page([summary_doc("a")]))
    )

    async with httpx.AsyncClient() as http:
        client = make_client(http)
        payload = await client.query(
            [at("document.type", "posts")],
            page_size=1,
            orderings="[document.first_publication_date]",
            after="id-a",
        )

    assert payload["results"][0]["uid"] == "a"
    params = search.calls.last.request.url.params
    assert params["ref"] == "master-ref"
    assert params["q"] == '[[at(document.type, "posts")]]'
    assert params["pageSize"] == "1"
    assert params["orderings"] == "[document.first_publication_date]"
    assert params["after"] == "id-a"
    assert "access_token" not in params


@pytest.mark.asyncio
@respx.mock
async def test_master_ref_is_looked_up_once_per_client():
    root = respx.get(ENDPOINT).mock(return_value=httpx.Response(200, json=API_ROOT))
    respx.get(SEARCH_URL).mock(
        return_value=httpx.Response(200, json=search_page([]))
    )

    async with httpx.AsyncClient() as http:
        client = make_client(http)
        await client.query([at("document.type", "posts")])
        await client.query([at("document.type", "posts")])

    assert root.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_explicit_ref_skips_master_lookup_and_sends_token():
    root = respx.get(ENDPOINT).mock(return_value=httpx.Response(200, json=API_ROOT))
    search = respx.get(SEARCH_URL).mock(
        return_value=httpx.Response(200, json=search_page([]))
    )

    async with httpx.AsyncClient() as http:
        client = make_client(http, token="secret-token")
        await client.query([at("document.type", "posts")], ref="draft-ref")

    assert root.call_count == 0
    params = search.calls.last.request.url.params
    assert params["ref"] == "draft-ref"
    assert params["access_token"] == "secret-token"


@pytest.mark.asyncio
@respx.mock
async def test_get_by_uid_returns_first_result():
    respx.get(ENDPOINT).mock(return_value=httpx.Response(200, json=API_ROOT))
    search = respx.get(SEARCH_URL).mock(
        return_value=httpx.Response(200, json=search_page([summary_doc("hello")]))
    )

    async with httpx.AsyncClient() as http:
        doc = await make_client(http).get_by_uid("posts", "hello")

    assert doc["uid"] == "hello"
    assert search.calls.last.request.url.params["q"] == (
        '[[at(my.posts.uid, "hello")]]'
    )


@pytest.mark.asyncio
@respx.mock
async def test_get_by_uid_raises_not_found_on_empty_results():
    respx.get(ENDPOINT).mock(return_value=httpx.Response(200, json=API_ROOT))
    respx.get(SEARCH_URL).mock(
        return_value=httpx.Response(200, json=search_page([]))
    )

    async with httpx.AsyncClient() as http:
        with pytest.raises(DocumentNotFoundError) as exc_info:
            await make_client(http).get_by_uid("posts", "missing")

    assert exc_info.value.identifier == "missing"
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
@respx.mock
async def test_get_by_id_queries_document_id_with_ref():
    search = respx.get(SEARCH_URL).mock(
        return_value=httpx.Response(200, json=search_page([summary_doc("draft")]))
    )

    async with httpx.AsyncClient() as http:
        doc = await make_client(http).get_by_id("id-draft", ref="draft-ref")

    assert doc["id"] == "id-draft"
    params = search.calls.last.request.url.params
    assert params["q"] == '[[at(document.id, "id-draft")]]'
    assert params["ref"] == "draft-ref"


@pytest.mark.asyncio
@respx.mock
async def test_fetch_page_follows_next_page_url_verbatim():
    next_url = f"{SEARCH_URL}?ref=master-ref&page=2&pageSize=1"
    route = respx.get(SEARCH_URL).mock(
        return_value=httpx.Response(200, json=search_page([summary_doc("b")]))
    )

    async with httpx.AsyncClient() as http:
        payload = await make_client(http).fetch_page(next_url)

    assert payload["results"][0]["uid"] == "b"
    params = route.calls.last.request.url.params
    assert params["page"] == "2"
    assert params["ref"] == "master-ref"


@pytest.mark.asyncio
@respx.mock
async def test_http_error_raises_content_store_error():
    respx.get(SEARCH_URL).mock(return_value=httpx.Response(503))

    async with httpx.AsyncClient() as http:
        with pytest.raises(ContentStoreError) as exc_info:
            await make_client(http).query([], ref="master-ref")

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
@respx.mock
async def test_transport_error_raises_content_store_error():
    respx.get(SEARCH_URL).mock(side_effect=httpx.ConnectError("refused"))

    async with httpx.AsyncClient() as http:
        with pytest.raises(ContentStoreError) as exc_info:
            await make_client(http).query([], ref="master-ref")

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
@respx.mock
async def test_invalid_json_raises_data_shape_error():
    respx.get(SEARCH_URL).mock(
        return_value=httpx.Response(200, content=b"<html>oops</html>")
    )

    async with httpx.AsyncClient() as http:
        with pytest.raises(DataShapeError):
            await make_client(http).query([], ref="master-ref")


@pytest.mark.asyncio
@respx.mock
async def test_payload_without_results_raises_data_shape_error():
    respx.get(SEARCH_URL).mock(
        return_value=httpx.Response(200, json={"next_page": None})
    )

    async with httpx.AsyncClient() as http:
        with pytest.raises(DataShapeError):
            await make_client(http).query([], ref="master-ref")


@pytest.mark.asyncio
@respx.mock
async def test_missing_master_ref_raises_data_shape_error():
    respx.get(ENDPOINT).mock(return_value=httpx.Response(200, json={"refs": []}))

    async with httpx.AsyncClient() as http:
        with pytest.raises(DataShapeError, match="master ref"):
            await make_client(http).get_master_ref()
