import asyncio

import httpx
import pytest
from pytest_httpx import HTTPXMock

from docstore.access.acl import AccessVerifier
from docstore.access.apikeys import ApiKeyCache, KeyCacheSlot
from docstore.errors import InvalidRequest, Unauthorized, UpstreamUnavailable
from tests.tools import ACL_URL, mock_api_key


@pytest.fixture()
def key_cache(verifier: AccessVerifier) -> ApiKeyCache:
    return ApiKeyCache(verifier, KeyCacheSlot())


@pytest.mark.anyio
@pytest.mark.parametrize("api_key", [None, "", "   "])
async def test_blank_key(key_cache: ApiKeyCache, httpx_mock: HTTPXMock, api_key):
    with pytest.raises(InvalidRequest):
        await key_cache.check_or_set(api_key)
    assert httpx_mock.get_requests() == []


@pytest.mark.anyio
async def test_same_key_is_checked_once(key_cache: ApiKeyCache, httpx_mock: HTTPXMock):
    mock_api_key(httpx_mock, "apikey", json=True)
    await key_cache.check_or_set("apikey")
    await key_cache.check_or_set("apikey")
    await key_cache.check_or_set("apikey")
    assert len(httpx_mock.get_requests()) == 1
    assert key_cache.slot.get() == "apikey"


@pytest.mark.anyio
async def test_new_key_replaces_cached_key(key_cache: ApiKeyCache, httpx_mock: HTTPXMock):
    mock_api_key(httpx_mock, "apikey", json=True)
    mock_api_key(httpx_mock, "other-apikey", json={"authorized": True})
    await key_cache.check_or_set("apikey")
    await key_cache.check_or_set("other-apikey")
    assert key_cache.slot.get() == "other-apikey"
    assert len(httpx_mock.get_requests()) == 2


@pytest.mark.anyio
async def test_invalid_key(key_cache: ApiKeyCache, httpx_mock: HTTPXMock):
    mock_api_key(httpx_mock, "apikey", json=True)
    mock_api_key(httpx_mock, "invalid-apikey", json=False, is_reusable=True)
    await key_cache.check_or_set("apikey")
    with pytest.raises(Unauthorized):
        await key_cache.check_or_set("invalid-apikey")
    # an invalid key is not cached, so it is checked again
    with pytest.raises(Unauthorized):
        await key_cache.check_or_set("invalid-apikey")
    assert key_cache.slot.get() == "apikey"
    assert len(httpx_mock.get_requests()) == 3


@pytest.mark.anyio
async def test_unavailable_acl_keeps_cached_key(key_cache: ApiKeyCache, httpx_mock: HTTPXMock):
    key_cache.slot.set("apikey")
    mock_api_key(httpx_mock, "delayed-apikey", status_code=503, is_reusable=True)
    with pytest.raises(UpstreamUnavailable):
        await key_cache.check_or_set("delayed-apikey")
    assert key_cache.slot.get() == "apikey"
    # the cached key still works without asking the ACL service
    n = len(httpx_mock.get_requests())
    await key_cache.check_or_set("apikey")
    assert len(httpx_mock.get_requests()) == n


@pytest.mark.anyio
async def test_concurrent_keys_last_writer_wins():
    in_flight = []
    overlapping = []

    async def validate(request: httpx.Request) -> httpx.Response:
        key = request.headers["ApiKey"]
        in_flight.append(key)
        overlapping.append(len(in_flight))
        # the first key is answered after the second one
        await asyncio.sleep(0.1 if key == "apikey" else 0.01)
        in_flight.remove(key)
        return httpx.Response(200, json=True)

    async with httpx.AsyncClient(base_url=ACL_URL, transport=httpx.MockTransport(validate)) as client:
        key_cache = ApiKeyCache(AccessVerifier(client, initial_backoff=0.01, expiration=1, call_timeout=0.5), KeyCacheSlot())
        await asyncio.gather(key_cache.check_or_set("apikey"), key_cache.check_or_set("other-apikey"))
    # both checks were waiting for the ACL service at the same time
    assert max(overlapping) == 2
    # the slow check finished last, so its key is remembered
    assert key_cache.slot.get() == "apikey"


def test_slot_starts_empty():
    slot = KeyCacheSlot()
    assert slot.get() == ""
    slot.set("apikey")
    assert slot.get() == "apikey"
