import pytest
from httpx import AsyncClient
from pytest_httpx import HTTPXMock

from tests.tools import access, mock_access


def put_file(path, content: bytes):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


@pytest.mark.anyio
async def test_token_required(client: AsyncClient, httpx_mock: HTTPXMock):
    for url in ["/api/performance", "/api/document/1", "/api/attachment/1"]:
        res = await client.get(url)
        assert res.status_code == 400, res.text
    assert httpx_mock.get_requests() == []


@pytest.mark.anyio
async def test_get_user_document(client: AsyncClient, connections, httpx_mock: HTTPXMock):
    put_file(connections.user_document_dir / "fake" / "90" / "document.pdf", b"%PDF fake")
    mock_access(httpx_mock, "document/1", "test-token", json=access("FAKE", "1267890", "document.pdf"))
    res = await client.get("/api/document/1", headers={"Token": "test-token"})
    assert res.status_code == 200, res.text
    assert res.headers["content-type"] == "application/octet-stream"
    assert res.content == b"%PDF fake"


@pytest.mark.anyio
async def test_get_attachment(client: AsyncClient, connections, httpx_mock: HTTPXMock):
    put_file(connections.attachment_dir / "fake" / "handbook.pdf", b"handbook")
    mock_access(httpx_mock, "attachment/2", "test-token", json=access("FAKE", "1267890", "handbook.pdf"))
    res = await client.get("/api/attachment/2", headers={"Token": "test-token"})
    assert res.status_code == 200, res.text
    assert res.content == b"handbook"


@pytest.mark.anyio
async def test_get_attachment_without_user(client: AsyncClient, connections, httpx_mock: HTTPXMock):
    put_file(connections.attachment_dir / "fake" / "handbook.pdf", b"handbook")
    mock_access(httpx_mock, "attachment/2", "test-token", json=access("FAKE", "", "handbook.pdf"))
    res = await client.get("/api/attachment/2", headers={"Token": "test-token"})
    assert res.status_code == 404
    assert res.content == b""


@pytest.mark.anyio
async def test_get_performance_result(client: AsyncClient, connections, httpx_mock: HTTPXMock):
    put_file(connections.performance_result_dir / "fake" / "1267890", b"performance")
    mock_access(httpx_mock, "performance-document", "test-token", json=access("FAKE", "1267890"))
    res = await client.get("/api/performance", headers={"Token": "test-token"})
    assert res.status_code == 200, res.text
    assert res.content == b"performance"


@pytest.mark.anyio
async def test_get_missing_document(client: AsyncClient, httpx_mock: HTTPXMock):
    mock_access(httpx_mock, "document/1", "test-token", json=access("FAKE", "1267890", "doesNotExist.pdf"))
    res = await client.get("/api/document/1", headers={"Token": "test-token"})
    assert res.status_code == 404
    assert res.content == b""


@pytest.mark.anyio
async def test_get_without_access(client: AsyncClient, connections, httpx_mock: HTTPXMock):
    put_file(connections.user_document_dir / "fake" / "90" / "document.pdf", b"%PDF fake")
    mock_access(httpx_mock, "document/1", "invalid-token", json=access())
    res = await client.get("/api/document/1", headers={"Token": "invalid-token"})
    assert res.status_code == 404
    assert res.content == b""
    assert len(httpx_mock.get_requests()) == 1


@pytest.mark.anyio
async def test_get_acl_unavailable(client: AsyncClient, httpx_mock: HTTPXMock):
    mock_access(httpx_mock, "attachment/1", "test-token", status_code=500, is_reusable=True)
    res = await client.get("/api/attachment/1", headers={"Token": "test-token"})
    assert res.status_code == 404
    assert res.content == b""
    assert len(httpx_mock.get_requests()) > 1


@pytest.mark.anyio
async def test_get_invalid_resource_id(client: AsyncClient, httpx_mock: HTTPXMock):
    res = await client.get("/api/document/abc", headers={"Token": "test-token"})
    assert res.status_code == 422
    assert httpx_mock.get_requests() == []
