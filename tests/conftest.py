from concurrent.futures import ThreadPoolExecutor

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from docstore import api
from docstore.access.acl import AccessVerifier
from docstore.connections import docstore_connections
from docstore.models import DocumentCategory
from docstore.storage.documents import DocumentStore
from docstore.storage.files import FileStore
from docstore.storage.paths import path_resolver
from tests.tools import ACL_URL, docstore_settings


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def file_store():
    executor = ThreadPoolExecutor(max_workers=2)
    yield FileStore(executor)
    executor.shutdown(wait=True)


@pytest.fixture()
def stores(tmp_path, file_store) -> dict[DocumentCategory, DocumentStore]:
    """A document store per category, each with its own root directory below tmp_path"""
    return {
        category: DocumentStore(category, path_resolver(category, tmp_path / category.value), file_store)
        for category in DocumentCategory
    }


@pytest.fixture()
async def verifier():
    async with httpx.AsyncClient(base_url=ACL_URL) as client:
        yield AccessVerifier(client, initial_backoff=0.01, expiration=0.3, call_timeout=0.2)


@pytest.fixture()
async def connections(tmp_path):
    """Start the docstore connections with the ACL service mocked and the documents stored below tmp_path"""
    with docstore_settings(
        acl_url=ACL_URL,
        acl_timeout=0.2,
        retry_initial_backoff_ms=10,
        retry_expiration_ms=300,
        user_document_dir=tmp_path / "user",
        attachment_dir=tmp_path / "attachment",
        performance_result_dir=tmp_path / "performance",
        file_workers=2,
    ) as settings:
        async with docstore_connections():
            yield settings


@pytest.fixture()
async def client(connections):
    async with AsyncClient(transport=ASGITransport(app=api.app), base_url="http://test", follow_redirects=False) as client:
        yield client
