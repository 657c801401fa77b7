import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx

from docstore.access.acl import AccessVerifier
from docstore.access.apikeys import ApiKeyCache, KeyCacheSlot
from docstore.config import get_settings
from docstore.models import DocumentCategory
from docstore.storage.documents import DocumentStore
from docstore.storage.files import FileStore
from docstore.storage.paths import path_resolver


class DocstoreConnections:
    acl_client: httpx.AsyncClient | None
    file_executor: ThreadPoolExecutor | None
    verifier: AccessVerifier | None
    api_key_cache: ApiKeyCache | None
    stores: dict[DocumentCategory, DocumentStore]

    def __init__(self):
        self.acl_client = None
        self.file_executor = None
        self.verifier = None
        self.api_key_cache = None
        self.stores = {}


CONNECTIONS = DocstoreConnections()


@asynccontextmanager
async def docstore_connections() -> AsyncGenerator[None, None]:
    """
    The main context manager to start and stop the connections used by docstore.
    Always use this once (and only once):
        - For running the server: in the FastAPI lifespan
        - For tests: in the setup fixture in the tests
        - For CLI commands: within the CLI command
    """
    try:
        _start_acl()
        _start_file_store()
        yield
    finally:
        await _close_acl()
        _close_file_store()


def acl() -> AccessVerifier:
    """
    Use this function to access the ACL service.
    """
    if CONNECTIONS.verifier is None:
        raise ConnectionError("ACL client not started")
    return CONNECTIONS.verifier


def api_key_cache() -> ApiKeyCache:
    if CONNECTIONS.api_key_cache is None:
        raise ConnectionError("ACL client not started")
    return CONNECTIONS.api_key_cache


def document_store(category: DocumentCategory) -> DocumentStore:
    """
    Use this function to get the document store of the given category.
    """
    if category not in CONNECTIONS.stores:
        raise ConnectionError("File store not started")
    return CONNECTIONS.stores[category]


def _start_acl() -> None:
    settings = get_settings()
    logging.debug(f"Connecting with the ACL service at {settings.acl_url}")

    CONNECTIONS.acl_client = httpx.AsyncClient(base_url=settings.acl_url, timeout=settings.acl_timeout)
    CONNECTIONS.verifier = AccessVerifier(
        CONNECTIONS.acl_client,
        initial_backoff=settings.retry_initial_backoff_ms / 1000,
        expiration=settings.retry_expiration_ms / 1000,
        call_timeout=settings.acl_timeout,
    )
    # The key cache slot lives as long as the connections do
    CONNECTIONS.api_key_cache = ApiKeyCache(CONNECTIONS.verifier, KeyCacheSlot())


def _start_file_store() -> None:
    settings = get_settings()
    CONNECTIONS.file_executor = ThreadPoolExecutor(max_workers=settings.file_workers, thread_name_prefix="docstore-io")
    files = FileStore(CONNECTIONS.file_executor)
    for category in DocumentCategory:
        root = settings.document_root(category).absolute()
        logging.debug(f"Storing {category.value} documents in {root}")
        CONNECTIONS.stores[category] = DocumentStore(category, path_resolver(category, root), files)


async def _close_acl() -> None:
    if CONNECTIONS.acl_client is not None:
        await CONNECTIONS.acl_client.aclose()
    CONNECTIONS.acl_client = None
    CONNECTIONS.verifier = None
    CONNECTIONS.api_key_cache = None


def _close_file_store() -> None:
    if CONNECTIONS.file_executor is not None:
        CONNECTIONS.file_executor.shutdown(wait=True)
    CONNECTIONS.file_executor = None
    CONNECTIONS.stores = {}
