"""
Delegate access checks to the document access checker service (ACL)

The file server has no session or user state of its own: every read is authorized by asking
the ACL service which document the token may access, and every write by asking whether the
API key of the calling application is valid.

Failed calls (timeouts, transport errors, non-2xx responses) are retried with an exponential
backoff until an absolute deadline. A valid answer that denies access is final and is not retried.
"""

import asyncio
import logging
import random
from typing import Any

import httpx

from docstore.errors import Unauthorized, UpstreamUnavailable
from docstore.models import ApplicationAuth, DocumentAccess, DocumentCategory

TOKEN_HEADER = "Token"
API_KEY_HEADER = "ApiKey"

ACL_ENDPOINTS: dict[DocumentCategory, str] = {
    DocumentCategory.user_document: "/document-access/document/{resource_id}",
    DocumentCategory.attachment: "/document-access/attachment/{resource_id}",
    DocumentCategory.performance_result: "/document-access/performance-document",
}
KEY_ENDPOINT = "/document-access/key"

BACKOFF_FACTOR = 2
BACKOFF_JITTER = 0.5


class AccessVerifier:
    def __init__(self, client: httpx.AsyncClient, initial_backoff: float, expiration: float, call_timeout: float):
        """
        :param client: client with the ACL service as base_url
        :param initial_backoff: seconds to wait before the first retry
        :param expiration: seconds after the first attempt after which retrying stops
        :param call_timeout: maximum seconds a single attempt may take
        """
        self.client = client
        self.initial_backoff = initial_backoff
        self.expiration = expiration
        self.call_timeout = call_timeout

    async def verify(self, category: DocumentCategory, token: str, resource_id: int | None = None) -> DocumentAccess:
        """
        Ask the ACL service which document file the token gives access to

        Performance results are identified by the token alone, other categories need the resource ID.
        :raises Unauthorized: if the ACL service denies access
        :raises UpstreamUnavailable: if the ACL service cannot be reached before the deadline
        """
        if category != DocumentCategory.performance_result and resource_id is None:
            raise ValueError(f"A resource ID is needed to check access to a {category.value}")
        url = ACL_ENDPOINTS[category].format(resource_id=resource_id)
        access = await self._call(url, {TOKEN_HEADER: token}, DocumentAccess.model_validate)
        if missing := access.missing_fields(category):
            raise Unauthorized(f"No access to {category.value} {resource_id or ''} (empty {', '.join(missing)})")
        return access

    async def validate_key(self, api_key: str) -> ApplicationAuth:
        """
        Ask the ACL service whether the calling application's API key is valid
        :raises UpstreamUnavailable: if the ACL service cannot be reached before the deadline
        """
        return await self._call(KEY_ENDPOINT, {API_KEY_HEADER: api_key}, ApplicationAuth.from_response)

    async def _call(self, url: str, headers: dict[str, str], parse):
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.expiration
        backoff = self.initial_backoff
        attempt = 0
        while True:
            attempt += 1
            remaining = deadline - loop.time()
            try:
                data = await asyncio.wait_for(self._get(url, headers), timeout=min(self.call_timeout, remaining))
                return parse(data)
            except (httpx.HTTPError, asyncio.TimeoutError, ValueError) as e:
                wait = backoff * random.uniform(1 - BACKOFF_JITTER, 1 + BACKOFF_JITTER)
                if loop.time() + wait >= deadline:
                    logging.error(f"ACL call {url} failed {attempt} times, giving up: {e!r}")
                    raise UpstreamUnavailable(f"ACL service unavailable for {url} after {attempt} attempts") from e
                logging.warning(f"ACL call {url} failed (attempt {attempt}), retrying in {wait:.3f}s: {e!r}")
                await asyncio.sleep(wait)
                backoff *= BACKOFF_FACTOR

    async def _get(self, url: str, headers: dict[str, str]) -> Any:
        r = await self.client.get(url, headers=headers)
        r.raise_for_status()
        return r.json()
