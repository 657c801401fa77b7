"""
Check the API key of the application that writes or removes documents

Only the last valid key is remembered. A single trusted application is expected to call the
write endpoints, so checking the same key again costs no call to the ACL service. Concurrent
checks with different keys each call the ACL service, and the last valid one is kept.
"""

import logging
import threading

from docstore.access.acl import AccessVerifier
from docstore.errors import InvalidRequest, Unauthorized


class KeyCacheSlot:
    """Holds the last validated API key, or an empty string"""

    def __init__(self):
        self._key = ""
        self._lock = threading.Lock()

    def get(self) -> str:
        with self._lock:
            return self._key

    def set(self, key: str) -> None:
        with self._lock:
            self._key = key


class ApiKeyCache:
    def __init__(self, verifier: AccessVerifier, slot: KeyCacheSlot):
        self.verifier = verifier
        self.slot = slot

    async def check_or_set(self, api_key: str | None) -> None:
        """
        Check the given key. If it differs from the cached key, it is validated by the ACL service
        and cached if it is valid.
        :raises InvalidRequest: if the key is empty
        :raises Unauthorized: if the ACL service says the key is not valid
        :raises UpstreamUnavailable: if the ACL service cannot be reached before the deadline
        """
        if not api_key or not api_key.strip():
            raise InvalidRequest("ApiKey must be set")
        if api_key == self.slot.get():
            return
        auth = await self.verifier.validate_key(api_key)
        if not auth.authorized:
            logging.warning("Invalid ApiKey provided")
            raise Unauthorized("Invalid ApiKey")
        self.slot.set(api_key)
