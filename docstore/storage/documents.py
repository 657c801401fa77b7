"""
Store, read and remove documents of one category

A request is validated first, then turned into a file path by the category's path resolver.
Nothing touches the file system before the request is known to be valid.
"""

import base64
import binascii
import logging
from pathlib import Path

from docstore.errors import InvalidContent, InvalidRequest
from docstore.models import (
    CreateDocumentRequest,
    DocumentAccess,
    DocumentCategory,
    DocumentIdentity,
    RemoveDocumentRequest,
)
from docstore.storage.files import FileStore
from docstore.storage.paths import PathResolver


class DocumentStore:
    def __init__(self, category: DocumentCategory, resolver: PathResolver, files: FileStore):
        self.category = category
        self.resolver = resolver
        self.files = files

    async def read(self, access: DocumentAccess) -> bytes:
        """
        Read the document identified by the access check.

        We assume that the documents are small enough to be read into memory at once.
        :raises InvalidRequest: if the document cannot be identified
        :raises NotFound: if the document does not exist
        """
        path = self.document_path(access)
        return await self.files.read(path)

    async def write(self, request: CreateDocumentRequest) -> None:
        """
        Decode the content and write it to the document's path, creating the directory if needed.
        An existing document is replaced.
        :raises InvalidRequest: if the document cannot be identified or the content is missing
        :raises InvalidContent: if the content is not Base64
        :raises IOFailure: if the directory or the file cannot be written
        """
        path = self.document_path(request)
        if not request.content.strip():
            raise InvalidRequest(f"{self.label} content must be set")
        content = decode_content(request.content)
        await self.files.mkdirs(path.parent)
        await self.files.write(path, content)

    async def remove(self, request: RemoveDocumentRequest) -> None:
        """
        Remove the document. Removing a document that does not exist succeeds.
        :raises InvalidRequest: if the document cannot be identified
        :raises IOFailure: if the file exists but cannot be deleted
        """
        path = self.document_path(request)
        await self.files.delete(path)

    @property
    def label(self) -> str:
        return self.category.value.replace("_", " ").capitalize()

    def document_path(self, document: DocumentIdentity) -> Path:
        if missing := document.missing_fields(self.category):
            raise InvalidRequest(f"{self.label} file cannot be identified, missing {', '.join(missing)}")
        try:
            return self.resolver.resolve(document.organization_id, document.user_id, document.file_name)
        except IndexError as e:
            raise InvalidRequest(f"{self.label} file cannot be identified: {e}") from e


def decode_content(content: str) -> bytes:
    """
    Decode standard (not URL-safe) Base64 content
    :raises InvalidContent: if the content is not valid Base64
    """
    try:
        return base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError) as e:
        logging.warning(f"Document content is not Base64: {e}")
        raise InvalidContent(f"Document content is not valid Base64: {e}") from e
