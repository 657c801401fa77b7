"""
Resolve the location of a document on the file system

Every organization has its own folder within the root directory of a document category.
Below that, each category lays out its files differently:

- user documents are grouped in shard folders derived from the user ID
- attachments are shared within the organization, so the user ID is not part of the path
- the user ID is the file name of a performance result
"""

from pathlib import Path
from typing import Protocol

from docstore.models import DocumentCategory

# Number of leading user ID characters that are dropped to get the shard folder name
SHARD_OFFSET = 5


class PathResolver(Protocol):
    root: Path

    def resolve(self, organization_id: str, user_id: str | None, file_name: str | None) -> Path: ...


class UserDocumentPathResolver:
    """
    User IDs have a fixed length (e.g. 2312345). Instead of creating a folder per user, the characters
    after the first five name the folder, so users 2312345 and 3423945 share the folder "45".
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def resolve(self, organization_id: str, user_id: str | None, file_name: str | None) -> Path:
        return self.root / organization_id.lower() / shard(user_id or "") / (file_name or "")


class AttachmentPathResolver:
    def __init__(self, root: Path):
        self.root = Path(root)

    def resolve(self, organization_id: str, user_id: str | None, file_name: str | None) -> Path:
        return self.root / organization_id.lower() / (file_name or "")


class PerformanceResultPathResolver:
    def __init__(self, root: Path):
        self.root = Path(root)

    def resolve(self, organization_id: str, user_id: str | None, file_name: str | None) -> Path:
        return self.root / organization_id.lower() / (user_id or "").lower()


RESOLVERS: dict[DocumentCategory, type[PathResolver]] = {
    DocumentCategory.user_document: UserDocumentPathResolver,
    DocumentCategory.attachment: AttachmentPathResolver,
    DocumentCategory.performance_result: PerformanceResultPathResolver,
}


def shard(user_id: str) -> str:
    """
    Return the shard folder name for this user ID
    :raises IndexError: if the user ID is too short to leave a non-empty folder name
    """
    if len(user_id) <= SHARD_OFFSET:
        raise IndexError(f"User ID {user_id!r} is too short, it needs more than {SHARD_OFFSET} characters")
    return user_id.lower()[SHARD_OFFSET:]


def path_resolver(category: DocumentCategory, root: Path) -> PathResolver:
    return RESOLVERS[category](root)
