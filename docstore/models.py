from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DocumentCategory(str, Enum):
    """The kinds of documents the server stores, each with its own root directory"""

    #: private documents of a single user
    user_document = "user_document"

    #: documents shared within an organization
    attachment = "attachment"

    #: performance report of a single user, put in place by the administrators
    performance_result = "performance_result"


# Identification fields that must be non-blank to store or remove a document of the given category
REQUIRED_FIELDS: dict[DocumentCategory, tuple[str, ...]] = {
    DocumentCategory.user_document: ("organization_id", "user_id", "file_name"),
    DocumentCategory.attachment: ("organization_id", "file_name"),
    DocumentCategory.performance_result: ("organization_id", "user_id"),
}

# Fields an ACL access answer must fill in to grant reading a document.
# Attachment answers name the reading user as well.
ACCESS_REQUIRED_FIELDS: dict[DocumentCategory, tuple[str, ...]] = {
    **REQUIRED_FIELDS,
    DocumentCategory.attachment: ("organization_id", "user_id", "file_name"),
}


class DocumentIdentity(BaseModel):
    """The (organization, user, file name) triple that identifies a stored document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    organization_id: str = Field(description="The organization that owns the document")
    user_id: str = Field("", description="The user that owns the document (not part of an attachment path)")
    file_name: str = Field("", description="The name of the file (not used for performance results)")

    required_fields: ClassVar[dict[DocumentCategory, tuple[str, ...]]] = REQUIRED_FIELDS

    def missing_fields(self, category: DocumentCategory) -> list[str]:
        """Return the required identification fields that are blank for this category"""
        return [name for name in self.required_fields[category] if not getattr(self, name).strip()]


class DocumentAccess(DocumentIdentity):
    """
    The ACL answer to an access check: the location of the requested document.

    If the user has no access to the document, the ACL service returns empty fields.
    """

    required_fields: ClassVar[dict[DocumentCategory, tuple[str, ...]]] = ACCESS_REQUIRED_FIELDS


class RemoveDocumentRequest(DocumentIdentity):
    pass


class CreateDocumentRequest(DocumentIdentity):
    content: str = Field(description="The document content in Base64 format")


class ApplicationAuth(BaseModel):
    authorized: bool = Field(description="Whether the calling application may write and delete documents")

    @classmethod
    def from_response(cls, data) -> "ApplicationAuth":
        """The ACL service answers either with a plain JSON boolean or with an object"""
        if isinstance(data, bool):
            return cls(authorized=data)
        return cls.model_validate(data)
