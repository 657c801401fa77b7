"""
API Endpoints to read documents

Every read is authorized by the ACL service, using the token of the user. If the user or the document
cannot be identified, the user has no access to the document, or the document does not exist, an empty
404 response is returned, so the caller cannot tell these cases apart.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status

from docstore.api.auth import user_token
from docstore.connections import acl, document_store
from docstore.models import DocumentCategory

app_documents = APIRouter(prefix="/api", tags=["documents"])

OCTET_STREAM = "application/octet-stream"
READ_RESPONSES: dict = {
    200: {"description": "The document content in binary format", "content": {OCTET_STREAM: {}}},
    400: {"description": "If the Token is missing from the header"},
    404: {"description": "If the document is not found, or the user has no access to it"},
}


@app_documents.get("/performance", response_class=Response, responses=READ_RESPONSES)
async def get_performance_result(token: str = Depends(user_token)):
    """Get the performance report of the user identified by the token."""
    return await read_document(DocumentCategory.performance_result, token)


@app_documents.get("/document/{document_id}", response_class=Response, responses=READ_RESPONSES)
async def get_user_document(
    document_id: Annotated[int, Path(description="The unique identifier of the requested document")],
    token: str = Depends(user_token),
):
    """Get a document of the user identified by the token."""
    return await read_document(DocumentCategory.user_document, token, document_id)


@app_documents.get("/attachment/{attachment_id}", response_class=Response, responses=READ_RESPONSES)
async def get_attachment(
    attachment_id: Annotated[int, Path(description="The unique identifier of the requested attachment")],
    token: str = Depends(user_token),
):
    """Get an attachment shared within the organization of the user identified by the token."""
    return await read_document(DocumentCategory.attachment, token, attachment_id)


async def read_document(category: DocumentCategory, token: str, resource_id: int | None = None) -> Response:
    """
    Check with the ACL service which document file the user may access, and read it.

    Any failure results in an empty 404 response.
    """
    try:
        access = await acl().verify(category, token, resource_id)
        content = await document_store(category).read(access)
    except Exception:
        logging.exception(f"Document file access error ({category.value} {resource_id or ''})")
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return Response(content=content, media_type=OCTET_STREAM)
