"""
API Endpoints to store and remove documents

Writes are authorized by the API key of the calling application, checked by the ACL service.
If the document cannot be stored or removed, or the caller is not authorized, the response is
a 400 with body false.
"""

import logging
from typing import Annotated, Awaitable, Callable

from fastapi import APIRouter, Body, Depends, Path, status
from fastapi.responses import JSONResponse

from docstore.api.auth import application_key
from docstore.connections import api_key_cache, document_store
from docstore.models import CreateDocumentRequest, DocumentCategory, RemoveDocumentRequest

app_store = APIRouter(prefix="/api", tags=["store"])

WRITE_RESPONSES: dict = {
    400: {"description": "If the document cannot be stored, or the caller is not authorized", "model": bool},
}


@app_store.post("/document", status_code=status.HTTP_201_CREATED, responses=WRITE_RESPONSES)
async def create_user_document(
    document: Annotated[
        CreateDocumentRequest,
        Body(
            description="The document content in Base64 format, and the organization, user and file name to store it under",
            examples=[dict(organizationId="SampleOrg", userId="23453456", fileName="report.pdf", content="cGF5bG9hZA==")],
        ),
    ],
    api_key: str = Depends(application_key),
) -> bool:
    """Store the given user document. An existing document with the same name is replaced."""
    return await change_documents(
        api_key, lambda: document_store(DocumentCategory.user_document).write(document), status.HTTP_201_CREATED
    )


@app_store.post("/attachment", status_code=status.HTTP_201_CREATED, responses=WRITE_RESPONSES)
async def create_attachment(
    attachment: Annotated[
        CreateDocumentRequest,
        Body(
            description="The attachment content in Base64 format, and the organization and file name to store it under",
            examples=[dict(organizationId="SampleOrg", fileName="handbook.pdf", content="cGF5bG9hZA==")],
        ),
    ],
    api_key: str = Depends(application_key),
) -> bool:
    """Store the given attachment, shared within the organization. An existing attachment with the same name is replaced."""
    return await change_documents(
        api_key, lambda: document_store(DocumentCategory.attachment).write(attachment), status.HTTP_201_CREATED
    )


@app_store.delete(
    "/document/{organization_id}/{user_id}/{file_name}", status_code=status.HTTP_202_ACCEPTED, responses=WRITE_RESPONSES
)
async def remove_user_document(
    organization_id: Annotated[str, Path(description="The organization that owns the document")],
    user_id: Annotated[str, Path(description="The user that owns the document")],
    file_name: Annotated[str, Path(description="The name of the file")],
    api_key: str = Depends(application_key),
) -> bool:
    """Remove the given user document. Removing a document that does not exist succeeds."""
    request = RemoveDocumentRequest(organization_id=organization_id, user_id=user_id, file_name=file_name)
    return await change_documents(
        api_key, lambda: document_store(DocumentCategory.user_document).remove(request), status.HTTP_202_ACCEPTED
    )


async def change_documents(api_key: str, action: Callable[[], Awaitable[None]], success_status: int):
    """
    Check the API key and, if it is valid, perform the write or remove action.

    Any failure results in a 400 response with body false.
    """
    try:
        await api_key_cache().check_or_set(api_key)
        await action()
    except Exception:
        logging.exception("Document write/delete error")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=False)
    return JSONResponse(status_code=success_status, content=True)
