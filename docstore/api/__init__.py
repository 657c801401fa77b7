"""
docstore API

Stores and serves the documents of the users and organizations on the local file system.
The server keeps no session state: every request is authorized by the document access checker
service (ACL), using the user's token for reads and the calling application's API key for writes.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from docstore.api.documents import app_documents
from docstore.api.store import app_store
from docstore.connections import docstore_connections


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.info("The file server is starting...")
    async with docstore_connections():
        yield
    logging.info("The file server is stopping...")


app = FastAPI(
    title="docstore",
    description=__doc__ if __doc__ else "",
    openapi_tags=[
        dict(name="documents", description="Endpoints to read documents, authorized by the user's token"),
        dict(name="store", description="Endpoints to store and remove documents, authorized by the application's API key"),
    ],
    lifespan=lifespan,
)
app.include_router(app_documents)
app.include_router(app_store)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422, content={"message": "There was an issue with the data you sent.", "fields_invalid": exc.errors()}
    )
