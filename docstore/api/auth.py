"""Helper methods for reading the credentials of the caller."""

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader

from docstore.access.acl import API_KEY_HEADER, TOKEN_HEADER

token_scheme = APIKeyHeader(
    name=TOKEN_HEADER,
    scheme_name="User Token Header",
    description="Signed token in Base64 format that identifies the user",
    auto_error=False,
)
api_key_scheme = APIKeyHeader(
    name=API_KEY_HEADER,
    scheme_name="API Key Header",
    description="The key that identifies the calling application",
    auto_error=False,
)


def user_token(token: str | None = Security(token_scheme)) -> str:
    """
    Returns the token of the user, or a 400 error if it is missing
    """
    if not token:
        raise HTTPException(status_code=400, detail=f"The {TOKEN_HEADER} header is required")
    return token


def application_key(api_key: str | None = Security(api_key_scheme)) -> str:
    """
    Returns the API key of the calling application, or a 400 error if it is missing
    """
    if not api_key:
        raise HTTPException(status_code=400, detail=f"The {API_KEY_HEADER} header is required")
    return api_key
