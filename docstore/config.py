"""
docstore Configuration

We read configuration from 2 sources, in order of precedence (higher is more priority)
- Environment variables
- A .env file, either in the current working directory or in a location specified
  by the DOCSTORE_ENV_FILE environment variable
"""

import functools
from pathlib import Path
from typing import Annotated, Any

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from docstore.models import DocumentCategory

ENV_PREFIX = "docstore_"


class Settings(BaseSettings):
    env_file: Annotated[
        Path,
        Field(
            description="Location of a .env file (if used) relative to working directory",
        ),
    ] = Path(".env")

    acl_url: Annotated[
        str,
        Field(
            description="Base URL of the access checker (ACL) service that authorizes every request",
        ),
    ] = "http://localhost:8081"

    acl_timeout: Annotated[
        float,
        Field(
            description="Maximum time in seconds a single call to the ACL service may take",
        ),
    ] = 1.0

    retry_initial_backoff_ms: Annotated[
        int,
        Field(
            description="Time in milliseconds to wait before the first retry of a failed ACL call",
        ),
    ] = 200

    retry_expiration_ms: Annotated[
        int,
        Field(
            description="Time in milliseconds, measured from the first attempt, after which failed ACL calls are given up",
        ),
    ] = 2000

    user_document_dir: Annotated[
        Path,
        Field(description="Root directory of the user documents"),
    ] = Path("documents/user")

    attachment_dir: Annotated[
        Path,
        Field(description="Root directory of the attachments shared within an organization"),
    ] = Path("documents/attachment")

    performance_result_dir: Annotated[
        Path,
        Field(description="Root directory of the user performance reports"),
    ] = Path("documents/performance")

    file_workers: Annotated[
        int,
        Field(description="Number of worker threads for blocking file system calls"),
    ] = 4

    @model_validator(mode="after")
    def check_positive(self: Any) -> "Settings":
        for name in ("acl_timeout", "retry_initial_backoff_ms", "retry_expiration_ms", "file_workers"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} should be positive, not {getattr(self, name)}")
        return self

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)

    def document_root(self, category: DocumentCategory) -> Path:
        """Return the root directory for documents of the given category"""
        match category:
            case DocumentCategory.user_document:
                return self.user_document_dir
            case DocumentCategory.attachment:
                return self.attachment_dir
            case DocumentCategory.performance_result:
                return self.performance_result_dir
        raise ValueError(f"Unknown document category: {category}")


@functools.lru_cache()
def get_settings() -> Settings:
    temp = Settings()
    load_dotenv(temp.env_file, override=False)
    return Settings()


def validate_settings():
    settings = get_settings()
    roots = [settings.document_root(c).resolve() for c in DocumentCategory]
    if len(set(roots)) != len(roots):
        return (
            "The user document, attachment and performance result directories are not distinct. "
            "Documents of different categories could overwrite each other."
        )


if __name__ == "__main__":
    # Echo the settings
    for k, v in get_settings().model_dump().items():
        print(f"{ENV_PREFIX.upper()}{k.upper()}={v}")
