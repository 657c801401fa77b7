#!/usr/bin/env python

from setuptools import setup

setup(
    name="docstore",
    version="1.0.0",
    description="File server for user documents, attachments and performance reports, authorized by an ACL service",
    packages=["docstore", "docstore.access", "docstore.api", "docstore.storage"],
    include_package_data=True,
    zip_safe=False,
    python_requires=">=3.10",
    keywords=["API", "documents", "file server"],
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    ],
    install_requires=[
        "fastapi",
        "httpx",
        "aiofiles>=23.1",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
        "uvicorn",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-httpx>=0.32",
            "anyio",
            "mypy",
            "flake8",
        ],
        "test": [
            "pytest",
            "pytest-httpx>=0.32",
            "anyio",
        ],
    },
    entry_points={"console_scripts": ["docstore = docstore.__main__:main"]},
)
