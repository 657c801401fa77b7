"""
Asynchronous access to the local file system

The file system calls are blocking, so they run on a bounded pool of worker threads
and the event loop only awaits their results.
"""

import logging
from concurrent.futures import Executor
from contextlib import contextmanager
from pathlib import Path

import aiofiles
import aiofiles.os

from docstore.errors import IOFailure, NotFound


@contextmanager
def _io_errors(action: str, path: Path, missing_is_not_found: bool = False):
    try:
        yield
    except FileNotFoundError as e:
        if missing_is_not_found:
            raise NotFound(e.errno, f"Cannot {action}, not found", str(path)) from e
        raise IOFailure(e.errno, f"Cannot {action}", str(path)) from e
    except OSError as e:
        raise IOFailure(e.errno, f"Cannot {action}", str(path)) from e


class FileStore:
    def __init__(self, executor: Executor):
        self.executor = executor

    async def list(self, path: Path) -> list[str]:
        """
        List the names of the entries in the given directory
        :raises NotFound: if the directory does not exist
        """
        logging.info(f"Folder read request: {path}")
        with _io_errors("list directory", path, missing_is_not_found=True):
            return await aiofiles.os.listdir(path, executor=self.executor)

    async def mkdirs(self, path: Path) -> None:
        """Create the directory and all missing parents, does nothing if it already exists"""
        with _io_errors("create directory", path):
            await aiofiles.os.makedirs(path, exist_ok=True, executor=self.executor)

    async def delete(self, path: Path) -> None:
        """Delete the given file. Deleting a file that does not exist is not an error."""
        logging.info(f"File removal request: {path}")
        try:
            with _io_errors("delete file", path, missing_is_not_found=True):
                await aiofiles.os.remove(path, executor=self.executor)
        except NotFound:
            logging.info(f"File to remove does not exist: {path}")

    async def write(self, path: Path, data: bytes) -> None:
        """
        Write the data to the given file, replacing the previous content if the file exists.
        The parent directory should already exist.
        """
        logging.info(f"File write request: {path}")
        with _io_errors("write file", path):
            async with aiofiles.open(path, "wb", executor=self.executor) as f:
                await f.write(data)
        logging.info(f"File is written: {path}")

    async def read(self, path: Path) -> bytes:
        """
        Read the content of the given file
        :raises NotFound: if the file does not exist
        """
        logging.info(f"File read request: {path}")
        with _io_errors("read file", path, missing_is_not_found=True):
            async with aiofiles.open(path, "rb", executor=self.executor) as f:
                return await f.read()
