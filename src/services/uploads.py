"""
Scoped temporary storage for uploaded invoices.

The relay never keeps an upload past the request that carried it:
``spool_upload`` writes the file to the upload directory, yields the path and
removes it again on every exit path.
"""
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import UploadFile
from loguru import logger

from ..core.errors import PayloadTooLarge

CHUNK_SIZE = 1024 * 1024


def ensure_upload_dir(upload_dir: str | os.PathLike) -> Path:
    path = Path(upload_dir)
    if not path.is_absolute():
        path = Path.cwd() / path
    path.mkdir(parents=True, exist_ok=True)
    return path


def _too_large(max_bytes: int) -> PayloadTooLarge:
    return PayloadTooLarge(f"maxFileSize exceeded, file is larger than {max_bytes} bytes")


def remove_quietly(path: str | os.PathLike) -> None:
    """Delete a temp file; failures are logged, never raised."""
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Error deleting temp file", error=str(e), path=str(path))


@asynccontextmanager
async def spool_upload(file: UploadFile, upload_dir: str | os.PathLike, max_bytes: int) -> AsyncIterator[Path]:
    """Copy `file` into `upload_dir` (keeping its extension) and yield the copy's path.

    Raises PayloadTooLarge as soon as more than `max_bytes` have been read.
    """
    # Starlette knows the size once the multipart body is parsed
    if file.size is not None and file.size > max_bytes:
        raise _too_large(max_bytes)

    directory = ensure_upload_dir(upload_dir)
    suffix = Path(file.filename or "").suffix
    fd, name = tempfile.mkstemp(prefix="upload_", suffix=suffix, dir=directory)
    path = Path(name)
    try:
        written = 0
        with os.fdopen(fd, "wb") as out:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    raise _too_large(max_bytes)
                out.write(chunk)
        logger.info("Upload spooled to temp file", path=str(path), size_bytes=written)
        yield path
    finally:
        remove_quietly(path)
