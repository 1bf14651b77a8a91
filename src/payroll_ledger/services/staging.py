"""Staging of uploaded files in the temporary upload directory."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import IO, TYPE_CHECKING

from payroll_ledger.exceptions import FileTooLarge

if TYPE_CHECKING:
    from fastapi import UploadFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def _open_staging_file(upload_dir: Path) -> tuple[IO[bytes], Path]:
    upload_dir.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(dir=upload_dir, prefix="upload-")
    return os.fdopen(fd, "wb"), Path(name)


def remove_staged_file(path: Path) -> None:
    """Delete a staged upload; a file that is already gone is fine."""
    try:
        path.unlink(missing_ok=True)
    except OSError:
        logger.warning("Could not remove staged upload %s", path, exc_info=True)


async def stage_upload(upload: UploadFile, upload_dir: Path, max_bytes: int) -> Path:
    """Write an incoming upload to the staging directory.

    Returns:
        Path of the staged copy. The caller owns it and must remove it.

    Raises:
        FileTooLarge: If the upload is bigger than ``max_bytes``; nothing is
            left on disk in that case
    """
    out, path = _open_staging_file(upload_dir)
    written = 0
    try:
        with out:
            while chunk := await upload.read(CHUNK_SIZE):
                written += len(chunk)
                if written > max_bytes:
                    raise FileTooLarge(max_bytes)
                out.write(chunk)
    except BaseException:
        remove_staged_file(path)
        raise

    logger.debug("Staged upload %s (%d bytes) at %s", upload.filename, written, path)
    return path


def stage_local_file(source: Path, upload_dir: Path, max_bytes: int) -> Path:
    """Copy a local file into the staging directory, applying the size limit."""
    out, path = _open_staging_file(upload_dir)
    written = 0
    try:
        with out, source.open("rb") as src:
            while chunk := src.read(CHUNK_SIZE):
                written += len(chunk)
                if written > max_bytes:
                    raise FileTooLarge(max_bytes)
                out.write(chunk)
    except BaseException:
        remove_staged_file(path)
        raise

    return path
