"""
Advert "service layer".

This file contains logic that is independent of FastAPI's routing layer:
- Coerce form/path strings into numbers
- Read uploaded image bytes with a size limit and store them on disk
- Build public image URLs
"""

from __future__ import annotations

import logging
import math
import os
import tempfile

from fastapi import UploadFile

from core import config

UPLOAD_PREFIX = "upload-"
UPLOAD_SUFFIX = ".png"

# `advert.id` is a BIGSERIAL (int8).
MAX_ADVERT_ID = 2**63 - 1
MIN_ADVERT_ID = -(2**63)

logger = logging.getLogger(__name__)


class UploadError(RuntimeError):
    pass


def _is_plain_number(raw: str) -> bool:
    # float()/int() also accept surrounding whitespace and digit underscores.
    return bool(raw) and raw == raw.strip() and "_" not in raw


def parse_price(raw: str | None) -> float:
    """
    Best-effort float parse. Anything unparsable (or non-finite) becomes 0.0.
    """
    raw = raw or ""
    if not _is_plain_number(raw):
        return 0.0
    try:
        value = float(raw)
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def parse_advert_id(raw: str | None) -> int:
    """
    Best-effort int parse. A non-numeric or out-of-range id becomes 0, which
    matches no row.
    """
    raw = raw or ""
    if not _is_plain_number(raw):
        return 0
    try:
        value = int(raw)
    except ValueError:
        return 0
    if not MIN_ADVERT_ID <= value <= MAX_ADVERT_ID:
        return 0
    return value


def image_url(filename: str) -> str:
    return f"{config.image_base_path()}/{filename}"


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise UploadError(f"File too large. Max is {max_bytes} bytes.")

    return bytes(buf)


def write_upload(data: bytes) -> str:
    """
    Write `data` under a fresh `upload-*.png` name in the upload directory and
    return the bare filename.
    """
    target = config.upload_dir()
    try:
        target.mkdir(parents=True, exist_ok=True)
        fd, path = tempfile.mkstemp(prefix=UPLOAD_PREFIX, suffix=UPLOAD_SUFFIX, dir=target)
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
    except OSError as e:
        raise UploadError(f"Could not store upload: {e}") from e
    return os.path.basename(path)


async def save_upload(file: UploadFile | None) -> str:
    """
    High-level upload step for the `ad_image` form field.

    This is what the FastAPI router should call.
    """
    if file is None or not file.filename:
        raise UploadError("Missing ad_image file.")

    try:
        data = await read_upload_bytes(file, max_bytes=config.max_upload_bytes())
    finally:
        await file.close()

    filename = write_upload(data)
    logger.info("upload_saved filename=%s size_bytes=%s", filename, len(data))
    return filename
