"""Upload intake: persist an uploaded image to scratch storage and read it back."""
from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from ..errors import MissingInput
from ..utils.data_uri import DEFAULT_MIME_TYPE
from ..utils.logger import get_logger
from ..utils.scratch import scratch_file

logger = get_logger(__name__)


@dataclass(slots=True)
class UploadedImage:
    path: Path
    mime_type: str
    data: bytes


def _copy_to_disk(upload: UploadFile, destination: Path) -> None:
    upload.file.seek(0)
    with destination.open("wb") as buffer:
        shutil.copyfileobj(upload.file, buffer)


async def save_upload(upload: UploadFile, destination: Path) -> Path:
    """Stream ``upload`` to ``destination`` without blocking the event loop."""
    await run_in_threadpool(_copy_to_disk, upload, destination)
    return destination


async def read_upload(upload: Optional[UploadFile], directory: str | Path) -> UploadedImage:
    """Save the upload, read its bytes and drop the scratch file again.

    The scratch file never outlives this call, whether reading succeeds or not.
    """
    if upload is None:
        raise MissingInput("No file supplied in the 'image' field")

    with scratch_file(directory, Path(upload.filename or "").suffix) as path:
        await save_upload(upload, path)
        data = await run_in_threadpool(path.read_bytes)

    mime_type = upload.content_type or DEFAULT_MIME_TYPE
    logger.info(
        "Received upload {filename} ({size} bytes, {mime_type})",
        filename=upload.filename,
        size=len(data),
        mime_type=mime_type,
    )
    return UploadedImage(path=path, mime_type=mime_type, data=data)
