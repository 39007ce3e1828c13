"""Shared asset directory for uploaded pictures."""

import shutil
from pathlib import Path
from typing import BinaryIO

import structlog
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from src.exceptions import BadRequestError

logger = structlog.get_logger(__name__)


class AssetStore:
    """Writes uploads into one flat directory, keyed by original filename.

    Files with the same name overwrite each other. Records hold only the
    returned filename; the file is served from the static asset prefix.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    async def save(self, upload: UploadFile) -> str:
        """Store an uploaded file and return its filename.

        Raises:
            BadRequestError: If the upload has no usable filename
        """
        # Drop any client-supplied directories
        filename = Path(upload.filename or "").name
        if filename in ("", ".", ".."):
            raise BadRequestError("Uploaded file has no filename")

        destination = self.directory / filename
        await run_in_threadpool(self._write, upload.file, destination)
        logger.info("asset_saved", filename=filename, content_type=upload.content_type)
        return filename

    def _write(self, source: BinaryIO, destination: Path) -> None:
        self.ensure_directory()
        with destination.open("wb") as buffer:
            shutil.copyfileobj(source, buffer)
