"""Use case for uploading a small file in one request."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from pdrive.protocols import IUploadAPI
from pdrive.utils.events import NOTICE, EventEmitter

logger = logging.getLogger(__name__)


class SingleShotUploadUseCase:
    """Read a whole file into memory and upload it with a single POST."""

    def __init__(self, api: IUploadAPI, events: Optional[EventEmitter] = None):
        self._api = api
        self._events = events or EventEmitter()

    async def execute(self, path: Path) -> str:
        file_path = Path(path)
        data = await asyncio.to_thread(file_path.read_bytes)

        logger.debug("Single upload started: file=%s size=%d", file_path.name, len(data))
        await self._events.emit(NOTICE, "Uploading...")

        location = await self._api.upload_single(file_path.name, data)
        logger.info("Single upload finished: file=%s location=%s", file_path.name, location)
        return location
