"""Dispatch uploads to the single-shot or multipart workflow."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import httpx

from .config import Config
from .models import UploadResult
from .protocols import IUploadAPI
from .services.api_client import HTTPUploadAPI
from .services.chunker import FILE_SPLIT_SIZE, split_file
from .use_cases.multipart_upload import MultipartUploadUseCase
from .use_cases.single_upload import SingleShotUploadUseCase
from .utils.events import EventEmitter

logger = logging.getLogger(__name__)


class UploadOrchestrator:
    """
    Orchestrates file uploads using injected services.

    Files at or below split_size go out in one request; larger files are
    chunked and sent as a multipart upload.

    Usage:
        async with UploadOrchestrator(config) as uploader:
            result = await uploader.upload(path)
            print(result.url)
    """

    def __init__(
        self,
        config: Config,
        api: Optional[IUploadAPI] = None,
        events: Optional[EventEmitter] = None,
        split_size: int = FILE_SPLIT_SIZE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize orchestrator with dependencies.

        Args:
            config: Run configuration (token, API URL, concurrency)
            api: Pre-built API client; an HTTPUploadAPI is opened when omitted
            events: Emitter receiving progress notices
            split_size: Size threshold and chunk size in bytes
            transport: Optional httpx transport for the owned API client
        """
        self._config = config
        self._external_api = api
        self._api: Optional[IUploadAPI] = api
        self._owned_api: Optional[HTTPUploadAPI] = None
        self._transport = transport
        self._split_size = split_size
        self.events = events or EventEmitter()

    async def __aenter__(self):
        if self._external_api is None:
            self._owned_api = HTTPUploadAPI(
                self._config.api_url,
                self._config.token,
                transport=self._transport,
            )
            self._api = await self._owned_api.__aenter__()
        return self

    async def __aexit__(self, *args):
        if self._owned_api is not None:
            await self._owned_api.__aexit__(*args)
            self._owned_api = None
            self._api = None

    def _require_api(self) -> IUploadAPI:
        if self._api is None:
            raise RuntimeError("UploadOrchestrator not initialized. Use 'async with' context.")
        return self._api

    async def upload(self, path: Path) -> UploadResult:
        """Upload a file and return its absolute URL and transfer details."""
        api = self._require_api()
        file_path = Path(path)
        size = file_path.stat().st_size

        if size <= self._split_size:
            logger.debug("Dispatching %s (%d bytes) to single upload", file_path.name, size)
            location = await SingleShotUploadUseCase(api, self.events).execute(file_path)
            parts = 1
            multipart = False
        else:
            key = file_path.name
            chunks = await asyncio.to_thread(split_file, file_path, self._split_size)
            logger.debug(
                "Dispatching %s (%d bytes) to multipart upload in %d parts",
                key,
                size,
                len(chunks),
            )
            use_case = MultipartUploadUseCase(
                api,
                concurrency=self._config.concurrent_requests,
                events=self.events,
            )
            location = await use_case.execute(key, chunks)
            parts = len(chunks)
            multipart = True

        return UploadResult(
            filename=file_path.name,
            location=location,
            url=self._config.absolute_url(location),
            size=size,
            multipart=multipart,
            parts=parts,
        )
