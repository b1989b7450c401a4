"""Use cases for chunked multipart uploads."""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from pdrive.exceptions import MalformedResponseError
from pdrive.models import Chunk, PartResult, UploadSession
from pdrive.protocols import IUploadAPI
from pdrive.utils.events import (
    NOTICE,
    PART_COMPLETE,
    PART_START,
    EventEmitter,
    PartProgress,
)

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 2


class ParallelPartUploadUseCase:
    """
    Upload the parts of one session through a fixed-width worker pool.

    Workers pull chunks from a FIFO queue in file order, so a new part is
    dispatched as soon as any in-flight part finishes. Results are returned
    in completion order; each one carries the part number confirmed by the
    server. The first failure cancels every other worker.
    """

    def __init__(
        self,
        api: IUploadAPI,
        concurrency: int = DEFAULT_CONCURRENCY,
        events: Optional[EventEmitter] = None,
    ):
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self._api = api
        self._concurrency = concurrency
        self._events = events or EventEmitter()

    async def execute(
        self, session: UploadSession, chunks: Sequence[Chunk]
    ) -> List[PartResult]:
        queue: asyncio.Queue = asyncio.Queue()
        for chunk in chunks:
            queue.put_nowait(chunk)

        total = len(chunks)
        results: List[PartResult] = []

        async def worker(worker_id: int) -> None:
            while True:
                try:
                    chunk = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return

                logger.debug("Worker %d uploading part %d/%d", worker_id, chunk.index, total)
                await self._events.emit(
                    PART_START,
                    PartProgress(chunk.index, total, size=chunk.size, completed_parts=len(results)),
                )
                part = await self._api.upload_part(session, chunk.index, chunk.data)
                results.append(part)
                logger.debug("Worker %d finished part %d", worker_id, chunk.index)
                await self._events.emit(
                    PART_COMPLETE,
                    part,
                    PartProgress(chunk.index, total, size=chunk.size, completed_parts=len(results)),
                )

        width = min(self._concurrency, total)
        workers = [asyncio.create_task(worker(n)) for n in range(1, width + 1)]
        try:
            await asyncio.gather(*workers)
        except BaseException:
            for task in workers:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            raise

        return results


def _ordered_parts(parts: List[PartResult], expected: int) -> List[PartResult]:
    numbers = {part.part_number for part in parts}
    if len(parts) != expected or len(numbers) != expected:
        raise MalformedResponseError(
            "upload-part put",
            f"expected {expected} distinct parts, server confirmed {sorted(p.part_number for p in parts)}",
        )
    return sorted(parts, key=lambda part: part.part_number)


class MultipartUploadUseCase:
    """Run init, bounded-concurrency part upload and completion in sequence."""

    def __init__(
        self,
        api: IUploadAPI,
        concurrency: int = DEFAULT_CONCURRENCY,
        events: Optional[EventEmitter] = None,
        part_upload: Optional[ParallelPartUploadUseCase] = None,
    ):
        self._api = api
        self._events = events or EventEmitter()
        self._part_upload = part_upload or ParallelPartUploadUseCase(
            api, concurrency=concurrency, events=self._events
        )

    async def execute(self, key: str, chunks: Sequence[Chunk]) -> str:
        if not chunks:
            raise ValueError("multipart upload needs at least one chunk")

        await self._events.emit(NOTICE, "Initializing part upload")
        session = await self._api.init_multipart(key)
        logger.info(
            "Multipart session opened: key=%s upload_id=%s parts=%d",
            session.key,
            session.upload_id,
            len(chunks),
        )

        try:
            await self._events.emit(NOTICE, "Uploading parts...")
            collected = await self._part_upload.execute(session, chunks)
            parts = _ordered_parts(collected, len(chunks))

            await self._events.emit(NOTICE, "Completing part upload...")
            location = await self._api.complete_multipart(session, parts)
        except Exception as exc:
            logger.error(
                "Multipart upload abandoned: key=%s upload_id=%s error=%s",
                session.key,
                session.upload_id,
                exc,
            )
            raise

        logger.info("Multipart upload finished: key=%s location=%s", session.key, location)
        return location
