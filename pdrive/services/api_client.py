"""HTTP adapter for the object-storage upload API."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..exceptions import (
    BadRequestError,
    MalformedResponseError,
    UnauthorizedError,
    UnexpectedStatusError,
)
from ..models import PartResult, UploadSession

logger = logging.getLogger(__name__)


def _segment(value: str) -> str:
    return quote(value, safe="")


def _session_path(session: UploadSession) -> str:
    # key and uploadId are server-assigned; a "/" in the key is part of the object name
    return quote(session.key, safe="/") + "/" + quote(session.upload_id, safe="/")


class HTTPUploadAPI:
    """
    HTTP client adapter for upload calls.

    Implements IUploadAPI protocol. Every request carries the bearer token;
    nothing is retried.
    """

    def __init__(
        self,
        api_url: str,
        token: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_url = api_url
        self._token = token
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self._api_url,
            headers={"Authorization": f"Bearer {self._token}"},
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("HTTPUploadAPI not initialized. Use 'async with' context.")
        return self._client

    @staticmethod
    def _raise_for_status(operation: str, response: httpx.Response) -> None:
        if response.status_code == 200:
            return
        if response.status_code == 401:
            raise UnauthorizedError()
        logger.error(
            "Unexpected status %d on %s: %s",
            response.status_code,
            operation,
            response.text,
        )
        raise UnexpectedStatusError(operation, response.status_code, response.text)

    @staticmethod
    def _decode_json(operation: str, response: httpx.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponseError(operation, f"invalid JSON ({exc})") from exc
        if not isinstance(payload, dict):
            raise MalformedResponseError(operation, "expected a JSON object")
        return payload

    async def upload_single(self, filename: str, data: bytes) -> str:
        client = self._require_client()
        response = await client.post(f"/upload/{_segment(filename)}", content=data)

        if response.status_code == 400:
            raise BadRequestError(response.text)
        self._raise_for_status("upload", response)
        return response.text

    async def init_multipart(self, key: str) -> UploadSession:
        client = self._require_client()
        response = await client.post(f"/upload-part/init/{_segment(key)}")
        self._raise_for_status("upload-part init", response)

        payload = self._decode_json("upload-part init", response)
        try:
            return UploadSession.from_json(payload)
        except KeyError as exc:
            raise MalformedResponseError("upload-part init", f"missing field {exc}") from exc

    async def upload_part(
        self, session: UploadSession, part_number: int, data: bytes
    ) -> PartResult:
        client = self._require_client()
        operation = f"upload-part put #{part_number}"
        response = await client.put(
            f"/upload-part/put/{_session_path(session)}",
            params={"partNumber": part_number},
            content=data,
        )
        self._raise_for_status(operation, response)

        payload = self._decode_json(operation, response)
        try:
            part = PartResult.from_json(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedResponseError(operation, f"bad part payload ({exc})") from exc

        if part.part_number != part_number:
            logger.warning(
                "Server confirmed part %d for requested part %d; keeping server value",
                part.part_number,
                part_number,
            )
        return part

    async def complete_multipart(
        self, session: UploadSession, parts: List[PartResult]
    ) -> str:
        client = self._require_client()
        response = await client.post(
            f"/upload-part/finish/{_session_path(session)}",
            json=[part.to_json() for part in parts],
        )
        self._raise_for_status("upload-part finish", response)
        return response.text
