"""
Protocols (Interfaces) for Dependency Inversion.

The use cases talk to the remote API only through IUploadAPI.
"""
from typing import List, Protocol, runtime_checkable

from .models import PartResult, UploadSession


@runtime_checkable
class IUploadAPI(Protocol):
    """Interface for the object-storage upload API."""

    async def upload_single(self, filename: str, data: bytes) -> str:
        """Upload a whole file and return its relative location."""
        ...

    async def init_multipart(self, key: str) -> UploadSession:
        """Open a multipart session."""
        ...

    async def upload_part(
        self, session: UploadSession, part_number: int, data: bytes
    ) -> PartResult:
        """Upload one part of a multipart session."""
        ...

    async def complete_multipart(
        self, session: UploadSession, parts: List[PartResult]
    ) -> str:
        """Finish a multipart session and return its relative location."""
        ...
