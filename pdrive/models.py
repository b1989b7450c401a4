"""
Models for pdrive.

Immutable dataclasses shared by the chunker, the HTTP adapter and the
upload use cases.
"""
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Chunk:
    """A contiguous slice of a file tagged with its 1-based position."""
    index: int
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class UploadSession:
    """Server-assigned identity of one multipart transfer."""
    key: str
    upload_id: str

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "UploadSession":
        return cls(key=str(payload["key"]), upload_id=str(payload["uploadId"]))


@dataclass(frozen=True)
class PartResult:
    """Server confirmation that a part was received."""
    part_number: int
    etag: str

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "PartResult":
        return cls(part_number=int(payload["partNumber"]), etag=str(payload["etag"]))

    def to_json(self) -> Dict[str, Any]:
        return {"partNumber": self.part_number, "etag": self.etag}


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a dispatched upload."""
    filename: str
    location: str
    url: str
    size: int
    multipart: bool = False
    parts: int = 1
