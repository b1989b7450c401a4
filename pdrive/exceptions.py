"""Error taxonomy for pdrive."""
from __future__ import annotations

from typing import Optional


class PdriveError(Exception):
    """Base error carrying a displayable message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigError(PdriveError):
    """Raised when the persisted or environment configuration is unusable."""


class ClientError(PdriveError):
    """Raised when the upload API reports a failure."""

    def __str__(self) -> str:
        return f"Server error occured: {self.message}"


class BadRequestError(ClientError):
    """HTTP 400; the message is the server's response body."""


class UnauthorizedError(ClientError):
    """HTTP 401; the bearer token was rejected."""

    def __init__(self, message: str = "Wrong token"):
        super().__init__(message)


class UnexpectedStatusError(ClientError):
    """Any status the protocol does not define for an operation."""

    def __init__(self, operation: str, status_code: int, body: Optional[str] = None):
        self.operation = operation
        self.status_code = status_code
        self.body = body or ""
        detail = f": {self.body}" if self.body else ""
        super().__init__(f"unexpected status code {status_code} on {operation}{detail}")


class MalformedResponseError(ClientError):
    """A successful response whose body cannot be decoded."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        super().__init__(f"malformed response on {operation}: {reason}")
