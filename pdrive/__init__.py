"""
pdrive - upload files to an object-storage HTTP API.

Small files are sent in one request; files above the split size are
chunked and uploaded as a multipart transfer with bounded concurrency.

Usage:
    from pdrive import Config, UploadOrchestrator, load_config

    config = load_config()
    async with UploadOrchestrator(config) as uploader:
        result = await uploader.upload(path)
        print(result.url)
"""
from .config import Config, load_config
from .exceptions import (
    BadRequestError,
    ClientError,
    ConfigError,
    MalformedResponseError,
    PdriveError,
    UnauthorizedError,
    UnexpectedStatusError,
)
from .models import Chunk, PartResult, UploadResult, UploadSession
from .orchestrator import UploadOrchestrator
from .services import FILE_SPLIT_SIZE, HTTPUploadAPI, split_file

__version__ = "0.1.0"
__all__ = [
    # Main
    "UploadOrchestrator",
    "Config",
    "load_config",
    # Models
    "Chunk",
    "PartResult",
    "UploadResult",
    "UploadSession",
    # Services
    "HTTPUploadAPI",
    "FILE_SPLIT_SIZE",
    "split_file",
    # Errors
    "PdriveError",
    "ConfigError",
    "ClientError",
    "BadRequestError",
    "UnauthorizedError",
    "UnexpectedStatusError",
    "MalformedResponseError",
]
