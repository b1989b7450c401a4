"""Services for pdrive."""
from .api_client import HTTPUploadAPI
from .chunker import FILE_SPLIT_SIZE, iter_chunks, split_file

__all__ = [
    "HTTPUploadAPI",
    "FILE_SPLIT_SIZE",
    "iter_chunks",
    "split_file",
]
