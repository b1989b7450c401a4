"""Application use cases for pdrive upload workflows."""

from .multipart_upload import MultipartUploadUseCase, ParallelPartUploadUseCase
from .single_upload import SingleShotUploadUseCase

__all__ = [
    "MultipartUploadUseCase",
    "ParallelPartUploadUseCase",
    "SingleShotUploadUseCase",
]
