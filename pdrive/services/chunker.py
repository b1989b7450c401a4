"""Split files into bounded-size in-memory chunks."""
from pathlib import Path
from typing import Iterator, List

from ..models import Chunk

FILE_SPLIT_SIZE = 50 * 1024 * 1024  # 50MB


def iter_chunks(path: Path, split_size: int = FILE_SPLIT_SIZE) -> Iterator[Chunk]:
    """Yield 1-indexed chunks of at most split_size bytes in file order."""
    if split_size <= 0:
        raise ValueError(f"split_size must be positive, got {split_size}")

    with open(path, "rb") as f:
        index = 1
        while True:
            data = f.read(split_size)
            if not data:
                break
            yield Chunk(index=index, data=data)
            index += 1


def split_file(path: Path, split_size: int = FILE_SPLIT_SIZE) -> List[Chunk]:
    """
    Read the whole file into a list of chunks.

    Any read error propagates and no partial list is returned.
    """
    return list(iter_chunks(Path(path), split_size))

