"""Streaming content digests."""

import hashlib
from pathlib import Path
from typing import BinaryIO, Protocol

import xxhash

from ..common.constants import DEFAULT_CHUNK_SIZE
from ..common.exceptions import HashingError
from .models import DigestAlgorithm


class _Hasher(Protocol):
    def update(self, data: bytes, /) -> None: ...

    def digest(self) -> bytes: ...


def new_hasher(algorithm: DigestAlgorithm) -> _Hasher:
    """Create an empty digest accumulator for the given algorithm."""
    if algorithm is DigestAlgorithm.XXH64:
        return xxhash.xxh64()
    return hashlib.sha256()


class DigestProvider:
    """Computes fixed-length digests without buffering whole files."""

    def __init__(
        self,
        algorithm: DigestAlgorithm = DigestAlgorithm.SHA256,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """Initialize digest provider.

        Args:
            algorithm: Digest algorithm applied to every file
            chunk_size: Number of bytes read per call
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.algorithm = algorithm
        self.chunk_size = chunk_size

    def hash_stream(self, stream: BinaryIO) -> bytes:
        """Digest a readable binary stream until EOF."""
        hasher = new_hasher(self.algorithm)
        for chunk in iter(lambda: stream.read(self.chunk_size), b""):
            hasher.update(chunk)
        return hasher.digest()

    def hash_file(self, path: Path) -> bytes:
        """Digest the contents of a file.

        Raises:
            HashingError: If the file cannot be opened or read
        """
        try:
            with open(path, "rb") as f:
                return self.hash_stream(f)
        except OSError as e:
            raise HashingError(path, e.strerror or str(e)) from e
