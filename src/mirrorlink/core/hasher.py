"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements single-pass file hashing with pluggable hash algorithms.

HashEngineImpl reads each file exactly once in fixed-size chunks and feeds every
requested algorithm with the same chunk before reading the next one.
"""

import hashlib
import logging
from typing import Callable, Dict, Iterable, Optional

import xxhash

from mirrorlink.core.errors import FileUnreadable, describe_os_error
from mirrorlink.core.interfaces import HashAccumulator, HashAlgorithm, HashEngine
from mirrorlink.core.models import HashType

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8 * 1024


class HashlibAlgorithmImpl(HashAlgorithm):
    """Any algorithm available through hashlib.new()."""

    def __init__(self, name: str):
        self.name = name

    def new(self) -> HashAccumulator:
        return hashlib.new(self.name)


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    def new(self) -> HashAccumulator:
        return xxhash.xxh64()


DEFAULT_ALGORITHMS: Dict[HashType, HashAlgorithm] = {
    HashType.MD5: HashlibAlgorithmImpl("md5"),
    HashType.SHA1: HashlibAlgorithmImpl("sha1"),
    HashType.SHA256: HashlibAlgorithmImpl("sha256"),
    HashType.XXH64: XXHashAlgorithmImpl(),
}


class HashEngineImpl(HashEngine):
    """
    Computes several digests of a file in one read.

    Each call allocates its own read buffer, so nothing is carried over
    between files.
    """

    def __init__(
        self,
        algorithms: Optional[Dict[HashType, HashAlgorithm]] = None,
        chunk_size: int = CHUNK_SIZE,
        progress_callback: Optional[Callable[[int], None]] = None
    ):
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self.algorithms = dict(DEFAULT_ALGORITHMS)
        if algorithms:
            self.algorithms.update(algorithms)
        self.chunk_size = chunk_size
        self.progress_callback = progress_callback
        self._bytes_hashed = 0

    @property
    def bytes_hashed(self) -> int:
        """Total bytes read by this engine since creation."""
        return self._bytes_hashed

    def compute(self, path: str, hash_types: Iterable[HashType]) -> Dict[HashType, bytes]:
        requested = list(dict.fromkeys(hash_types))
        if not requested:
            raise ValueError("At least one hash type is required")
        for hash_type in requested:
            if hash_type not in self.algorithms:
                raise ValueError(f"No algorithm registered for {hash_type.value}")

        accumulators = {h: self.algorithms[h].new() for h in requested}
        buffer = bytearray(self.chunk_size)
        view = memoryview(buffer)
        bytes_read = 0

        try:
            with open(path, "rb") as f:
                while True:
                    n = f.readinto(buffer)
                    if not n:
                        break
                    chunk = view[:n]
                    for accumulator in accumulators.values():
                        accumulator.update(chunk)
                    bytes_read += n
                    self._bytes_hashed += n
                    if self.progress_callback:
                        self.progress_callback(self._bytes_hashed)
        except OSError as e:
            logger.debug(f"Hashing failed for {path} after {bytes_read} bytes: {e}")
            raise FileUnreadable(path, describe_os_error(e)) from e

        logger.debug(f"Hashed {path} ({bytes_read} bytes) with {[h.value for h in requested]}")
        return {h: accumulator.digest() for h, accumulator in accumulators.items()}
