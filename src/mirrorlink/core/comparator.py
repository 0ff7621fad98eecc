"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/comparator.py
Byte-exact comparison of two files, used to confirm duplicates after a digest match.
"""

import logging
from typing import BinaryIO

from mirrorlink.core.errors import FileUnreadable, describe_os_error
from mirrorlink.core.interfaces import ContentComparator

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8 * 1024


class ContentComparatorImpl(ContentComparator):
    """
    Streams both files in lock-step and stops at the first differing chunk.
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self.chunk_size = chunk_size
        self.comparisons = 0

    def same_content(self, path_a: str, path_b: str) -> bool:
        """
        Returns True if both files contain exactly the same bytes.

        Raises:
            FileUnreadable: if either file cannot be opened or read.
        """
        self.comparisons += 1
        with self._open(path_a) as fa, self._open(path_b) as fb:
            while True:
                chunk_a = self._read(fa, path_a)
                chunk_b = self._read(fb, path_b)
                if chunk_a != chunk_b:
                    logger.debug(f"Content differs: {path_a} vs {path_b}")
                    return False
                if not chunk_a:
                    return True

    @staticmethod
    def _open(path: str) -> BinaryIO:
        try:
            return open(path, "rb")
        except OSError as e:
            logger.error(f"Cannot open {path} for comparison: {e}")
            raise FileUnreadable(path, describe_os_error(e), operation="Comparing file") from e

    def _read(self, f: BinaryIO, path: str) -> bytes:
        try:
            return f.read(self.chunk_size)
        except OSError as e:
            logger.error(f"Cannot read {path} for comparison: {e}")
            raise FileUnreadable(path, describe_os_error(e), operation="Comparing file") from e
