"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the manifest engine.
These protocols enforce structural typing using Python's `typing.Protocol` so the
builder can be wired with real or test implementations.

Key Components:
---------------
- HashAccumulator / HashAlgorithm: incremental digest functions (md5, sha1, sha256, xxh64).
- HashEngine: single-pass multi-digest file hashing.
- ContentComparator: byte-exact comparison of two files.
- DirectoryWalker: deterministic depth-first directory enumeration.
- DuplicateIndex: digest-keyed duplicate detection and consolidation.
- LocatorBuilder: builds the locator set of a file record.
"""

from typing import Protocol, Callable, Dict, Iterable, Iterator, List, Optional, Tuple
from mirrorlink.core.errors import DirectoryUnreadable
from mirrorlink.core.models import CollisionReport, FileRecord, HashType, LocationSet, WalkEntry
from mirrorlink.core.store import FileRecordStore


# ===== Interfaces =====

class HashAccumulator(Protocol):
    def update(self, data) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for digest algorithms.

    Allows plugging in different hash functions without affecting the engine.
    """
    def new(self) -> HashAccumulator:
        """Returns a fresh incremental accumulator."""
        ...


class HashEngine(Protocol):
    """Interface for hashing a whole file with several algorithms in one pass."""

    @property
    def bytes_hashed(self) -> int: ...

    def compute(self, path: str, hash_types: Iterable[HashType]) -> Dict[HashType, bytes]:
        """
        Read `path` once and return every requested digest.

        Raises:
            FileUnreadable: if the file cannot be opened or read.
        """
        ...


class ContentComparator(Protocol):
    def same_content(self, path_a: str, path_b: str) -> bool:
        """True if both files hold exactly the same bytes."""
        ...


class DirectoryWalker(Protocol):
    """
    Interface for enumerating a directory tree.

    Methods:
        walk: Yields entries depth first, case-insensitively ordered per directory.
    """
    on_error: Optional[Callable[[DirectoryUnreadable], None]]

    def walk(self) -> Iterator[WalkEntry]:
        ...


class DuplicateIndex(Protocol):
    """
    Interface for the duplicate detection and consolidation engine.
    """
    store: FileRecordStore
    duplicates_merged: int
    collisions: List[CollisionReport]

    def offer(self, record: FileRecord) -> Optional[int]:
        """
        Offer a fully hashed record.

        Returns:
            The record's store handle, or None if it was consolidated into an earlier record.
        """
        ...


class LocatorBuilder(Protocol):
    def build(self, relative_path: Tuple[str, ...], digests: Dict[HashType, bytes]) -> LocationSet:
        ...
