"""
Core manifest engine: walker, hash engine, comparator, record store, duplicate index and builder.

This package contains the performance-critical foundation of mirrorlink:
- DirectoryWalkerImpl: deterministic, case-insensitive depth-first traversal
- HashEngineImpl: single-pass md5/sha1/sha256/xxh64 hashing through a per-call buffer
- ContentComparatorImpl: lock-step byte comparison for duplicate verification
- DuplicateIndexImpl: sha256-keyed duplicate detection, merging and collision counting
- ManifestBuilderImpl: sequential driver that ties everything together
- Models: FileRecord, LocationSet, ManifestParams, RunStats and enums

All components are pure Python with no console output, suitable for CLI and library usage.
"""

from .errors import ManifestError, DirectoryUnreadable, FileUnreadable, DigestCollisionError
from .walker import DirectoryWalkerImpl
from .hasher import HashEngineImpl, HashlibAlgorithmImpl, XXHashAlgorithmImpl, DEFAULT_ALGORITHMS
from .comparator import ContentComparatorImpl
from .store import FileRecordStore
from .index import DuplicateIndexImpl
from .builder import ManifestBuilderImpl
from .models import (
    HashType, DuplicateMode, EntryKind, UnreadablePolicy, CollisionPolicy,
    CONTENT_ADDRESSED_TYPES, Locator, LocationSet, WalkEntry, FileRecord,
    CollisionReport, SkippedEntry,
    RunStats, ManifestParams)

__all__ = [
    "ManifestError",
    "DirectoryUnreadable",
    "FileUnreadable",
    "DigestCollisionError",
    "DirectoryWalkerImpl",
    "HashEngineImpl",
    "HashlibAlgorithmImpl",
    "XXHashAlgorithmImpl",
    "DEFAULT_ALGORITHMS",
    "ContentComparatorImpl",
    "FileRecordStore",
    "DuplicateIndexImpl",
    "ManifestBuilderImpl",
    "HashType",
    "DuplicateMode",
    "EntryKind",
    "UnreadablePolicy",
    "CollisionPolicy",
    "CONTENT_ADDRESSED_TYPES",
    "Locator",
    "LocationSet",
    "WalkEntry",
    "FileRecord",
    "CollisionReport",
    "SkippedEntry",
    "RunStats",
    "ManifestParams",
]
