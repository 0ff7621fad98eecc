"""
mirrorlink: Metalink 4 manifest generator for directory trees.

Core features:
- Deterministic, case-insensitive depth-first traversal
- Single-pass hashing with md5, sha1, sha256 and xxh64 (via xxhash)
- Duplicate detection keyed on sha256 and verified byte for byte:
  find duplicates (shared URL sets) or consolidate (one entry per group)
- Mirror base URLs, file: URLs, RFC 6920 ni URLs and magnet links
- CLI interface for scripts and cron jobs
"""

from mirrorlink.version import __version__

# Public API, only what users should import directly
from mirrorlink.commands import ManifestCommand
from mirrorlink.core import ManifestParams, DuplicateMode, HashType, FileRecord, RunStats
from mirrorlink.utils.convert_utils import ConvertUtils
from mirrorlink.services import LocatorBuilderImpl, ManifestService

__all__ = [
    "ManifestCommand",
    "ManifestParams",
    "DuplicateMode",
    "HashType",
    "FileRecord",
    "RunStats",
    "ConvertUtils",
    "LocatorBuilderImpl",
    "ManifestService",
    "__version__",
]
