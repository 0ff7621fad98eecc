"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Typed failures raised by the walker, hasher, comparator and duplicate index.
"""
from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from mirrorlink.core.models import CollisionReport


class ManifestError(RuntimeError):
    """Base error. Carries the path and the operation that failed."""

    def __init__(self, path: str, operation: str, reason: str = "") -> None:
        self.path = path
        self.operation = operation
        self.reason = reason
        message = f"{operation} failed for {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class DirectoryUnreadable(ManifestError):
    def __init__(self, path: str, reason: str = "", operation: str = "Opening directory") -> None:
        super().__init__(path, operation, reason)


class FileUnreadable(ManifestError):
    def __init__(self, path: str, reason: str = "", operation: str = "Reading file") -> None:
        super().__init__(path, operation, reason)


class DigestCollisionError(ManifestError):
    def __init__(self, report: "CollisionReport", operation: str = "Verifying duplicate") -> None:
        self.report = report
        reason = (f"different content with identical digest {report.digest.hex()} "
                  f"(also at {report.first_path})")
        super().__init__(report.second_path, operation, reason)


def describe_os_error(error: Optional[OSError]) -> str:
    """Short reason string for an OSError (strerror when available)."""
    if error is None:
        return ""
    return error.strerror or str(error)
