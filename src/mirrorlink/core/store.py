"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/store.py
Ordered arena of surviving file records addressed by stable integer handles.
"""

from typing import Iterator, List

from mirrorlink.core.models import FileRecord


class FileRecordStore:
    """
    Records are appended in discovery order and never removed.
    A handle is the record's position, so it stays valid for the whole run.
    """

    def __init__(self):
        self._records: List[FileRecord] = []

    def add(self, record: FileRecord) -> int:
        if record.handle is not None:
            raise ValueError(f"Record already stored: {record.name}")
        handle = len(self._records)
        record.handle = handle
        self._records.append(record)
        return handle

    def get(self, handle: int) -> FileRecord:
        if handle < 0 or handle >= len(self._records):
            raise KeyError(f"Unknown record handle: {handle}")
        return self._records[handle]

    def records(self) -> List[FileRecord]:
        """Copy of the surviving records in discovery order."""
        return list(self._records)

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
