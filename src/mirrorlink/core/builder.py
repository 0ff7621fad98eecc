"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

builder.py
Drives one run: walk the tree, hash every file once, build its locators and offer
the record to the duplicate index. Strictly sequential, one file at a time.
"""
import logging
import os
import time
from typing import Callable, List, Optional, Tuple

from mirrorlink.core.errors import FileUnreadable, ManifestError, describe_os_error
from mirrorlink.core.interfaces import DirectoryWalker, DuplicateIndex, HashEngine, LocatorBuilder
from mirrorlink.core.models import (
    FileRecord, HashType, RunStats, SkippedEntry, UnreadablePolicy, WalkEntry)
from mirrorlink.core.store import FileRecordStore

logger = logging.getLogger(__name__)


# =============================
# Main Builder Class
# =============================
class ManifestBuilderImpl:
    """
    Builds the ordered list of surviving file records for a directory tree.
    RunStats is the single accumulator of a run and is owned by build().
    """
    def __init__(
        self,
        walker: DirectoryWalker,
        hasher: HashEngine,
        index: DuplicateIndex,
        locator_builder: LocatorBuilder,
        hash_types: List[HashType],
        unreadable_policy: UnreadablePolicy = UnreadablePolicy.SKIP
    ):
        self.walker = walker
        self.hasher = hasher
        self.index = index
        self.locator_builder = locator_builder
        self.hash_types = list(hash_types)
        self.unreadable_policy = unreadable_policy

    def build(
        self,
        progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
        stats: Optional[RunStats] = None
    ) -> Tuple[FileRecordStore, RunStats]:
        """
        Run the traversal.
        Args:
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stats: Accumulator to fill, e.g. one with listeners attached. A new one by default
        Returns:
            Tuple[FileRecordStore, RunStats]
        Raises:
            DirectoryUnreadable: root cannot be opened, or any directory under FAIL policy
            FileUnreadable: a file cannot be read under FAIL policy, or a duplicate
                            candidate cannot be re-read for verification
            DigestCollisionError: under CollisionPolicy.FAIL
        """
        stats = stats if stats is not None else RunStats()
        start_time = time.time()
        start_bytes = self.hasher.bytes_hashed

        self.walker.on_error = lambda error: self._handle_unreadable(error, stats)

        for entry in self.walker.walk():
            if entry.is_dir:
                stats.directories_seen += 1
                logger.debug(f"Entering {entry.name}/")
                if progress_callback:
                    progress_callback("Scanning", stats.directories_seen, None)
                continue

            stats.files_seen += 1
            record = self._make_record(entry, stats)
            if record is not None:
                self.index.offer(record)

            if progress_callback:
                progress_callback("Hashing", stats.files_seen, None)

        stats.bytes_hashed = self.hasher.bytes_hashed - start_bytes
        stats.duplicates_merged = self.index.duplicates_merged
        stats.collisions = list(self.index.collisions)
        stats.records_kept = len(self.index.store)
        stats.total_time = time.time() - start_time

        logger.debug(
            f"Run finished: {stats.files_seen} files, {stats.records_kept} records, "
            f"{stats.duplicates_merged} duplicates, {stats.collision_count} collisions"
        )
        return self.index.store, stats

    def _make_record(self, entry: WalkEntry, stats: RunStats) -> Optional[FileRecord]:
        """Stat and hash one file. Returns None if it was skipped as unreadable."""
        try:
            st = os.stat(entry.absolute_path)
        except OSError as e:
            error = FileUnreadable(entry.absolute_path, describe_os_error(e),
                                   operation="Reading file metadata")
            self._handle_unreadable(error, stats, cause=e)
            return None

        try:
            digests = self.hasher.compute(entry.absolute_path, self.hash_types)
        except FileUnreadable as e:
            self._handle_unreadable(e, stats)
            return None

        logger.info(f"{entry.name} ({st.st_size} bytes)")
        return FileRecord(
            relative_path=entry.relative_path,
            absolute_path=entry.absolute_path,
            size=st.st_size,
            modified_time=st.st_mtime_ns,
            digests=digests,
            locations=self.locator_builder.build(entry.relative_path, digests)
        )

    def _handle_unreadable(
        self,
        error: ManifestError,
        stats: RunStats,
        cause: Optional[BaseException] = None
    ) -> None:
        """Same policy for directories and files: skip and report, or abort the run."""
        if self.unreadable_policy == UnreadablePolicy.FAIL:
            logger.error(str(error))
            if cause is not None:
                raise error from cause
            raise error

        logger.warning(f"Skipping: {error}")
        stats.add_skipped(SkippedEntry(path=error.path, operation=error.operation, reason=error.reason))
