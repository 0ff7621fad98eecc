"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/index.py
Digest-keyed duplicate detection and consolidation.

ALGORITHM (per offered record R)
--------------------------------
1. Look up every stored record E with the same key digest (sha256), oldest first
2. Reject E cheaply if size differs, or mtime differs while dates are significant
3. If R and E already share a path locator (base or file URL) they are the same
   file reached twice: confirmed without reading it. ni and magnet URLs do not count
4. Otherwise compare both files byte for byte
5. Equal content: R's locations are merged into E's set and both records share it.
   Later candidates are not checked, a record joins one duplicate group only
6. Different content with identical digest, size and mtime: a digest collision.
   Counted and reported, nothing is merged or dropped
7. CONSOLIDATE drops a confirmed R; every other outcome stores R and indexes it

The first record of a group is the survivor and owns the authoritative location set.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional

from mirrorlink.core.comparator import ContentComparatorImpl
from mirrorlink.core.errors import DigestCollisionError
from mirrorlink.core.interfaces import ContentComparator, DuplicateIndex
from mirrorlink.core.models import (
    CONTENT_ADDRESSED_TYPES, CollisionPolicy, CollisionReport, DuplicateMode, FileRecord, HashType)
from mirrorlink.core.store import FileRecordStore

logger = logging.getLogger(__name__)


class DuplicateIndexImpl(DuplicateIndex):
    """
    Maps the key digest to store handles in insertion order and decides, for every
    new record, whether it is kept, merged into an earlier record or dropped.
    """

    def __init__(
        self,
        store: FileRecordStore,
        mode: DuplicateMode = DuplicateMode.OFF,
        ignore_dates: bool = False,
        comparator: Optional[ContentComparator] = None,
        collision_policy: CollisionPolicy = CollisionPolicy.WARN,
        key: HashType = HashType.SHA256
    ):
        self.store = store
        self.mode = mode
        self.ignore_dates = ignore_dates
        self.comparator = comparator or ContentComparatorImpl()
        self.collision_policy = collision_policy
        self.key = key

        self._handles_by_digest: Dict[bytes, List[int]] = defaultdict(list)
        self.duplicates_merged = 0
        self.collisions: List[CollisionReport] = []
        self.comparisons_skipped = 0

    @property
    def collision_count(self) -> int:
        return len(self.collisions)

    def candidates(self, digest: bytes) -> List[FileRecord]:
        """Stored records sharing `digest`, oldest first."""
        return [self.store.get(h) for h in self._handles_by_digest.get(digest, [])]

    def offer(self, record: FileRecord) -> Optional[int]:
        if self.mode == DuplicateMode.OFF:
            return self.store.add(record)

        digest = record.digests.get(self.key)
        if digest is None:
            raise ValueError(f"Record {record.name} has no {self.key.value} digest")

        confirmed: Optional[FileRecord] = None
        # Members of one group share a LocationSet; a group already found different is skipped
        differing_groups = set()
        for existing in self.candidates(digest):
            if id(existing.locations) in differing_groups:
                continue
            if not self._metadata_matches(record, existing):
                continue

            if record.locations.shares_locator_with(existing.locations, CONTENT_ADDRESSED_TYPES):
                logger.debug(f"{record.name} shares a locator with {existing.name}, no comparison needed")
                self.comparisons_skipped += 1
            elif not self.comparator.same_content(record.absolute_path, existing.absolute_path):
                differing_groups.add(id(existing.locations))
                self._collision(digest, existing, record)
                continue

            self._merge(existing, record)
            confirmed = existing
            break

        if confirmed is not None and self.mode == DuplicateMode.CONSOLIDATE:
            logger.debug(f"Consolidated {record.name} into {confirmed.name}")
            return None

        handle = self.store.add(record)
        self._handles_by_digest[digest].append(handle)
        return handle

    def _metadata_matches(self, record: FileRecord, existing: FileRecord) -> bool:
        if record.size != existing.size:
            return False
        if not self.ignore_dates and record.modified_time != existing.modified_time:
            logger.debug(f"{record.name} and {existing.name} differ in mtime, not compared")
            return False
        return True

    def _merge(self, survivor: FileRecord, duplicate: FileRecord) -> None:
        added = survivor.locations.absorb(duplicate.locations)
        duplicate.locations = survivor.locations
        self.duplicates_merged += 1
        logger.info(f"Duplicate: {duplicate.name} == {survivor.name} ({added} new locators)")

    def _collision(self, digest: bytes, existing: FileRecord, record: FileRecord) -> None:
        report = CollisionReport(
            digest=digest,
            first_path=existing.absolute_path,
            second_path=record.absolute_path
        )
        self.collisions.append(report)

        if self.collision_policy == CollisionPolicy.FAIL:
            error = DigestCollisionError(report)
            logger.error(str(error))
            raise error
        if self.collision_policy == CollisionPolicy.WARN:
            logger.warning(
                f"Digest collision: {report.first_path} and {report.second_path} "
                f"share {self.key.value} {digest.hex()} but differ in content"
            )
