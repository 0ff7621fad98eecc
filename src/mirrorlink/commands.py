"""
Unified command orchestrator for manifest generation.
This is the single place where the engine is wired together; the CLI and
library users go through it.
"""
from typing import Callable, Iterable, List, Optional, Tuple

from mirrorlink.core.builder import ManifestBuilderImpl
from mirrorlink.core.comparator import ContentComparatorImpl
from mirrorlink.core.hasher import HashEngineImpl
from mirrorlink.core.index import DuplicateIndexImpl
from mirrorlink.core.models import FileRecord, ManifestParams, RunStats
from mirrorlink.core.store import FileRecordStore
from mirrorlink.core.walker import DirectoryWalkerImpl
from mirrorlink.services.locator_service import LocatorBuilderImpl
from mirrorlink.services.manifest_service import ManifestService


class ManifestCommand:
    """
    Orchestrates one manifest run:
    1. Build walker, hash engine, comparator, store and duplicate index from params
    2. Walk the tree, hash every file once and offer it to the index
    3. Write the surviving records as a Metalink document

    Usage:
        params = ManifestParams.from_human_readable("/srv/mirror", "md5,sha256",
                                                    base_url="ftp://ftp.example.com/")
        command = ManifestCommand()
        records, stats = command.execute(params, progress_callback=printer)
        command.write(records, "mirror.meta4", params)
    """

    def __init__(self):
        self.store: Optional[FileRecordStore] = None
        self.index: Optional[DuplicateIndexImpl] = None

    def execute(
            self,
            params: ManifestParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stats: Optional[RunStats] = None
    ) -> Tuple[List[FileRecord], RunStats]:
        """
        Execute one run with given parameters.

        Args:
            params: Validated manifest parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stats: Optional RunStats to fill (listeners receive "skipped" events)

        Returns:
            Tuple of (surviving records in traversal order, statistics)

        Raises:
            ValueError: If the file URL base cannot be resolved
            ManifestError: If the root is unreadable, or a fatal read/collision error occurs
        """
        walker = DirectoryWalkerImpl(
            params.root_dir,
            recursive=params.recursive,
            follow_symlinks=params.follow_symlinks
        )
        hasher = HashEngineImpl()
        self.store = FileRecordStore()
        self.index = DuplicateIndexImpl(
            self.store,
            mode=params.mode,
            ignore_dates=params.ignore_dates,
            comparator=ContentComparatorImpl(),
            collision_policy=params.collision_policy
        )
        builder = ManifestBuilderImpl(
            walker=walker,
            hasher=hasher,
            index=self.index,
            locator_builder=LocatorBuilderImpl.from_params(params),
            hash_types=params.hash_types,
            unreadable_policy=params.unreadable_policy
        )

        store, stats = builder.build(progress_callback=progress_callback, stats=stats)
        return store.records(), stats

    @staticmethod
    def write(records: Iterable[FileRecord], output_path: str, params: ManifestParams) -> None:
        """Write records to `output_path` as Metalink 4."""
        service = ManifestService(
            hash_types=params.hash_types,
            generator=params.generator,
            include_date=params.include_date
        )
        service.write(records, output_path)
