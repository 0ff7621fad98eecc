"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/walker.py
Deterministic depth-first directory traversal.
Features:
- Entries of every directory are visited in case-insensitive name order
- Subdirectories are entered at their sorted position, between sibling files
- Explicit stack of directory iterators instead of recursion
- Unreadable subdirectories are reported and skipped, siblings continue
"""

import os
from typing import Callable, Iterator, List, Optional, Set, Tuple
import logging

logger = logging.getLogger(__name__)

# Local imports
from mirrorlink.core.errors import DirectoryUnreadable, describe_os_error
from mirrorlink.core.interfaces import DirectoryWalker
from mirrorlink.core.models import EntryKind, WalkEntry


def sort_key(name: str) -> Tuple[str, str]:
    """Case-insensitive order; the raw name breaks ties between 'a' and 'A'."""
    return name.casefold(), name


class DirectoryWalkerImpl(DirectoryWalker):
    """
    Walks a directory tree and yields files and directories.

    Attributes:
        root_dir: Root directory to walk
        recursive: Descend into subdirectories
        follow_symlinks: Treat symlinks as their targets instead of skipping them
        on_error: Called with DirectoryUnreadable for every subdirectory that cannot be
                  opened. It may raise to abort the walk. Without a handler the error
                  is logged and the subtree skipped.
    """

    def __init__(
        self,
        root_dir: str,
        recursive: bool = True,
        follow_symlinks: bool = False,
        on_error: Optional[Callable[[DirectoryUnreadable], None]] = None
    ):
        self.root_dir = os.path.abspath(root_dir)
        self.recursive = recursive
        self.follow_symlinks = follow_symlinks
        self.on_error = on_error

    def walk(self) -> Iterator[WalkEntry]:
        """
        Yields every entry below root_dir, depth first.
        A directory is yielded before its contents.

        Raises:
            DirectoryUnreadable: if the root itself cannot be opened.
        """
        logger.debug(f"Walking directory: {self.root_dir}")

        if not os.path.isdir(self.root_dir):
            error = DirectoryUnreadable(self.root_dir, "Not a directory")
            logger.error(str(error))
            raise error

        visited: Set[Tuple[int, int]] = set()
        if self.follow_symlinks:
            self._mark_visited(self.root_dir, visited)

        stack = [iter(self._list_dir(self.root_dir, ()))]

        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            yield entry

            if not entry.is_dir or not self.recursive:
                continue

            if self.follow_symlinks and not self._mark_visited(entry.absolute_path, visited):
                logger.warning(f"Skipping already visited directory: {entry.absolute_path}")
                continue

            try:
                children = self._list_dir(entry.absolute_path, entry.relative_path)
            except DirectoryUnreadable as e:
                self._report(e)
                continue
            stack.append(iter(children))

    def _list_dir(self, abs_dir: str, rel_prefix: Tuple[str, ...]) -> List[WalkEntry]:
        """Reads one directory and returns its entries in walk order."""
        try:
            with os.scandir(abs_dir) as it:
                dir_entries = list(it)
        except OSError as e:
            raise DirectoryUnreadable(abs_dir, describe_os_error(e)) from e

        entries = []
        for dir_entry in sorted(dir_entries, key=lambda d: sort_key(d.name)):
            name = dir_entry.name
            if name in (".", ".."):
                continue
            kind = self._classify(dir_entry)
            if kind is None:
                continue
            relative_path = rel_prefix + (name,)
            entries.append(WalkEntry(
                relative_path=relative_path,
                absolute_path=os.path.join(abs_dir, name),
                kind=kind,
                depth=len(relative_path)
            ))
        return entries

    def _classify(self, dir_entry: os.DirEntry) -> Optional[EntryKind]:
        try:
            if dir_entry.is_symlink() and not self.follow_symlinks:
                logger.debug(f"Skipping symbolic link: {dir_entry.path}")
                return None
            if dir_entry.is_dir(follow_symlinks=self.follow_symlinks):
                return EntryKind.DIRECTORY
            if dir_entry.is_file(follow_symlinks=self.follow_symlinks):
                return EntryKind.FILE
        except OSError as e:
            logger.debug(f"Could not check entry type of {dir_entry.path}: {e}")
            return None

        logger.debug(f"Skipping special file: {dir_entry.path}")
        return None

    @staticmethod
    def _mark_visited(path: str, visited: Set[Tuple[int, int]]) -> bool:
        """Records a directory identity. False if it was seen before (symlink loop)."""
        try:
            st = os.stat(path)
        except OSError:
            # Let _list_dir report the failure
            return True
        key = (st.st_dev, st.st_ino)
        if key in visited:
            return False
        visited.add(key)
        return True

    def _report(self, error: DirectoryUnreadable) -> None:
        if self.on_error is not None:
            self.on_error(error)
            return
        logger.warning(f"Skipping unreadable directory: {error}")
