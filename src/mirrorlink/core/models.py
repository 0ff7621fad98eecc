"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for directory fingerprinting, duplicate consolidation and manifest output.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple, Iterator, Union, Callable, Iterable
from enum import Enum
import logging
import re

from mirrorlink.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


# =============================
# Enums
# =============================

class HashType(Enum):
    """
    Digest algorithms the hash engine can compute in a single pass.
    """
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    XXH64 = "xxh64"

    @property
    def manifest_name(self) -> str:
        """Label used in the manifest <hash type="..."> attribute."""
        mapping = {
            HashType.MD5: "md5",
            HashType.SHA1: "sha-1",
            HashType.SHA256: "sha-256",
            HashType.XXH64: "xxh64",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class DuplicateMode(Enum):
    """
    Duplicate handling mode, selected once per run.
    """
    OFF = "off"
    FIND_DUPLICATES = "find"
    CONSOLIDATE = "consolidate"

    @property
    def display_name(self) -> str:
        """Human-readable name for console output."""
        mapping = {
            DuplicateMode.OFF: "Off",
            DuplicateMode.FIND_DUPLICATES: "Find duplicates",
            DuplicateMode.CONSOLIDATE: "Consolidate",
        }
        return mapping.get(self, self.value)

    @property
    def description(self) -> str:
        """Detailed description for help text."""
        mapping = {
            DuplicateMode.OFF:
                "Every file gets its own <file> entry",
            DuplicateMode.FIND_DUPLICATES:
                "Keep every entry, identical files list each other's URLs",
            DuplicateMode.CONSOLIDATE:
                "One entry per group of identical files, with all URLs",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"


class UnreadablePolicy(Enum):
    """What to do with a directory or file that cannot be read."""
    SKIP = "skip"
    FAIL = "fail"


class CollisionPolicy(Enum):
    """What to do when two different files share the same digest."""
    IGNORE = "ignore"
    WARN = "warn"
    FAIL = "fail"


# ======================
#  Locators
# ======================

@dataclass(frozen=True)
class Locator:
    """
    Where a file can be retrieved from.
    `url` is the identity; `type` is the scheme tag (ftp, http, file, ni, magnet).
    """
    url: str
    type: str
    location: Optional[str] = None

    def __repr__(self):
        return f"<Locator {self.type} {self.url}>"


# Locators derived from the digest itself; equal for any two files with equal sha256
CONTENT_ADDRESSED_TYPES = frozenset({"ni", "magnet"})


class LocationSet:
    """
    Ordered set of locators, unique by url.
    Duplicate records in FIND_DUPLICATES mode hold the same LocationSet object.
    """

    def __init__(self, locators: Optional[Iterable[Locator]] = None):
        self._locators: Dict[str, Locator] = {}
        for locator in locators or []:
            self.add(locator)

    def add(self, locator: Locator) -> bool:
        """Adds a locator. Returns False if its url is already present."""
        if locator.url in self._locators:
            return False
        self._locators[locator.url] = locator
        return True

    def absorb(self, other: "LocationSet") -> int:
        """Union `other` into this set in place. Returns the number of new locators."""
        if other is self:
            return 0
        return sum(1 for locator in list(other) if self.add(locator))

    def shares_locator_with(self, other: "LocationSet", ignore_types: Iterable[str] = ()) -> bool:
        """True if both sets hold the same url, not counting locators of `ignore_types`."""
        ignored = set(ignore_types)
        urls = {url for url, loc in self._locators.items() if loc.type not in ignored}
        if other is self:
            return bool(urls)
        return not urls.isdisjoint(other._locators.keys())

    def urls(self) -> List[str]:
        return list(self._locators)

    def __contains__(self, item: Union[str, Locator]) -> bool:
        url = item.url if isinstance(item, Locator) else item
        return url in self._locators

    def __iter__(self) -> Iterator[Locator]:
        return iter(list(self._locators.values()))

    def __len__(self) -> int:
        return len(self._locators)

    def __eq__(self, other) -> bool:
        if not isinstance(other, LocationSet):
            return NotImplemented
        return list(self._locators.values()) == list(other._locators.values())

    def __repr__(self):
        return f"<LocationSet {self.urls()}>"


# ======================
#  Core Data Models
# ======================

@dataclass
class WalkEntry:
    """A directory entry produced by the walker."""
    relative_path: Tuple[str, ...]
    absolute_path: str
    kind: EntryKind
    depth: int = 0

    @property
    def name(self) -> str:
        return "/".join(self.relative_path)

    @property
    def is_dir(self) -> bool:
        return self.kind == EntryKind.DIRECTORY


@dataclass
class FileRecord:
    """
    Metadata for a single discovered file.
    Digests are filled once, before the record is offered to the duplicate index.
    """
    relative_path: Tuple[str, ...]
    absolute_path: str
    size: int  # in bytes, from filesystem metadata
    modified_time: int  # st_mtime_ns
    digests: Dict[HashType, bytes] = field(default_factory=dict)
    locations: LocationSet = field(default_factory=LocationSet)
    handle: Optional[int] = None

    def __post_init__(self):
        self.relative_path = tuple(self.relative_path)
        for key, value in self.digests.items():
            if not isinstance(value, bytes):
                raise ValueError(f"Digest '{key.value}' must be bytes")

    @property
    def name(self) -> str:
        """Relative path joined with '/', as written to the manifest."""
        return "/".join(self.relative_path)

    def hex_digest(self, hash_type: HashType) -> Optional[str]:
        value = self.digests.get(hash_type)
        return value.hex() if value is not None else None

    def __repr__(self):
        return f"<FileRecord name={self.name}, size={self.size}>"


# ======================
#  Statistics
# ======================

@dataclass(frozen=True)
class CollisionReport:
    """Two different files that produced the same digest."""
    digest: bytes
    first_path: str
    second_path: str


@dataclass(frozen=True)
class SkippedEntry:
    """A directory or file left out of the run because it could not be read."""
    path: str
    operation: str
    reason: str


class RunStats:
    """
    Statistics collected during one run.
    """
    def __init__(self):
        self.files_seen: int = 0
        self.directories_seen: int = 0
        self.bytes_hashed: int = 0
        self.duplicates_merged: int = 0
        self.records_kept: int = 0
        self.total_time: float = 0.0
        self.collisions: List[CollisionReport] = []
        self.skipped: List[SkippedEntry] = []
        self._listeners: List[Callable[[str, Dict], None]] = []

    @property
    def collision_count(self) -> int:
        return len(self.collisions)

    @property
    def throughput_mbps(self) -> float:
        """Megabits per second over the whole run (decimal megabits)."""
        return ConvertUtils.mbps(self.bytes_hashed, self.total_time)

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats change."""
        self._listeners.append(listener)

    def notify(self, event: str, payload: Dict) -> None:
        for listener in self._listeners:
            try:
                listener(event, payload)
            except Exception:
                logger.exception(f"Error in stats listener for event '{event}'")

    def add_skipped(self, entry: SkippedEntry) -> None:
        self.skipped.append(entry)
        self.notify("skipped", {"path": entry.path, "operation": entry.operation,
                                "reason": entry.reason})

    def print_summary(self) -> str:
        lines = [
            "📊 Run Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            f"Files seen: {self.files_seen}",
            f"Directories seen: {self.directories_seen}",
            f"Bytes hashed: {self.bytes_hashed}",
            f"Records kept: {self.records_kept}",
            f"Duplicates merged: {self.duplicates_merged}",
            f"Digest collisions: {self.collision_count}",
        ]
        if self.skipped:
            lines.append(f"Skipped (unreadable): {len(self.skipped)}")
        if self.total_time > 0:
            lines.append(f"Throughput: {self.throughput_mbps:.2f} Mbps")
        return "\n".join(lines)


"""
DTO for manifest run parameters with built-in validation.
"""

SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*$")


@dataclass
class ManifestParams:
    """Parameters for one manifest run with validation."""
    root_dir: str
    hash_types: List[HashType] = field(default_factory=lambda: [HashType.SHA256])
    mode: DuplicateMode = DuplicateMode.OFF
    ignore_dates: bool = False
    recursive: bool = True
    follow_symlinks: bool = False
    unreadable_policy: UnreadablePolicy = UnreadablePolicy.SKIP
    collision_policy: CollisionPolicy = CollisionPolicy.WARN
    base_url: Optional[str] = None
    country: Optional[str] = None
    file_url: bool = False
    ni_url: bool = False
    magnet_url: bool = False
    generator: bool = True
    include_date: bool = True

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        # Keep first occurrence, drop repeats
        unique: List[HashType] = []
        for hash_type in self.hash_types:
            if hash_type not in unique:
                unique.append(hash_type)
        self.hash_types = unique

        if not self.hash_types:
            raise ValueError("At least one hash type is required")

        if self.mode != DuplicateMode.OFF and HashType.SHA256 not in self.hash_types:
            raise ValueError("Duplicate detection requires the sha256 hash type")

        if (self.ni_url or self.magnet_url) and HashType.SHA256 not in self.hash_types:
            raise ValueError("ni and magnet URLs require the sha256 hash type")

        if not (self.base_url or self.file_url or self.ni_url or self.magnet_url):
            raise ValueError("At least one of base URL, file URL, ni URL or magnet URL is required")

        if self.base_url is not None:
            scheme, sep, _ = self.base_url.partition("://")
            if not sep or not SCHEME_RE.match(scheme):
                raise ValueError(f"Invalid base URL: '{self.base_url}'")

        if self.country:
            country = self.country.strip()
            if len(country) != 2 or not country.isascii() or not country.isalpha():
                raise ValueError(f"Invalid country code: '{self.country}'")
            self.country = country.lower()
        else:
            self.country = None

    @staticmethod
    def parse_hash_types(hash_list_str: str) -> List[HashType]:
        """Parses a comma-separated list such as 'md5,sha256'."""
        result = []
        for item in hash_list_str.split(","):
            name = item.strip().lower()
            if not name:
                continue
            try:
                result.append(HashType(name))
            except ValueError:
                valid = ", ".join(h.value for h in HashType)
                raise ValueError(f"Unknown hash type: '{name}'. Valid options: {valid}")
        return result

    @staticmethod
    def from_human_readable(
            root_dir: str,
            hash_list_str: str = "sha256",
            mode: DuplicateMode = DuplicateMode.OFF,
            **kwargs
    ) -> 'ManifestParams':
        """
        Factory method to create params from CLI-style string inputs.
        """
        return ManifestParams(
            root_dir=root_dir,
            hash_types=ManifestParams.parse_hash_types(hash_list_str),
            mode=mode,
            **kwargs
        )
