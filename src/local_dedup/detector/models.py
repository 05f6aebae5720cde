"""Data models for candidates, equivalence groups and scan reports."""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


def display_path(path: Path) -> str:
    """Render a path as valid UTF-8 text.

    Bytes that are not valid in the filesystem encoding are shown as
    backslash escapes instead of failing on output.
    """
    return os.fsencode(path).decode("utf-8", "backslashreplace")


class DigestAlgorithm(str, Enum):
    """Content digest used for every file in a run."""

    SHA256 = "sha256"
    XXH64 = "xxh64"

    @property
    def is_cryptographic(self) -> bool:
        """Whether collisions are computationally infeasible."""
        return self is DigestAlgorithm.SHA256


@dataclass(frozen=True)
class Candidate:
    """A file that passed every filter and is waiting to be hashed."""

    path: Path
    size: int


@dataclass(frozen=True, order=True)
class GroupKey:
    """Size and digest shared by every member of an equivalence group."""

    size: int
    digest: bytes

    @property
    def hexdigest(self) -> str:
        """Digest as lowercase hex."""
        return self.digest.hex()


@dataclass(frozen=True)
class EquivalenceGroup:
    """Immutable view of all paths sharing a GroupKey."""

    key: GroupKey
    paths: frozenset[Path]

    @property
    def is_duplicate(self) -> bool:
        """Only groups with two or more paths hold duplicates."""
        return len(self.paths) >= 2


@dataclass
class DuplicateGroup:
    """A group of duplicate files, ready for reporting."""

    group_id: int
    paths: list[Path]
    size: int
    digest: bytes

    @property
    def hexdigest(self) -> str:
        """Digest as lowercase hex."""
        return self.digest.hex()

    @property
    def total_size(self) -> int:
        """Total size of all duplicates in this group."""
        return self.size * len(self.paths)

    @property
    def wasted_size(self) -> int:
        """Wasted space (size of all duplicates except one)."""
        return self.size * (len(self.paths) - 1)

    @property
    def count(self) -> int:
        """Number of duplicate files in this group."""
        return len(self.paths)


@dataclass(frozen=True)
class ScanWarning:
    """A directory entry skipped during traversal."""

    path: Path
    reason: str


@dataclass(frozen=True)
class HashFailure:
    """A candidate left out of grouping because it could not be read."""

    path: Path
    reason: str


@dataclass
class TraversalResult:
    """Output of the traversal phase."""

    candidates: list[Candidate] = field(default_factory=list)
    warnings: list[ScanWarning] = field(default_factory=list)


@dataclass
class ScanReport:
    """Ordered duplicate groups plus everything that went wrong on the way."""

    groups: list[DuplicateGroup]
    files_scanned: int
    hash_failures: list[HashFailure] = field(default_factory=list)
    warnings: list[ScanWarning] = field(default_factory=list)

    @property
    def total_wasted(self) -> int:
        return sum(g.wasted_size for g in self.groups)

    @property
    def duplicate_files(self) -> int:
        return sum(g.count for g in self.groups)

    @property
    def is_empty(self) -> bool:
        """True when traversal produced no candidates at all."""
        return self.files_scanned == 0
