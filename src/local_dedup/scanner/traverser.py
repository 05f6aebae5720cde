"""Local directory traversal."""

import os
import stat
from pathlib import Path
from typing import Optional

from ..common.exceptions import ConfigError, TraversalError
from ..common.logging import get_logger
from ..config.settings import ScanOptions
from ..detector.models import Candidate, ScanWarning, TraversalResult
from .filters import CandidateFilter

logger = get_logger(__name__)

_DirIdentity = tuple[int, int]


class Traverser:
    """Walks a directory tree and collects (size, path) candidates."""

    def __init__(self, options: ScanOptions) -> None:
        """Initialize traverser.

        Args:
            options: Scan options (root, recursion, symlink policy, filters)
        """
        self.root = options.root
        self.recursive = options.recursive
        self.follow_symlinks = options.follow_symlinks
        self.filter = CandidateFilter(options)

    def collect(self) -> TraversalResult:
        """Enumerate every candidate under the root.

        Unreadable entries are skipped and reported as warnings.

        Returns:
            Candidates in discovery order plus traversal warnings

        Raises:
            ConfigError: If the root is not an existing, readable directory
        """
        root = self.root
        if not root.is_dir():
            raise ConfigError(f"Please specify a valid directory to search: {root}")

        logger.info(
            f"Scanning {root} (recursive={self.recursive}, "
            f"follow_symlinks={self.follow_symlinks})"
        )

        result = TraversalResult()
        root_stat = root.stat()
        # Each pending directory carries the identities of its ancestors
        stack: list[tuple[Path, frozenset[_DirIdentity]]] = [
            (root, frozenset({(root_stat.st_dev, root_stat.st_ino)}))
        ]

        while stack:
            directory, ancestors = stack.pop()
            try:
                entries = self._list_directory(directory)
            except TraversalError as e:
                if directory == root:
                    raise ConfigError(f"Cannot read directory {root}: {e}") from e
                self._warn(result, directory, str(e))
                continue

            subdirs: list[tuple[Path, frozenset[_DirIdentity]]] = []
            for entry in entries:
                path = Path(entry.path)
                try:
                    subdir = self._visit(entry, path, ancestors, result)
                except TraversalError as e:
                    self._warn(result, path, str(e))
                    continue
                if subdir is not None:
                    subdirs.append(subdir)

            # Reverse so that subdirectories are popped in name order
            stack.extend(reversed(subdirs))

        logger.info(
            f"Found {len(result.candidates)} candidates "
            f"({len(result.warnings)} entries skipped with errors)"
        )
        return result

    def _list_directory(self, directory: Path) -> list[os.DirEntry[str]]:
        try:
            with os.scandir(directory) as it:
                return sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise TraversalError(e.strerror or str(e)) from e

    def _visit(
        self,
        entry: os.DirEntry[str],
        path: Path,
        ancestors: frozenset[_DirIdentity],
        result: TraversalResult,
    ) -> Optional[tuple[Path, frozenset[_DirIdentity]]]:
        """Classify one entry; return a directory to descend into, if any."""
        try:
            is_link = entry.is_symlink()
        except OSError as e:
            raise TraversalError(e.strerror or str(e)) from e

        if is_link and not self.follow_symlinks:
            logger.debug(f"Skipping symbolic link: {path}")
            return None

        name = entry.name
        if self.filter.is_excluded_name(name):
            logger.debug(f"Skipping dot entry: {path}")
            return None

        try:
            st = entry.stat(follow_symlinks=True)
        except OSError as e:
            raise TraversalError(e.strerror or str(e)) from e

        if stat.S_ISDIR(st.st_mode):
            if not self.recursive:
                return None
            identity = (st.st_dev, st.st_ino)
            if identity in ancestors:
                self._warn(result, path, "symbolic link cycle")
                return None
            return path, ancestors | {identity}

        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping special file: {path}")
            return None

        if self.filter.accepts_file(name, st.st_size):
            result.candidates.append(Candidate(path=path, size=st.st_size))
        else:
            logger.debug(f"Skipping {path} (rejected by filters)")
        return None

    @staticmethod
    def _warn(result: TraversalResult, path: Path, reason: str) -> None:
        logger.warning(f"Skipping {path}: {reason}")
        result.warnings.append(ScanWarning(path=path, reason=reason))
