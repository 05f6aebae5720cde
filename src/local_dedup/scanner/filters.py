"""Candidate filter rules."""

from ..config.settings import ScanOptions


class CandidateFilter:
    """Decides whether a directory entry qualifies for scanning.

    Rules are applied in order and the first rejecting rule wins:
    dot-exclusion (files and directories), name pattern (files only),
    minimum size, maximum size (files only).
    """

    def __init__(self, options: ScanOptions) -> None:
        self.exclude_dots = options.exclude_dots
        self.name_filter = options.name_filter
        self.min_size = options.min_size
        self.max_size = options.max_size

    def accepts_file(self, name: str, size: int) -> bool:
        """Check whether a regular file becomes a candidate."""
        if self.is_excluded_name(name):
            return False
        if self.name_filter is not None and not self.name_filter.search(name):
            return False
        return self.size_passes(size)

    def size_passes(self, size: int) -> bool:
        """Check if file size is within configured (inclusive) limits."""
        if self.min_size is not None and size < self.min_size:
            return False
        if self.max_size is not None and size > self.max_size:
            return False
        return True

    def is_excluded_name(self, name: str) -> bool:
        """Dot-exclusion rule, shared by files and directories."""
        return self.exclude_dots and name.startswith(".")
