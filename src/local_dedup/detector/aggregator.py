"""Turn a completed grouping into an ordered duplicate report."""

from typing import Iterable

from ..common.logging import get_logger
from .models import DuplicateGroup, EquivalenceGroup

logger = get_logger(__name__)


class Aggregator:
    """Filters singleton groups and orders the rest deterministically."""

    def aggregate(self, groups: Iterable[EquivalenceGroup]) -> list[DuplicateGroup]:
        """Build duplicate groups from equivalence groups.

        Groups are ordered by size, then digest. Paths within a group are
        ordered by their string form.

        Args:
            groups: Snapshot of the grouping store

        Returns:
            Duplicate groups (two or more paths each), numbered from 1
        """
        duplicates = sorted((g for g in groups if g.is_duplicate), key=lambda g: g.key)

        result = [
            DuplicateGroup(
                group_id=group_id,
                paths=sorted(group.paths, key=str),
                size=group.key.size,
                digest=group.key.digest,
            )
            for group_id, group in enumerate(duplicates, start=1)
        ]

        logger.info(
            f"Found {sum(g.count for g in result)} duplicate files in {len(result)} groups, "
            f"{self.total_wasted(result)} bytes wasted"
        )
        return result

    @staticmethod
    def total_wasted(groups: Iterable[DuplicateGroup]) -> int:
        """Sum of wasted space over all duplicate groups."""
        return sum(g.wasted_size for g in groups)
