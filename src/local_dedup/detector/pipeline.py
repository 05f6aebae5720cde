"""Two-phase duplicate detection pipeline."""

from typing import Optional

from ..common.logging import get_logger
from ..config.settings import ScanOptions
from ..scanner.traverser import Traverser
from .aggregator import Aggregator
from .grouping import GroupingEngine, ProgressCallback
from .models import ScanReport, TraversalResult

logger = get_logger(__name__)


class DetectionPipeline:
    """Orchestrates traversal, parallel grouping and aggregation."""

    def __init__(self, options: ScanOptions) -> None:
        """Initialize detection pipeline.

        Args:
            options: Scan options for this run
        """
        self.options = options
        self.traverser = Traverser(options)
        self.engine = GroupingEngine(
            algorithm=options.algorithm,
            workers=options.workers,
            strict=options.strict,
            chunk_size=options.chunk_size,
        )
        self.aggregator = Aggregator()

    def collect_candidates(self) -> TraversalResult:
        """Phase 1: walk the tree and collect candidates.

        Raises:
            ConfigError: If the root is not a valid directory
        """
        return self.traverser.collect()

    def find_duplicates(
        self,
        traversal: TraversalResult,
        progress: Optional[ProgressCallback] = None,
    ) -> ScanReport:
        """Phase 2: hash and group candidates, then aggregate.

        Raises:
            DetectionError: In strict mode, if a candidate cannot be hashed
        """
        if not traversal.candidates:
            logger.info("No candidates to check")
            return ScanReport(groups=[], files_scanned=0, warnings=traversal.warnings)

        grouping = self.engine.group(traversal.candidates, progress=progress)
        groups = self.aggregator.aggregate(grouping.groups)

        return ScanReport(
            groups=groups,
            files_scanned=len(traversal.candidates),
            hash_failures=grouping.failures,
            warnings=traversal.warnings,
        )

    def detect_duplicates(self, progress: Optional[ProgressCallback] = None) -> ScanReport:
        """Run both phases."""
        logger.info("Starting duplicate detection pipeline")
        return self.find_duplicates(self.collect_candidates(), progress=progress)
