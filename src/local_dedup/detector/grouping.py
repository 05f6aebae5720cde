"""Parallel hashing and (size, digest) grouping."""

import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..common.constants import DEFAULT_CHUNK_SIZE, STORE_SHARDS
from ..common.exceptions import DetectionError, HashingError
from ..common.logging import get_logger
from .digest import DigestProvider
from .models import Candidate, DigestAlgorithm, EquivalenceGroup, GroupKey, HashFailure

logger = get_logger(__name__)

ProgressCallback = Callable[[Candidate], None]


class _Shard:
    __slots__ = ("lock", "groups")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.groups: dict[GroupKey, set[Path]] = {}


class GroupingStore:
    """Thread-safe mapping from GroupKey to the set of paths sharing it.

    Keys are partitioned across independently locked shards, so workers
    inserting different keys rarely contend. All inserts for one key go
    through the same shard lock, which keeps a single group per key.
    """

    def __init__(self, shards: int = STORE_SHARDS) -> None:
        if shards < 1:
            raise ValueError("shards must be at least 1")
        self._shards = [_Shard() for _ in range(shards)]

    def _shard_for(self, key: GroupKey) -> _Shard:
        return self._shards[hash(key) % len(self._shards)]

    def upsert(self, key: GroupKey, path: Path) -> bool:
        """Add a path to the group for key, creating the group if needed.

        Returns:
            True if this call created the group
        """
        shard = self._shard_for(key)
        with shard.lock:
            paths = shard.groups.get(key)
            if paths is None:
                shard.groups[key] = {path}
                return True
            paths.add(path)
            return False

    def snapshot(self) -> tuple[EquivalenceGroup, ...]:
        """Immutable copy of every group currently in the store."""
        groups: list[EquivalenceGroup] = []
        for shard in self._shards:
            with shard.lock:
                groups.extend(
                    EquivalenceGroup(key=key, paths=frozenset(paths))
                    for key, paths in shard.groups.items()
                )
        return tuple(groups)


@dataclass
class GroupingResult:
    """Completed grouping plus the candidates that could not be hashed."""

    groups: tuple[EquivalenceGroup, ...]
    failures: list[HashFailure] = field(default_factory=list)
    processed: int = 0


class GroupingEngine:
    """Hashes candidates on a worker pool and merges them into a GroupingStore."""

    def __init__(
        self,
        algorithm: DigestAlgorithm = DigestAlgorithm.SHA256,
        workers: int = 1,
        strict: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        shards: int = STORE_SHARDS,
    ) -> None:
        """Initialize grouping engine.

        Args:
            algorithm: Digest algorithm for every candidate in the run
            workers: Size of the hashing thread pool
            strict: Abort on the first unreadable candidate instead of
                recording it and continuing
            chunk_size: Streaming read size for hashing
            shards: Number of lock shards in the grouping store
        """
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.digests = DigestProvider(algorithm, chunk_size)
        self.workers = workers
        self.strict = strict
        self.shards = shards
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        """Ask workers of the running group() call to skip candidates not yet started."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        """Whether the current or most recent run was cancelled."""
        return self._cancelled.is_set()

    def _process(self, store: GroupingStore, candidate: Candidate) -> Optional[GroupKey]:
        if self._cancelled.is_set():
            return None
        digest = self.digests.hash_file(candidate.path)
        key = GroupKey(size=candidate.size, digest=digest)
        store.upsert(key, candidate.path)
        return key

    def group(
        self,
        candidates: Iterable[Candidate],
        progress: Optional[ProgressCallback] = None,
    ) -> GroupingResult:
        """Hash every candidate and group it by (size, digest).

        Each call starts from an empty store, so results never carry over
        from an earlier run.

        Args:
            candidates: Files to hash
            progress: Called once per finished candidate, from the calling thread

        Returns:
            Snapshot of the store and the per-candidate failures

        Raises:
            DetectionError: In strict mode, on the first hashing failure
        """
        candidates = list(candidates)
        logger.info(
            f"Hashing {len(candidates)} candidates with {self.workers} workers "
            f"({self.digests.algorithm.value})"
        )

        self._cancelled.clear()
        store = GroupingStore(self.shards)
        failures: list[HashFailure] = []
        processed = 0

        with ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="local-dedup-hash"
        ) as executor:
            futures: dict[Future[Optional[GroupKey]], Candidate] = {
                executor.submit(self._process, store, c): c for c in candidates
            }
            try:
                for future in as_completed(futures):
                    candidate = futures[future]
                    try:
                        future.result()
                    except HashingError as e:
                        if self.strict:
                            raise DetectionError(f"Failed to hash {e}") from e
                        logger.warning(f"Failed to hash {e}")
                        failures.append(HashFailure(path=e.path, reason=e.reason))

                    processed += 1
                    if progress is not None:
                        progress(candidate)
            except BaseException:
                self.cancel()
                executor.shutdown(wait=True, cancel_futures=True)
                raise

        groups = store.snapshot()
        logger.info(
            f"Grouped {processed - len(failures)} files into {len(groups)} groups "
            f"({len(failures)} failures)"
        )
        return GroupingResult(groups=groups, failures=failures, processed=processed)
