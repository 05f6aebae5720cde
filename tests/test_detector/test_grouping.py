"""Tests for the grouping store and engine."""

import threading
from pathlib import Path

import pytest

from local_dedup.common.exceptions import DetectionError
from local_dedup.detector.grouping import GroupingEngine, GroupingStore
from local_dedup.detector.models import Candidate, DigestAlgorithm, GroupKey


def _candidates(root: Path, files: dict[str, bytes]) -> list[Candidate]:
    result = []
    for name, content in files.items():
        path = root / name
        path.write_bytes(content)
        result.append(Candidate(path=path, size=len(content)))
    return result


def test_store_upsert_creates_then_appends() -> None:
    """Test first insert creates a group and later inserts append."""
    store = GroupingStore(shards=4)
    key = GroupKey(size=2, digest=b"k")

    assert store.upsert(key, Path("a")) is True
    assert store.upsert(key, Path("b")) is False

    (group,) = store.snapshot()
    assert group.key == key
    assert group.paths == frozenset({Path("a"), Path("b")})


def test_store_concurrent_upserts_same_key() -> None:
    """Test racing workers on one new key produce exactly one group."""
    store = GroupingStore(shards=8)
    key = GroupKey(size=1, digest=b"same")
    threads_count = 16
    barrier = threading.Barrier(threads_count)
    created: list[bool] = []
    created_lock = threading.Lock()

    def worker(i: int) -> None:
        barrier.wait()
        for j in range(50):
            was_created = store.upsert(key, Path(f"f-{i}-{j}"))
            with created_lock:
                created.append(was_created)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(threads_count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    (group,) = store.snapshot()
    assert len(group.paths) == threads_count * 50
    assert created.count(True) == 1


def test_store_snapshot_is_immutable_copy() -> None:
    """Test later upserts do not leak into an earlier snapshot."""
    store = GroupingStore()
    key = GroupKey(size=1, digest=b"x")
    store.upsert(key, Path("a"))

    snapshot = store.snapshot()
    store.upsert(key, Path("b"))

    assert snapshot[0].paths == frozenset({Path("a")})


def test_store_rejects_zero_shards() -> None:
    """Test shard count must be positive."""
    with pytest.raises(ValueError):
        GroupingStore(shards=0)


def test_engine_groups_identical_content(tmp_path: Path) -> None:
    """Test identical files share a group and different content does not."""
    candidates = _candidates(
        tmp_path,
        {"a.txt": b"hi", "b.txt": b"hi", "c.txt": b"yo", "d.txt": b"bye"},
    )

    result = GroupingEngine(workers=4).group(candidates)

    groups = {frozenset(p.name for p in g.paths) for g in result.groups}
    assert groups == {frozenset({"a.txt", "b.txt"}), frozenset({"c.txt"}), frozenset({"d.txt"})}
    assert result.failures == []
    assert result.processed == 4


@pytest.mark.parametrize("algorithm", list(DigestAlgorithm))
def test_engine_many_workers_single_group(tmp_path: Path, algorithm: DigestAlgorithm) -> None:
    """Test many concurrent workers merge into one group per key."""
    candidates = _candidates(tmp_path, {f"f{i:03}.bin": b"same bytes" for i in range(200)})

    result = GroupingEngine(algorithm=algorithm, workers=8, shards=2).group(candidates)

    assert len(result.groups) == 1
    assert len(result.groups[0].paths) == 200


def test_engine_reports_progress_per_candidate(tmp_path: Path) -> None:
    """Test one progress callback per processed candidate."""
    candidates = _candidates(tmp_path, {f"{i}.txt": str(i).encode() for i in range(10)})
    seen: list[Candidate] = []

    GroupingEngine(workers=3).group(candidates, progress=seen.append)

    assert sorted(seen, key=lambda c: c.path.name) == sorted(
        candidates, key=lambda c: c.path.name
    )


def test_engine_collects_failures(tmp_path: Path) -> None:
    """Test unreadable candidates are recorded without losing other results."""
    candidates = _candidates(tmp_path, {"a.txt": b"hi", "b.txt": b"hi"})
    vanished = Candidate(path=tmp_path / "vanished.txt", size=2)

    result = GroupingEngine(workers=2).group(candidates + [vanished])

    assert [f.path for f in result.failures] == [vanished.path]
    assert len(result.groups) == 1
    assert len(result.groups[0].paths) == 2
    assert result.processed == 3


def test_engine_strict_mode_raises(tmp_path: Path) -> None:
    """Test strict mode aborts on the first failure."""
    candidates = _candidates(tmp_path, {"a.txt": b"hi"})
    vanished = Candidate(path=tmp_path / "vanished.txt", size=2)

    with pytest.raises(DetectionError):
        GroupingEngine(workers=2, strict=True).group(candidates + [vanished])


def test_engine_cancel_skips_work(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test cancelling mid-run leaves later candidates out of the store."""
    candidates = _candidates(tmp_path, {"a.txt": b"hi", "b.txt": b"hi", "c.txt": b"hi"})
    engine = GroupingEngine(workers=1)
    hash_file = engine.digests.hash_file

    def hash_then_cancel(path: Path) -> bytes:
        engine.cancel()
        return hash_file(path)

    monkeypatch.setattr(engine.digests, "hash_file", hash_then_cancel)

    result = engine.group(candidates)

    assert engine.cancelled
    assert [sorted(p.name for p in g.paths) for g in result.groups] == [["a.txt"]]
    assert result.processed == 3


def test_engine_runs_again_after_cancel(tmp_path: Path) -> None:
    """Test a cancelled engine does full work on its next run."""
    candidates = _candidates(tmp_path, {"a.txt": b"hi", "b.txt": b"hi"})
    engine = GroupingEngine(workers=2)
    engine.cancel()

    result = engine.group(candidates)

    assert not engine.cancelled
    assert len(result.groups) == 1
    assert len(result.groups[0].paths) == 2


def test_engine_runs_do_not_share_groups(tmp_path: Path) -> None:
    """Test a second run starts from an empty store."""
    candidates = _candidates(tmp_path, {"a.txt": b"hi", "b.txt": b"hi", "c.txt": b"ho"})
    engine = GroupingEngine(workers=2)
    engine.group(candidates)
    (tmp_path / "b.txt").write_bytes(b"ho")

    result = engine.group(candidates)

    groups = sorted(sorted(p.name for p in g.paths) for g in result.groups)
    assert groups == [["a.txt"], ["b.txt", "c.txt"]]


def test_engine_strict_abort_does_not_poison_next_run(tmp_path: Path) -> None:
    """Test a strict-mode failure leaves the engine usable."""
    candidates = _candidates(tmp_path, {"a.txt": b"hi", "b.txt": b"hi"})
    vanished = Candidate(path=tmp_path / "vanished.txt", size=2)
    engine = GroupingEngine(workers=2, strict=True)

    with pytest.raises(DetectionError):
        engine.group(candidates + [vanished])
    result = engine.group(candidates)

    assert len(result.groups) == 1
    assert len(result.groups[0].paths) == 2


def test_engine_rejects_zero_workers() -> None:
    """Test worker count must be positive."""
    with pytest.raises(ValueError):
        GroupingEngine(workers=0)
