"""Shared pytest fixtures."""

import logging
import os
from pathlib import Path
from typing import Callable

import pytest

from local_dedup.common.logging import PACKAGE_LOGGER
from local_dedup.config.settings import reset_settings

# 18 bytes, 20 bytes and 7 bytes respectively
CONTENT_X = b"duplicate content\n"
CONTENT_Y = b"another duplicate!!\n"
CONTENT_Z = b"linked\n"

TreeWriter = Callable[[Path, dict[str, bytes]], Path]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep environment variables and .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("LOCAL_DEDUP_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = package_logger.handlers[:]
    level, propagate = package_logger.level, package_logger.propagate
    yield
    for handler in package_logger.handlers[:]:
        if handler not in handlers:
            handler.close()
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate
    reset_settings()


@pytest.fixture
def write_tree() -> TreeWriter:
    """Return a helper that writes {relative path: content} under a root."""

    def _write(root: Path, files: dict[str, bytes]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        return root

    return _write


@pytest.fixture
def sample_tree(tmp_path: Path, write_tree: TreeWriter) -> Path:
    """Create the reference tree used across scanner and CLI tests.

    tree/test
        a-file.txt, b-file.specialTXT, .dot-dir/file-in-dot-dir.txt  (X)
        a-dir/.dot-file, a-dir/c-file.txt, a-dir/d-file.txt          (Y)
        z-copy.txt                                                   (Z)
        test2 -> ../test2 (symlink)
    tree/test2
        1-file.txt                                                   (Z)
    """
    base = tmp_path / "tree"
    root = write_tree(
        base / "test",
        {
            "a-file.txt": CONTENT_X,
            "b-file.specialTXT": CONTENT_X,
            ".dot-dir/file-in-dot-dir.txt": CONTENT_X,
            "a-dir/.dot-file": CONTENT_Y,
            "a-dir/c-file.txt": CONTENT_Y,
            "a-dir/d-file.txt": CONTENT_Y,
            "z-copy.txt": CONTENT_Z,
        },
    )
    write_tree(base / "test2", {"1-file.txt": CONTENT_Z})
    os.symlink(base / "test2", root / "test2", target_is_directory=True)
    return root
