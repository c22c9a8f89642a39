"""Unit tests for scratch file lifecycle."""
from __future__ import annotations

import pytest

from plantlens.utils import scratch


def test_scratch_paths_are_unique(tmp_path):
    directory = tmp_path / "nested" / "uploads"
    paths = {scratch.scratch_path(directory, ".png") for _ in range(100)}

    assert len(paths) == 100
    assert directory.is_dir()
    assert all(path.parent == directory and path.suffix == ".png" for path in paths)


def test_scratch_file_removed_on_error(tmp_path):
    with pytest.raises(RuntimeError):
        with scratch.scratch_file(tmp_path) as path:
            path.write_bytes(b"data")
            raise RuntimeError("boom")
    assert not path.exists()


def test_remove_scratch_tolerates_missing_file(tmp_path):
    scratch.remove_scratch(tmp_path / "missing.pdf")


def test_remove_scratch_logs_failures(tmp_path, log_messages):
    stubborn = tmp_path / "directory.pdf"
    stubborn.mkdir()

    scratch.remove_scratch(stubborn)

    assert stubborn.exists()
    assert any("Scratch cleanup failed" in message and str(stubborn) in message for message in log_messages)
