from __future__ import annotations

"""
Unit tests for Stale Artifact Invalidation.

Verifies complete artifact removal, dry-run behaviour and each of the
delete error policies (abort, skip-subtree, continue).
"""

import os
from pathlib import Path
from typing import List
from unittest.mock import patch

import pytest

from shadersync.core.services.invalidator import clear_artifacts
from shadersync.domain.errors import FilesystemError


@pytest.fixture
def stale_tree(tmp_path: Path) -> Path:
    """
    root/
      top.vert, top.vert.spv
      a/ a.frag, a.frag.spv, orphan.spv
         deep/ d.comp.spv
      b/ b.vert, b.vert.spv
    """
    root = tmp_path / "root"
    (root / "a" / "deep").mkdir(parents=True)
    (root / "b").mkdir()
    for rel in ["top.vert", "a/a.frag", "b/b.vert"]:
        (root / rel).write_text("void main() {}", encoding="utf-8")
    for rel in ["top.vert.spv", "a/a.frag.spv", "a/orphan.spv", "a/deep/d.comp.spv", "b/b.vert.spv"]:
        (root / rel).write_bytes(b"SPIRV")
    return root


def _artifacts(root: Path) -> List[Path]:
    return sorted(root.rglob("*.spv"))


def _failing_remove(target_name: str):
    """Build a remove_file replacement that raises for one filename."""
    def _remove(path: str) -> None:
        if os.path.basename(path) == target_name:
            raise PermissionError(13, "Permission denied", path)
        os.remove(path)
    return _remove


def test_clear_artifacts_removes_every_artifact(stale_tree: Path) -> None:
    report = clear_artifacts(str(stale_tree), ".spv")

    assert _artifacts(stale_tree) == []
    assert len(report.deleted) == 5
    assert report.ok


def test_clear_artifacts_leaves_sources_untouched(stale_tree: Path) -> None:
    clear_artifacts(str(stale_tree), ".spv")

    assert (stale_tree / "top.vert").exists()
    assert (stale_tree / "a" / "a.frag").exists()
    assert (stale_tree / "b" / "b.vert").exists()


def test_clear_artifacts_dry_run_deletes_nothing(stale_tree: Path) -> None:
    report = clear_artifacts(str(stale_tree), ".spv", dry_run=True)

    assert len(report.deleted) == 5
    assert len(_artifacts(stale_tree)) == 5


def test_clear_artifacts_custom_suffix(stale_tree: Path) -> None:
    (stale_tree / "top.vert.bin").write_bytes(b"BIN")

    report = clear_artifacts(str(stale_tree), ".bin")

    assert report.deleted == [str(stale_tree / "top.vert.bin")]
    assert len(_artifacts(stale_tree)) == 5


def test_abort_policy_raises_on_first_failure(stale_tree: Path) -> None:
    with patch(
        "shadersync.core.services.invalidator.remove_file",
        side_effect=_failing_remove("a.frag.spv"),
    ):
        with pytest.raises(FilesystemError) as exc_info:
            clear_artifacts(str(stale_tree), ".spv", policy="abort")

    assert exc_info.value.operation == "delete"
    # Walk stopped: b/ was never reached
    assert (stale_tree / "b" / "b.vert.spv").exists()


def test_skip_subtree_policy_stops_descending(stale_tree: Path) -> None:
    with patch(
        "shadersync.core.services.invalidator.remove_file",
        side_effect=_failing_remove("a.frag.spv"),
    ):
        report = clear_artifacts(str(stale_tree), ".spv", policy="skip-subtree")

    assert not report.ok
    assert report.skipped_dirs == [str(stale_tree / "a")]
    assert (stale_tree / "a" / "deep" / "d.comp.spv").exists()
    assert (stale_tree / "a" / "orphan.spv").exists()
    assert not (stale_tree / "b" / "b.vert.spv").exists()
    assert not (stale_tree / "top.vert.spv").exists()


def test_continue_policy_keeps_going(stale_tree: Path) -> None:
    with patch(
        "shadersync.core.services.invalidator.remove_file",
        side_effect=_failing_remove("a.frag.spv"),
    ):
        report = clear_artifacts(str(stale_tree), ".spv", policy="continue")

    assert len(report.failures) == 1
    assert report.failures[0].path == str(stale_tree / "a" / "a.frag.spv")
    assert _artifacts(stale_tree) == [stale_tree / "a" / "a.frag.spv"]


def test_missing_root_under_continue_is_recorded(tmp_path: Path) -> None:
    report = clear_artifacts(str(tmp_path / "missing"), ".spv", policy="continue")

    assert report.deleted == []
    assert len(report.failures) == 1
    assert report.skipped_dirs == [str(tmp_path / "missing")]


def test_missing_root_under_abort_raises(tmp_path: Path) -> None:
    with pytest.raises(FilesystemError):
        clear_artifacts(str(tmp_path / "missing"), ".spv")
