from __future__ import annotations

"""
Unit tests for Directory Listing and Tree Traversal.

Verifies:
1. Classification of immediate children into files and subdirectories.
2. Error wrapping for missing or unreadable directories.
3. Pre-order traversal, in-place pruning and error handler routing.
"""

import os
import sys
from pathlib import Path
from typing import List

import pytest

from shadersync.core.services.lister import list_directory, walk_tree
from shadersync.domain.errors import FilesystemError


@pytest.fixture
def nested_tree(tmp_path: Path) -> Path:
    """root/{top.vert, a/{x.frag, deep/y.comp}, b/z.vert}"""
    root = tmp_path / "root"
    (root / "a" / "deep").mkdir(parents=True)
    (root / "b").mkdir()
    (root / "top.vert").write_text("", encoding="utf-8")
    (root / "a" / "x.frag").write_text("", encoding="utf-8")
    (root / "a" / "deep" / "y.comp").write_text("", encoding="utf-8")
    (root / "b" / "z.vert").write_text("", encoding="utf-8")
    return root


def test_list_directory_splits_files_and_subdirs(nested_tree: Path) -> None:
    listing = list_directory(str(nested_tree))

    assert listing.path == str(nested_tree)
    assert listing.files == ["top.vert"]
    assert listing.subdirs == [str(nested_tree / "a"), str(nested_tree / "b")]


def test_list_directory_missing_path_raises(tmp_path: Path) -> None:
    missing = tmp_path / "nope"

    with pytest.raises(FilesystemError) as exc_info:
        list_directory(str(missing))

    assert exc_info.value.path == str(missing)
    assert exc_info.value.operation == "list"
    assert isinstance(exc_info.value.__cause__, FileNotFoundError)


def test_list_directory_on_a_file_raises(nested_tree: Path) -> None:
    with pytest.raises(FilesystemError):
        list_directory(str(nested_tree / "top.vert"))


def test_walk_tree_is_pre_order(nested_tree: Path) -> None:
    visited = [listing.path for listing in walk_tree(str(nested_tree))]

    assert visited == [
        str(nested_tree),
        str(nested_tree / "a"),
        str(nested_tree / "a" / "deep"),
        str(nested_tree / "b"),
    ]


def test_walk_tree_prunes_cleared_subdirs(nested_tree: Path) -> None:
    visited: List[str] = []
    for listing in walk_tree(str(nested_tree)):
        visited.append(listing.path)
        if listing.path.endswith(os.sep + "a"):
            listing.subdirs[:] = []

    assert str(nested_tree / "a" / "deep") not in visited
    assert str(nested_tree / "b") in visited


def test_walk_tree_without_handler_propagates(tmp_path: Path) -> None:
    with pytest.raises(FilesystemError):
        list(walk_tree(str(tmp_path / "missing")))


def test_walk_tree_routes_errors_to_handler(tmp_path: Path) -> None:
    errors: List[FilesystemError] = []

    listings = list(walk_tree(str(tmp_path / "missing"), on_error=errors.append))

    assert listings == []
    assert len(errors) == 1
    assert errors[0].path == str(tmp_path / "missing")


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
def test_walk_tree_survives_symlink_cycles(nested_tree: Path) -> None:
    os.symlink(str(nested_tree), str(nested_tree / "a" / "loop"))

    visited = [listing.path for listing in walk_tree(str(nested_tree))]

    assert len(visited) == 4
    assert str(nested_tree / "a" / "loop") not in visited
