from __future__ import annotations

"""
File Role Classification.

Decides whether a directory entry is a compiled artifact, a shader source
or neither, and derives the sibling artifact path of a source.
"""

import os
from typing import Iterable, Optional


def is_artifact(name: str, suffix: str) -> bool:
    """
    Check whether a filename carries the compiled-artifact suffix.

    Args:
        name: Bare filename (no directory component).
        suffix: Artifact suffix, including its leading dot.

    Returns:
        bool: True for files the invalidator must delete.
    """
    return bool(suffix) and name.endswith(suffix)


def is_shader_source(
        name: str,
        suffix: str,
        extensions: Optional[Iterable[str]] = None,
) -> bool:
    """
    Check whether a filename should be handed to the compiler.

    An artifact is never a source. With an empty allow-list every other
    file qualifies; otherwise the extension must match case-insensitively.

    Args:
        name: Bare filename.
        suffix: Artifact suffix.
        extensions: Normalized allow-list (lower case, leading dot).

    Returns:
        bool: True if a compile task should be dispatched for this file.
    """
    if is_artifact(name, suffix):
        return False

    allowed = set(extensions or ())
    if not allowed:
        return True

    _, ext = os.path.splitext(name)
    return ext.lower() in allowed


def derive_output_path(directory: str, name: str, suffix: str) -> str:
    """Artifacts sit next to their source: `<directory>/<name><suffix>`."""
    return os.path.join(directory, name + suffix)
