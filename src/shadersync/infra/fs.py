from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Path normalization, compiler discovery and single-file removal. Keeps the
'os' and 'shutil' specifics out of the synchronization services so they can
be exercised against temporary trees in tests.
"""

import os
import shutil
from typing import Mapping, Optional

from shadersync.domain.constants import COMPILER_ENV_VARS, DEFAULT_COMPILER_NAME

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def resolve_compiler_path(
        explicit: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Locate the shader compiler executable.

    Resolution order: explicit value, SHADERSYNC_COMPILER, GLSLC, `glslc`
    on PATH, and finally the bare name so the launch failure is reported
    per file instead of aborting the run.

    Args:
        explicit: Path supplied by the caller (CLI flag or config file).
        environ: Environment mapping, defaults to os.environ.

    Returns:
        str: Compiler path or name.
    """
    if explicit and explicit.strip():
        return os.path.expandvars(os.path.expanduser(explicit.strip()))

    env = os.environ if environ is None else environ
    for var in COMPILER_ENV_VARS:
        value = (env.get(var) or "").strip()
        if value:
            return os.path.expandvars(os.path.expanduser(value))

    return shutil.which(DEFAULT_COMPILER_NAME) or DEFAULT_COMPILER_NAME

# -----------------------------------------------------------------------------
# MUTATION API
# -----------------------------------------------------------------------------

def remove_file(path: str) -> None:
    """
    Delete a single file.

    Raises:
        OSError: Propagated unchanged so callers can apply their error policy.
    """
    os.remove(path)
