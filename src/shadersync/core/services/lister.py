from __future__ import annotations

"""
Directory Listing and Tree Traversal Service.

Lists the immediate children of a directory and drives a pre-order walk
over an explicit stack of directories. Consumers prune descent by editing
the yielded listing's `subdirs` in place, the same way `os.walk` callers
prune `dirs[:]`.
"""

import logging
import os
from typing import Callable, Iterator, List, Optional, Set

from shadersync.domain.errors import FilesystemError
from shadersync.domain.sync_models import DirectoryListing

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[FilesystemError], None]


# ==============================================================================
# PUBLIC API
# ==============================================================================

def list_directory(path: str) -> DirectoryListing:
    """
    Classify the immediate children of a directory.

    Args:
        path: Directory to list.

    Returns:
        DirectoryListing: File names and subdirectory full paths, both sorted.

    Raises:
        FilesystemError: If the path is missing, not a directory or unreadable.
    """
    files: List[str] = []
    subdirs: List[str] = []

    try:
        with os.scandir(path) as entries:
            for entry in entries:
                try:
                    if entry.is_dir():
                        subdirs.append(os.path.join(path, entry.name))
                    elif entry.is_file():
                        files.append(entry.name)
                except OSError as e:
                    # Broken entry (e.g. dangling symlink on some platforms)
                    logger.debug(f"Skipping unreadable entry {entry.path}: {e}")
    except OSError as e:
        raise FilesystemError.from_os_error(path, "list", e) from e

    files.sort()
    subdirs.sort()
    return DirectoryListing(path=path, files=files, subdirs=subdirs)


def walk_tree(root: str, on_error: Optional[ErrorHandler] = None) -> Iterator[DirectoryListing]:
    """
    Yield a listing for every directory under `root`, in pre-order.

    Args:
        root: Directory at which the walk starts.
        on_error: Receives listing failures; the failing subtree is skipped.
                  Without a handler the first failure propagates.

    Yields:
        DirectoryListing: One per visited directory. Subdirectories are read
                          from the listing after the consumer resumes.
    """
    stack: List[str] = [root]
    visited: Set[str] = set()

    while stack:
        current = stack.pop()

        # Symlinked directories can form cycles
        real = os.path.realpath(current)
        if real in visited:
            logger.debug(f"Skipping already visited directory {current}")
            continue
        visited.add(real)

        try:
            listing = list_directory(current)
        except FilesystemError as e:
            if on_error is None:
                raise
            on_error(e)
            continue

        yield listing

        # Reversed so the alphabetically first subdirectory is visited next
        stack.extend(reversed(listing.subdirs))
