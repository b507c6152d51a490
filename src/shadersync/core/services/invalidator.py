from __future__ import annotations

"""
Stale Artifact Invalidation.

Removes every compiled artifact under a shader root before recompilation.
Listing and deletion failures are handled according to the configured
delete error policy: abort the run, skip the failing subtree, or record the
failure and keep going.
"""

import logging
import os

from shadersync.core.services.classifier import is_artifact
from shadersync.core.services.lister import walk_tree
from shadersync.domain.constants import (
    DEFAULT_DELETE_ERROR_POLICY,
    POLICY_ABORT,
    POLICY_SKIP_SUBTREE,
)
from shadersync.domain.errors import FilesystemError
from shadersync.domain.sync_models import InvalidationReport
from shadersync.infra.fs import remove_file

logger = logging.getLogger(__name__)


def clear_artifacts(
        root: str,
        suffix: str,
        *,
        policy: str = DEFAULT_DELETE_ERROR_POLICY,
        dry_run: bool = False,
) -> InvalidationReport:
    """
    Delete all artifacts in the tree rooted at `root`.

    The current directory is cleared before its subdirectories are visited.

    Args:
        root: Shader tree root.
        suffix: Artifact suffix identifying files to delete.
        policy: One of "abort", "skip-subtree", "continue".
        dry_run: Record matching files without deleting them.

    Returns:
        InvalidationReport: Deleted paths, recorded failures and skipped dirs.

    Raises:
        FilesystemError: Under the "abort" policy, on the first failure.
    """
    report = InvalidationReport()

    def _on_list_error(err: FilesystemError) -> None:
        logger.error(str(err))
        report.failures.append(err)
        report.skipped_dirs.append(err.path)

    on_error = None if policy == POLICY_ABORT else _on_list_error

    for listing in walk_tree(root, on_error=on_error):
        for name in listing.files:
            if not is_artifact(name, suffix):
                continue

            path = os.path.join(listing.path, name)
            if dry_run:
                logger.info(f"Would delete {path}")
                report.deleted.append(path)
                continue

            try:
                remove_file(path)
            except OSError as e:
                err = FilesystemError.from_os_error(path, "delete", e)
                if policy == POLICY_ABORT:
                    raise err from e

                logger.error(str(err))
                report.failures.append(err)
                if policy == POLICY_SKIP_SUBTREE:
                    report.skipped_dirs.append(listing.path)
                    listing.subdirs[:] = []
                    break
                continue

            logger.debug(f"Deleted {path}")
            report.deleted.append(path)

    logger.info(
        f"Invalidation finished: {len(report.deleted)} artifact(s) "
        f"{'matched' if dry_run else 'deleted'}, {len(report.failures)} failure(s)."
    )
    return report
