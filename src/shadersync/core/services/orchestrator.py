from __future__ import annotations

"""
Compile Orchestration over a Shader Tree.

Walks the tree once and dispatches a compile task for every shader source
without waiting on any of them. Completion reporting is done by the
`report_outcome` listener attached to the dispatcher.
"""

import logging
import os
from typing import List, Optional

from shadersync.core.services.classifier import derive_output_path, is_shader_source
from shadersync.core.services.dispatcher import CompileDispatcher, build_compile_job
from shadersync.core.services.lister import ErrorHandler, walk_tree
from shadersync.domain.sync_models import CompileJob, CompileOutcome, SyncConfig

logger = logging.getLogger(__name__)


def compile_tree(
        cfg: SyncConfig,
        dispatcher: Optional[CompileDispatcher] = None,
        *,
        on_error: Optional[ErrorHandler] = None,
) -> List[CompileJob]:
    """
    Derive one compile job per shader source and submit it.

    Args:
        cfg: Run configuration (root, compiler, suffix, allow-list).
        dispatcher: Receives the jobs. When None, jobs are only planned
                    (dry-run) and nothing is launched.
        on_error: Listing failure handler; the failing subtree is skipped.

    Returns:
        List[CompileJob]: Jobs in submission order.
    """
    jobs: List[CompileJob] = []

    for listing in walk_tree(cfg.shader_dir, on_error=on_error):
        for name in listing.files:
            if not is_shader_source(name, cfg.artifact_suffix, cfg.source_extensions):
                continue

            source = os.path.join(listing.path, name)
            output = derive_output_path(listing.path, name, cfg.artifact_suffix)

            job = build_compile_job(cfg.compiler_path, source, output)
            jobs.append(job)

            if dispatcher is None:
                logger.info(f"Would run: {job.command_line}")
            else:
                dispatcher.submit_job(job)

    logger.debug(f"Orchestration submitted {len(jobs)} compile task(s).")
    return jobs


def report_outcome(outcome: CompileOutcome) -> None:
    """
    Console reporting for one finished compile task.

    The command line is always logged; compiler diagnostics go out at ERROR
    level so the console formatter highlights them.
    """
    logger.info(outcome.job.command_line)
    if outcome.ok:
        if outcome.diagnostics:
            logger.warning(outcome.diagnostics)
        return

    error = outcome.to_error()
    detail = outcome.diagnostics or "(no compiler output)"
    logger.error(f"{error}\n{detail}")
