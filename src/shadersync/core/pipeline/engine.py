from __future__ import annotations

"""
Shader Synchronization Engine.

Coordinates a full run over one shader tree:
1. Validates configuration and the target directory.
2. Deletes stale artifacts (invalidation pass).
3. Dispatches one compile task per shader source.
4. Awaits every task and aggregates the outcome.
"""

import logging
import os
import time
from typing import Any, Callable, Dict, List, Optional

from shadersync.core.pipeline.validator import validate_config
from shadersync.core.services.dispatcher import CompileDispatcher
from shadersync.core.services.invalidator import clear_artifacts
from shadersync.core.services.orchestrator import compile_tree, report_outcome
from shadersync.domain.errors import FilesystemError
from shadersync.domain.sync_models import (
    CompileOutcome,
    SyncConfig,
    SyncResult,
    create_error_result,
    create_sync_result,
)

logger = logging.getLogger(__name__)

DispatcherFactory = Callable[[str], CompileDispatcher]


def synchronize_shaders(
        config: Optional[Dict[str, Any]],
        *,
        dry_run: bool = False,
        dispatcher_factory: DispatcherFactory = CompileDispatcher,
) -> SyncResult:
    """
    Execute a clean rebuild of every shader artifact under the configured root.

    Args:
        config: The configuration dictionary (raw or partial).
        dry_run: If True, report deletions and compiles without performing them.
        dispatcher_factory: Builds the dispatcher from a compiler path.

    Returns:
        SyncResult: Object containing status, outcomes, and summary.
    """
    started = time.monotonic()

    # -------------------------------------------------------------------------
    # 1) Config & Path Validation
    # -------------------------------------------------------------------------
    clean, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    cfg = SyncConfig.from_dict(clean)
    logger.info(f"Synchronizing shaders in {cfg.shader_dir}")
    logger.debug(f"Compiler: {cfg.compiler_path} | suffix: {cfg.artifact_suffix}")

    if not os.path.isdir(cfg.shader_dir):
        msg = f"Invalid shader directory: {cfg.shader_dir}"
        logger.error(msg)
        return create_error_result(msg, cfg, dry_run=dry_run)

    # -------------------------------------------------------------------------
    # 2) Invalidation
    # -------------------------------------------------------------------------
    try:
        report = clear_artifacts(
            cfg.shader_dir,
            cfg.artifact_suffix,
            policy=cfg.delete_error_policy,
            dry_run=dry_run,
        )
    except FilesystemError as e:
        logger.error(f"Invalidation aborted: {e}")
        return create_error_result(str(e), cfg, dry_run=dry_run)

    # -------------------------------------------------------------------------
    # 3) Orchestration
    # -------------------------------------------------------------------------
    walk_errors: List[FilesystemError] = []

    def _on_walk_error(err: FilesystemError) -> None:
        logger.error(f"{err}. Subtree skipped.")
        walk_errors.append(err)

    outcomes: List[CompileOutcome] = []
    if dry_run:
        planned = compile_tree(cfg, None, on_error=_on_walk_error)
    else:
        with dispatcher_factory(cfg.compiler_path) as dispatcher:
            dispatcher.add_listener(report_outcome)
            planned = compile_tree(cfg, dispatcher, on_error=_on_walk_error)

            # -----------------------------------------------------------------
            # 4) Join
            # -----------------------------------------------------------------
            outcomes = dispatcher.wait()

    result = create_sync_result(
        cfg, report, planned, outcomes, walk_errors,
        elapsed=time.monotonic() - started,
        dry_run=dry_run,
    )

    summary = result.summary
    if dry_run:
        logger.info(
            f"Dry run: {summary['deleted']} artifact(s) would be deleted, "
            f"{summary['sources']} source(s) would be compiled."
        )
    elif result.ok:
        logger.info(f"Compiled {summary['compiled']} shader(s) in {summary['elapsed']}s.")
    else:
        logger.error(
            f"Synchronization finished with failures: {summary['failed']} of "
            f"{summary['sources']} compile(s) failed, "
            f"{summary['delete_errors']} filesystem error(s)."
        )
    return result
