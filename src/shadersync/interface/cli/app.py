from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration loading and
merging (defaults, optional JSON file, command-line overrides), the
synchronization run, and result rendering. The exit status reflects compile
and filesystem failures so build systems can stop on a broken shader.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from shadersync.core.pipeline.engine import synchronize_shaders
from shadersync.core.pipeline.validator import validate_config
from shadersync.domain.config import CONFIG_KEYS, load_config
from shadersync.domain.constants import (
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_OK,
    EXIT_USAGE,
)
from shadersync.domain.errors import ConfigError, ShaderSyncError
from shadersync.domain.sync_models import SyncResult
from shadersync.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_logger,
    shutdown_logging,
)
from shadersync.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 failures, 2 usage, 130 interrupted).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    logging_conf = LoggingConfig(
        level="DEBUG" if args.debug else "INFO",
        console=True,
        color=args.color,
        log_file=args.log_file,
    )
    configure_logging(logging_conf, force=True)

    try:
        return _run(args)
    finally:
        # Drain queued records before the summary reaches stdout
        shutdown_logging()


def _run(args: Any) -> int:
    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 1. Base configuration (defaults, optionally overlaid by a JSON file)
    try:
        base_conf = load_config(args.config_file)
    except ConfigError as e:
        logger.error(str(e))
        return EXIT_USAGE

    # 2. Merge command-line overrides and validate
    overrides = cli_args.args_to_overrides(args)
    raw_conf = _merge_config(base_conf, overrides)
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        shutdown_logging()
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    # 3. Pre-flight input verification
    shader_dir = clean_conf["shader_dir"]
    if not os.path.isdir(shader_dir):
        logger.error(f"Shader directory does not exist: {shader_dir}")
        return EXIT_USAGE

    # 4. Synchronization
    try:
        result = synchronize_shaders(clean_conf, dry_run=bool(args.dry_run))
    except KeyboardInterrupt:
        logger.warning("Interrupted. Compiles already started ran to completion; their results were discarded.")
        return EXIT_INTERRUPTED
    except ShaderSyncError as e:
        logger.error(str(e))
        return EXIT_FAILURE
    except Exception as e:
        logger.critical(f"Unexpected failure: {e}", exc_info=True)
        return EXIT_FAILURE

    # 5. Output rendering
    shutdown_logging()
    if args.json_output:
        print(json.dumps(_result_to_dict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return EXIT_OK if result.ok else EXIT_FAILURE

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge of override values into the base configuration.

    Only known keys with a non-None value are merged.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k in CONFIG_KEYS:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _result_to_dict(result: SyncResult) -> Dict[str, Any]:
    """JSON-friendly view of a result; drops the combined output of passing tasks."""
    data = asdict(result)
    data["failed"] = [
        {
            "source": o.job.source,
            "returncode": o.returncode,
            "diagnostics": o.diagnostics,
        }
        for o in result.failed
    ]
    return data


def _print_human_summary(result: SyncResult) -> None:
    """
    Print the run result to standard output.

    Args:
        result: The synchronization result to render.
    """
    if result.error:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    summary = result.summary

    if result.dry_run:
        print("Dry run, nothing was changed.")
        print(f"Shader directory: {result.shader_dir}")
        print(f"Artifacts to delete: {summary.get('deleted', 0)}")
        print(f"Sources to compile: {summary.get('sources', 0)}")
        return

    print(f"Shader directory: {result.shader_dir}")
    stats_keys = {
        "deleted": "Stale artifacts deleted",
        "sources": "Sources found",
        "compiled": "Compiled",
        "failed": "Failed",
        "delete_errors": "Filesystem errors",
    }
    for key, label in stats_keys.items():
        if key in summary:
            print(f"{label}: {summary[key]}")

    if result.failed:
        print("\nFailed sources:")
        for outcome in result.failed:
            print(f"  - {outcome.job.source}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
