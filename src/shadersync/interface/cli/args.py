from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
argparse namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from shadersync.domain.constants import (
    COMPILER_ENV_VARS,
    DEFAULT_ARTIFACT_SUFFIX,
    DEFAULT_COMPILER_NAME,
    DEFAULT_SHADER_SUBDIR,
    DELETE_ERROR_POLICIES,
)

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the shadersync CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="shadersync",
        description=(
            "Delete stale compiled shaders under a directory tree and "
            "recompile every shader source next to itself."
        ),
    )

    # --- Path Management ---
    p.add_argument(
        "shader_dir",
        nargs="?",
        default=None,
        help=f"Root of the shader tree (default: ./{DEFAULT_SHADER_SUBDIR}).",
    )
    p.add_argument(
        "-i", "--input",
        dest="input_path",
        default=None,
        help="Alias for SHADER_DIR.",
    )
    p.add_argument(
        "--compiler-path",
        dest="compiler_path",
        default=None,
        help=(
            "Shader compiler executable. Defaults to "
            f"${COMPILER_ENV_VARS[0]}, then ${COMPILER_ENV_VARS[1]}, then "
            f"'{DEFAULT_COMPILER_NAME}' on PATH."
        ),
    )

    # --- Source and Artifact Classification ---
    p.add_argument(
        "--suffix",
        dest="artifact_suffix",
        default=None,
        help=f"Compiled artifact suffix (default: {DEFAULT_ARTIFACT_SUFFIX}).",
    )
    p.add_argument(
        "--ext",
        dest="extensions",
        default=None,
        help="Comma separated source extensions to compile (e.g. .vert,.frag).",
    )
    p.add_argument(
        "--all-files",
        action="store_true",
        help="Compile every file that is not an artifact, regardless of extension.",
    )

    # --- Runtime Constraints and Safety ---
    p.add_argument(
        "--on-delete-error",
        dest="delete_error_policy",
        choices=DELETE_ERROR_POLICIES,
        default=None,
        help="What to do when a stale artifact cannot be deleted (default: abort).",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="List deletions and compiler invocations without performing them.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--config",
        dest="config_file",
        default=None,
        help="JSON file with configuration keys; command line flags take precedence.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write the log to this file (rotated).",
    )
    p.add_argument(
        "--color",
        choices=("auto", "always", "never"),
        default="auto",
        help="Highlight compiler diagnostics on the console.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the run result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset. Unset options map to None.
    """
    overrides: Dict[str, Any] = {}

    overrides["shader_dir"] = args.shader_dir or args.input_path
    overrides["compiler_path"] = args.compiler_path
    overrides["artifact_suffix"] = args.artifact_suffix
    overrides["delete_error_policy"] = args.delete_error_policy

    if args.extensions:
        overrides["source_extensions"] = _split_csv(args.extensions)
    if args.all_files:
        overrides["compile_all_files"] = True

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
