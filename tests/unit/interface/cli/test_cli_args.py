from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. Mapping of CLI flags to configuration keys.
2. CSV string parsing logic.
3. Positional vs. --input shader directory.
"""

import pytest

from shadersync.interface.cli.args import args_to_overrides, build_parser


def parse_args(arg_list):
    """Helper to simulate CLI argument parsing."""
    parser = build_parser()
    return parser.parse_args(arg_list)


def test_cli_positional_shader_dir() -> None:
    overrides = args_to_overrides(parse_args(["data/shaders"]))
    assert overrides["shader_dir"] == "data/shaders"


def test_cli_input_alias() -> None:
    overrides = args_to_overrides(parse_args(["-i", "/abs/shaders"]))
    assert overrides["shader_dir"] == "/abs/shaders"


def test_cli_value_flags_mapping() -> None:
    args = parse_args([
        "--compiler-path", "/sdk/bin/glslc",
        "--suffix", ".bin",
        "--on-delete-error", "skip-subtree",
        "--all-files",
    ])

    overrides = args_to_overrides(args)

    assert overrides["compiler_path"] == "/sdk/bin/glslc"
    assert overrides["artifact_suffix"] == ".bin"
    assert overrides["delete_error_policy"] == "skip-subtree"
    assert overrides["compile_all_files"] is True


def test_cli_csv_list_parsing() -> None:
    overrides = args_to_overrides(parse_args(["--ext", ".vert, .frag,,"]))
    assert overrides["source_extensions"] == [".vert", ".frag"]


def test_cli_rejects_unknown_policy() -> None:
    with pytest.raises(SystemExit):
        parse_args(["--on-delete-error", "ignore"])


def test_cli_defaults_are_explicit_in_overrides() -> None:
    """Unset options are None; the merge step in app.py skips them."""
    args = parse_args([])
    overrides = args_to_overrides(args)

    assert overrides["shader_dir"] is None
    assert overrides["compiler_path"] is None
    assert "compile_all_files" not in overrides
    assert args.dry_run is False
    assert args.color == "auto"
