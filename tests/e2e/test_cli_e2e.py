from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Invokes the entry point script via subprocess and checks exit codes,
stream output (stdout/stderr) and file system side effects (artifacts
created and deleted).
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "shadersync" / "main.py"


def run_cli(args: List[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """
    Execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH so the package resolves
    without being installed.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    cmd = [sys.executable, str(ENTRY_POINT), "--color", "never"] + args

    return subprocess.run(
        cmd,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8"
    )

# -----------------------------------------------------------------------------
# E2E Scenarios
# -----------------------------------------------------------------------------

def test_cli_compiles_tree(shader_tree: Path, fake_compiler: str) -> None:
    result = run_cli([str(shader_tree), "--compiler-path", fake_compiler])

    assert result.returncode == 0, result.stderr
    assert (shader_tree / "a" / "shader1.vert.spv").read_bytes().startswith(b"SPIRV")
    assert (shader_tree / "b" / "shader2.frag.spv").exists()
    # Command lines are echoed on the console stream
    assert f"{fake_compiler} " in result.stderr
    assert "Compiled: 2" in result.stdout


def test_cli_compile_failure_exit_code(shader_tree: Path, fake_compiler: str) -> None:
    (shader_tree / "b" / "broken.frag").write_text("#error\n", encoding="utf-8")

    result = run_cli([str(shader_tree), "--compiler-path", fake_compiler])

    assert result.returncode == 1
    assert "compilation halted" in result.stderr
    assert not (shader_tree / "b" / "broken.frag.spv").exists()
    # Other shaders still compiled
    assert (shader_tree / "b" / "shader2.frag.spv").exists()


def test_cli_missing_compiler(shader_tree: Path, tmp_path: Path) -> None:
    missing = str(tmp_path / "no-such-glslc")

    result = run_cli([str(shader_tree), "--compiler-path", missing])

    assert result.returncode == 1
    assert "could not be launched" in result.stderr
    # Invalidation still ran
    assert not (shader_tree / "a" / "shader1.vert.spv").exists()


def test_cli_missing_directory(tmp_path: Path) -> None:
    result = run_cli([str(tmp_path / "nowhere")])

    assert result.returncode == 2
    assert "does not exist" in result.stderr


def test_cli_dry_run_changes_nothing(shader_tree: Path, fake_compiler: str) -> None:
    result = run_cli([str(shader_tree), "--compiler-path", fake_compiler, "--dry-run"])

    assert result.returncode == 0
    assert (shader_tree / "a" / "shader1.vert.spv").read_bytes() == b"STALE"
    assert not (shader_tree / "b" / "shader2.frag.spv").exists()
    assert "Dry run" in result.stdout
    assert "Sources to compile: 2" in result.stdout


def test_cli_json_output(shader_tree: Path, fake_compiler: str) -> None:
    result = run_cli([str(shader_tree), "--compiler-path", fake_compiler, "--json"])

    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["ok"] is True
    assert data["summary"]["deleted"] == 1
    assert sorted(Path(p).name for p in data["deleted"]) == ["shader1.vert.spv"]


def test_cli_config_file(shader_tree: Path, fake_compiler: str, tmp_path: Path) -> None:
    cfg = tmp_path / "shadersync.json"
    cfg.write_text(
        json.dumps({
            "shader_dir": str(shader_tree),
            "compiler_path": fake_compiler,
            "source_extensions": [".frag"],
        }),
        encoding="utf-8",
    )

    result = run_cli(["--config", str(cfg)])

    assert result.returncode == 0, result.stderr
    assert (shader_tree / "b" / "shader2.frag.spv").exists()
    assert not (shader_tree / "a" / "shader1.vert.spv").exists()


@pytest.mark.parametrize("flag", ["--help", "-h"])
def test_cli_help(flag: str) -> None:
    result = run_cli([flag])

    assert result.returncode == 0
    assert "--compiler-path" in result.stdout
