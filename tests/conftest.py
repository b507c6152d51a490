from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A fake shader compiler executable honouring `<src> -o <out>`.
3. A sample shader tree with a stale artifact.
"""

import os
import stat
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

# Compiles anything except sources containing "#error"; mimics glslc output.
_FAKE_COMPILER_BODY = '''
import sys

src, flag, out = sys.argv[1], sys.argv[2], sys.argv[3]
if flag != "-o":
    sys.stderr.write("usage: fake <src> -o <out>\\n")
    sys.exit(2)

with open(src, "r", encoding="utf-8") as f:
    text = f.read()

if "#error" in text:
    sys.stderr.write(src + ":1: error: '#error' : compilation halted\\n")
    sys.exit(1)

with open(out, "wb") as f:
    f.write(b"SPIRV\\n" + text.encode("utf-8"))
'''

# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def fake_compiler(tmp_path_factory: pytest.TempPathFactory) -> str:
    """
    Write an executable script standing in for glslc.

    Returns:
        str: Absolute path of the executable.
    """
    if sys.platform == "win32":
        pytest.skip("fake compiler relies on a shebang script")

    bin_dir = tmp_path_factory.mktemp("bin")
    script = bin_dir / "fake-glslc"
    script.write_text(f"#!{sys.executable}\n{_FAKE_COMPILER_BODY}", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(script)


@pytest.fixture
def shader_tree(tmp_path: Path) -> Path:
    """
    Create the reference shader tree.

    Structure:
    /shaders
      /a
        shader1.vert
        shader1.vert.spv   (stale)
      /b
        shader2.frag
    """
    root = tmp_path / "shaders"
    (root / "a").mkdir(parents=True)
    (root / "b").mkdir()

    (root / "a" / "shader1.vert").write_text("void main() {}\n", encoding="utf-8")
    (root / "a" / "shader1.vert.spv").write_bytes(b"STALE")
    (root / "b" / "shader2.frag").write_text("void main() {}\n", encoding="utf-8")
    return root


@pytest.fixture
def sync_config_dict(shader_tree: Path, fake_compiler: str) -> Dict[str, Any]:
    """Complete configuration dictionary pointing at the sample tree."""
    return {
        "shader_dir": str(shader_tree),
        "compiler_path": fake_compiler,
        "artifact_suffix": ".spv",
        "source_extensions": [".vert", ".frag", ".comp"],
        "compile_all_files": False,
        "delete_error_policy": "abort",
    }
