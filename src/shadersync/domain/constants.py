from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the default artifact suffix, the shader stage extension
allow-list, compiler discovery variables and the deletion error policies
understood by the invalidator.
"""

import os
from typing import List, Tuple

DEFAULT_ARTIFACT_SUFFIX = ".spv"
DEFAULT_SHADER_SUBDIR = os.path.join("data", "shaders")
DEFAULT_COMPILER_NAME = "glslc"

# Checked in order before falling back to a PATH lookup
COMPILER_ENV_VARS: Tuple[str, ...] = ("SHADERSYNC_COMPILER", "GLSLC")

# -----------------------------------------------------------------------------
# SOURCE CLASSIFICATION
# -----------------------------------------------------------------------------

DEFAULT_SOURCE_EXTENSIONS: List[str] = [
    # Rasterization stages
    ".vert", ".frag", ".geom", ".tesc", ".tese",
    # Compute and mesh
    ".comp", ".mesh", ".task",
    # Ray tracing
    ".rgen", ".rint", ".rahit", ".rchit", ".rmiss", ".rcall",
    # Stage inferred from #pragma or profile
    ".glsl", ".hlsl",
]

# -----------------------------------------------------------------------------
# DELETION ERROR POLICIES
# -----------------------------------------------------------------------------

POLICY_ABORT = "abort"
POLICY_SKIP_SUBTREE = "skip-subtree"
POLICY_CONTINUE = "continue"

DELETE_ERROR_POLICIES: Tuple[str, ...] = (
    POLICY_ABORT,
    POLICY_SKIP_SUBTREE,
    POLICY_CONTINUE,
)
DEFAULT_DELETE_ERROR_POLICY = POLICY_ABORT

# -----------------------------------------------------------------------------
# PROCESS EXIT CODES
# -----------------------------------------------------------------------------

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130
