from __future__ import annotations

"""
Configuration Domain Management.

Provides the default session configuration and loading of optional JSON
configuration files. Values are plain dictionaries until validated; the
core only ever sees the frozen SyncConfig record.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from shadersync.domain.constants import (
    DEFAULT_ARTIFACT_SUFFIX,
    DEFAULT_DELETE_ERROR_POLICY,
    DEFAULT_SHADER_SUBDIR,
    DEFAULT_SOURCE_EXTENSIONS,
)
from shadersync.domain.errors import ConfigError
from shadersync.infra.fs import resolve_compiler_path

logger = logging.getLogger(__name__)

CONFIG_KEYS = (
    "shader_dir",
    "compiler_path",
    "artifact_suffix",
    "source_extensions",
    "compile_all_files",
    "delete_error_policy",
)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    The compiler path is resolved from the environment at call time so that
    SHADERSYNC_COMPILER/GLSLC changes are honoured between runs.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "shader_dir": os.path.join(os.getcwd(), DEFAULT_SHADER_SUBDIR),
        "compiler_path": resolve_compiler_path(),
        "artifact_suffix": DEFAULT_ARTIFACT_SUFFIX,
        "source_extensions": list(DEFAULT_SOURCE_EXTENSIONS),
        "compile_all_files": False,
        "delete_error_policy": DEFAULT_DELETE_ERROR_POLICY,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a configuration file and merge it over the defaults.

    Unknown keys are dropped with a warning. Relative `shader_dir` values are
    resolved against the directory containing the configuration file.

    Args:
        path: JSON file to read. Defaults only when None.

    Returns:
        Dict[str, Any]: Merged configuration (not yet validated).

    Raises:
        ConfigError: If the file is missing, unreadable or not a JSON object.
    """
    config = get_default_config()
    if path is None:
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed configuration file '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration file '{path}' must contain a JSON object, "
            f"found {type(data).__name__}."
        )

    for key, value in data.items():
        if key not in CONFIG_KEYS:
            logger.warning(f"Ignoring unknown configuration key '{key}' in {path}")
            continue
        config[key] = value

    shader_dir = data.get("shader_dir")
    if isinstance(shader_dir, str) and shader_dir and not os.path.isabs(os.path.expanduser(shader_dir)):
        base = os.path.dirname(os.path.abspath(path))
        config["shader_dir"] = os.path.join(base, shader_dir)

    logger.debug(f"Configuration loaded from {path}")
    return config
