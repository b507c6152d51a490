from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between untrusted configuration sources (CLI flags, JSON files)
and the synchronization engine. Handles type coercion, suffix and extension
normalization, and default value injection.
"""

import logging
from typing import Any, Dict, List, Tuple

from shadersync.domain.config import get_default_config
from shadersync.domain.constants import DELETE_ERROR_POLICIES, DEFAULT_SOURCE_EXTENSIONS
from shadersync.infra.fs import normalize_path

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: A tuple containing the normalized
                                          configuration and a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    # 2. Field Processing
    for field in ("shader_dir", "compiler_path", "artifact_suffix", "delete_error_policy"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    merged["compile_all_files"] = _as_bool(
        merged.get("compile_all_files"), defaults["compile_all_files"],
        "compile_all_files", warnings, strict
    )
    raw_exts = merged.get("source_extensions")
    if isinstance(raw_exts, (list, tuple)) and not raw_exts and not merged["compile_all_files"]:
        warnings.append(
            "Empty 'source_extensions' uses the default allow-list; set "
            "'compile_all_files' to compile every non-artifact file."
        )
    merged["source_extensions"] = _as_list_str(
        merged.get("source_extensions"), DEFAULT_SOURCE_EXTENSIONS,
        "source_extensions", warnings, strict
    )

    # 3. Domain-Specific Normalization
    merged["shader_dir"] = normalize_path(merged["shader_dir"], defaults["shader_dir"])
    merged["artifact_suffix"] = _normalize_suffix(merged["artifact_suffix"], warnings, strict)
    merged["source_extensions"] = _normalize_extensions(merged["source_extensions"], warnings, strict)
    merged["delete_error_policy"] = _normalize_policy(
        merged["delete_error_policy"], defaults["delete_error_policy"], warnings, strict
    )

    if merged["artifact_suffix"].lower() in merged["source_extensions"]:
        msg = (
            f"Artifact suffix '{merged['artifact_suffix']}' is also listed as a "
            f"source extension; artifacts are never compiled."
        )
        if strict:
            raise ValueError(msg)
        warnings.append(msg)
        merged["source_extensions"] = [
            e for e in merged["source_extensions"] if e != merged["artifact_suffix"].lower()
        ]

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
            return items
        return list(fallback)

    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out if out else list(fallback)

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_suffix(suffix: str, warnings: List[str], strict: bool) -> str:
    """Artifact suffixes are matched literally, so a missing dot is added."""
    if suffix.startswith("."):
        return suffix
    if strict:
        raise ValueError(f"Invalid artifact suffix '{suffix}': must start with '.'.")
    warnings.append(f"Artifact suffix '{suffix}' corrected to '.{suffix}'.")
    return "." + suffix


def _normalize_extensions(exts: List[str], warnings: List[str], strict: bool) -> List[str]:
    """Lower-case every extension and ensure it carries a leading dot."""
    out: List[str] = []
    for ext in exts:
        e = ext.strip().lower()
        if not e:
            continue
        if not e.startswith("."):
            if strict:
                raise ValueError(f"Invalid extension '{ext}': must start with '.'.")
            warnings.append(f"Extension '{ext}' corrected to '.{e}'.")
            e = "." + e
        if e not in out:
            out.append(e)
    return out


def _normalize_policy(policy: str, fallback: str, warnings: List[str], strict: bool) -> str:
    """Accept underscores as well as dashes ("skip_subtree")."""
    p = policy.strip().lower().replace("_", "-")
    if p in DELETE_ERROR_POLICIES:
        return p

    msg = (
        f"Invalid delete_error_policy '{policy}': expected one of "
        f"{', '.join(DELETE_ERROR_POLICIES)}."
    )
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using '{fallback}'.")
    return fallback
