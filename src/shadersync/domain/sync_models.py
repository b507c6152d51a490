from __future__ import annotations

"""
Synchronization Domain Data Models.

Defines the records exchanged between the tree walker, the invalidator,
the compile dispatcher and the interface layer, plus the factory functions
that assemble the final run result.
"""

import subprocess
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shadersync.domain.constants import (
    DEFAULT_ARTIFACT_SUFFIX,
    DEFAULT_DELETE_ERROR_POLICY,
)
from shadersync.domain.errors import CompileError, FilesystemError

# -----------------------------------------------------------------------------
# CONFIGURATION RECORD
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SyncConfig:
    """
    Explicit configuration passed to every synchronization component.

    Attributes:
        shader_dir: Absolute root of the shader tree.
        compiler_path: Executable invoked once per source file.
        artifact_suffix: Suffix appended to a source name to form its artifact.
        source_extensions: Allow-list of source extensions; empty means every
                           non-artifact file is compiled. Only built empty
                           from a config with `compile_all_files` set.
        delete_error_policy: How the invalidator reacts to filesystem failures.
    """
    shader_dir: str
    compiler_path: str
    artifact_suffix: str = DEFAULT_ARTIFACT_SUFFIX
    source_extensions: List[str] = field(default_factory=list)
    delete_error_policy: str = DEFAULT_DELETE_ERROR_POLICY

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "SyncConfig":
        """Build the record from a validated configuration dictionary."""
        extensions = [] if cfg.get("compile_all_files") else list(cfg.get("source_extensions") or [])
        return cls(
            shader_dir=cfg["shader_dir"],
            compiler_path=cfg["compiler_path"],
            artifact_suffix=cfg.get("artifact_suffix") or DEFAULT_ARTIFACT_SUFFIX,
            source_extensions=extensions,
            delete_error_policy=cfg.get("delete_error_policy") or DEFAULT_DELETE_ERROR_POLICY,
        )

# -----------------------------------------------------------------------------
# TREE TRAVERSAL
# -----------------------------------------------------------------------------

@dataclass
class DirectoryListing:
    """
    Immediate children of one directory.

    Mutable on purpose: consumers of the tree walker prune descent by
    editing `subdirs` in place.

    Attributes:
        path: Directory that was listed.
        files: Names of regular files directly inside `path`.
        subdirs: Full paths of subdirectories directly inside `path`.
    """
    path: str
    files: List[str] = field(default_factory=list)
    subdirs: List[str] = field(default_factory=list)


@dataclass
class InvalidationReport:
    """Outcome of one invalidation pass."""
    deleted: List[str] = field(default_factory=list)
    failures: List[FilesystemError] = field(default_factory=list)
    skipped_dirs: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

# -----------------------------------------------------------------------------
# COMPILE TASKS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CompileJob:
    """A single external compiler invocation."""
    source: str
    output: str
    command: List[str]

    @property
    def command_line(self) -> str:
        """Shell-quoted rendering used for console output."""
        return subprocess.list2cmdline(self.command)


@dataclass(frozen=True)
class CompileOutcome:
    """
    Completed compile task.

    Attributes:
        job: The invocation this outcome belongs to.
        ok: True when the compiler exited with status 0.
        returncode: Exit status, or None if the process never launched.
        diagnostics: Combined stdout/stderr of the compiler, or the launch error.
        duration: Wall time between launch and completion, in seconds.
    """
    job: CompileJob
    ok: bool
    returncode: Optional[int]
    diagnostics: str = ""
    duration: float = 0.0

    def to_error(self) -> Optional[CompileError]:
        if self.ok:
            return None
        return CompileError(
            self.job.source, self.job.command, self.returncode, self.diagnostics
        )

# -----------------------------------------------------------------------------
# RUN RESULT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SyncResult:
    """
    Unified result object of a complete synchronization run.

    Attributes:
        ok: True when no compile task and no filesystem operation failed.
        error: Fatal error description when the run aborted early.
        shader_dir: Normalized root that was processed.
        compiler_path: Compiler executable used for this run.
        artifact_suffix: Suffix used for artifact detection and derivation.
        dry_run: True if no filesystem change or process launch happened.
        deleted: Artifacts removed (or that would be removed) by invalidation.
        delete_errors: Filesystem failure messages recorded during the run.
        planned: Jobs derived by the orchestrator.
        outcomes: Completed compile tasks, in submission order.
        summary: Aggregated counters for rendering.
    """
    ok: bool
    error: str

    shader_dir: str
    compiler_path: str
    artifact_suffix: str
    dry_run: bool = False

    deleted: List[str] = field(default_factory=list)
    delete_errors: List[str] = field(default_factory=list)
    planned: List[CompileJob] = field(default_factory=list)
    outcomes: List[CompileOutcome] = field(default_factory=list)

    summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def failed(self) -> List[CompileOutcome]:
        return [o for o in self.outcomes if not o.ok]

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        cfg: SyncConfig,
        report: Optional[InvalidationReport] = None,
        dry_run: bool = False,
) -> SyncResult:
    """
    Create a result for a run that aborted before compiling.

    Args:
        error: Detailed error description.
        cfg: The configuration used during the failed run.
        report: Partial invalidation report, if invalidation had started.
        dry_run: Whether the run was a simulation.

    Returns:
        SyncResult: An immutable error result object.
    """
    report = report or InvalidationReport()
    return SyncResult(
        ok=False,
        error=error,
        shader_dir=cfg.shader_dir,
        compiler_path=cfg.compiler_path,
        artifact_suffix=cfg.artifact_suffix,
        dry_run=dry_run,
        deleted=list(report.deleted),
        delete_errors=[str(f) for f in report.failures],
        summary={
            "deleted": len(report.deleted),
            "delete_errors": len(report.failures),
            "sources": 0,
            "compiled": 0,
            "failed": 0,
        },
    )


def create_sync_result(
        cfg: SyncConfig,
        report: InvalidationReport,
        planned: List[CompileJob],
        outcomes: List[CompileOutcome],
        walk_errors: List[FilesystemError],
        elapsed: float,
        dry_run: bool = False,
) -> SyncResult:
    """
    Create the result of a run that reached the compile phase.

    Args:
        cfg: Configuration used for the run.
        report: Invalidation pass report.
        planned: Jobs derived by the orchestrator.
        outcomes: Awaited compile outcomes (empty in dry-run mode).
        walk_errors: Listing failures recorded while orchestrating.
        elapsed: Total wall time in seconds.
        dry_run: Whether the run was a simulation.

    Returns:
        SyncResult: An immutable result object.
    """
    failures = list(report.failures) + list(walk_errors)
    failed = sum(1 for o in outcomes if not o.ok)
    compiled = sum(1 for o in outcomes if o.ok)

    return SyncResult(
        ok=not failures and failed == 0,
        error="",
        shader_dir=cfg.shader_dir,
        compiler_path=cfg.compiler_path,
        artifact_suffix=cfg.artifact_suffix,
        dry_run=dry_run,
        deleted=list(report.deleted),
        delete_errors=[str(f) for f in failures],
        planned=list(planned),
        outcomes=list(outcomes),
        summary={
            "deleted": len(report.deleted),
            "delete_errors": len(failures),
            "sources": len(planned),
            "compiled": compiled,
            "failed": failed,
            "elapsed": round(elapsed, 3),
        },
    )
