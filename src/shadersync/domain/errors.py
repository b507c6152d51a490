from __future__ import annotations

"""
Domain Error Taxonomy.

Filesystem failures abort a walk (or a subtree, depending on policy) while
compile failures stay isolated to a single source file. Configuration
errors are raised before any work starts.
"""

from typing import List, Optional


class ShaderSyncError(Exception):
    """Base class for every error raised by the synchronizer."""


class ConfigError(ShaderSyncError):
    """Raised when a configuration file cannot be read or parsed."""


class FilesystemError(ShaderSyncError):
    """
    Listing or deletion failure on a single path.

    Attributes:
        path: Filesystem path the operation targeted.
        operation: Short verb describing the failed operation ("list", "delete").
    """

    def __init__(self, path: str, operation: str, reason: str = ""):
        self.path = path
        self.operation = operation
        self.reason = reason
        message = f"Failed to {operation} '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

    @classmethod
    def from_os_error(cls, path: str, operation: str, exc: OSError) -> "FilesystemError":
        return cls(path, operation, exc.strerror or str(exc))


class CompileError(ShaderSyncError):
    """
    External compiler failure for one source file.

    Attributes:
        source: Shader source that failed to compile.
        command: Argument vector that was (or would have been) executed.
        returncode: Process exit status, or None if the process never launched.
        diagnostics: Text emitted by the compiler or the launch error message.
    """

    def __init__(
            self,
            source: str,
            command: List[str],
            returncode: Optional[int],
            diagnostics: str = "",
    ):
        self.source = source
        self.command = list(command)
        self.returncode = returncode
        self.diagnostics = diagnostics
        if returncode is None:
            summary = f"Compiler could not be launched for '{source}'"
        else:
            summary = f"Compiler exited with status {returncode} for '{source}'"
        super().__init__(summary)
