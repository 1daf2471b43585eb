"""Exception hierarchy for ergoshell.

Resolution errors are fatal to the caller that asked for the config; generation
and materialization errors are caught at the orchestrator boundary so that a
watch session survives a bad edit.
"""

from __future__ import annotations

from pathlib import Path


class ErgoshellError(Exception):
    """Base class for every error raised by ergoshell."""


class ResolutionError(ErgoshellError):
    """Raised when a config path cannot be read, enumerated, or unpacked."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f'Could not read config file "{path}": {message}')


class BundleError(ErgoshellError):
    """Raised when an archive does not have the expected bundle layout."""


class GenerationError(ErgoshellError):
    """Raised when the generation engine fails on a config."""


class EngineError(GenerationError):
    """Raised by engine clients for transport or protocol failures."""


class MaterializationError(ErgoshellError):
    """Raised when a result artifact cannot be written to disk."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"Could not write {path}: {message}")


class UsageError(ErgoshellError):
    """Raised for invalid command-line usage. Carries the process exit code."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        self.exit_code = exit_code
        super().__init__(message)
