"""Custom exceptions for scaffold-migrator."""

from __future__ import annotations

from pathlib import Path


class MigratorError(Exception):
    """Base exception for all migrator errors."""


class MissingArgumentError(MigratorError):
    """Raised when a required argument is absent, before any work starts."""


class MigrationConfigError(MigratorError):
    """Raised when the migration descriptor file is missing or malformed."""


class ManifestError(MigratorError):
    """Raised when a package.json cannot be read or is not a JSON object."""


class PathMappingError(MigratorError):
    """Raised when a path cannot be mapped from the source root to the destination root."""


class SourceFileNotFoundError(MigratorError):
    """Raised when a file reached during traversal does not exist."""

    def __init__(self, path: Path, imported_from: Path | None = None):
        self.path = path
        self.imported_from = imported_from
        msg = f"Source file not found: {path}"
        if imported_from is not None:
            msg += f" (imported from {imported_from})"
        super().__init__(msg)


class ModuleParseError(MigratorError):
    """Raised when a module body cannot be parsed into a syntax tree."""

    def __init__(self, path: Path, line: int, column: int):
        self.path = path
        self.line = line
        self.column = column
        super().__init__(f"Syntax error in {path} at line {line}, column {column}")


class RouterConfigError(MigratorError):
    """Raised when the router configuration cannot be patched."""


class RoutesNotFoundError(RouterConfigError):
    """Raised in strict mode when no ``routes`` declarator exists."""


class ExternalCommandError(MigratorError):
    """Raised when the scaffold or install command fails."""

    def __init__(self, cmd: list[str], returncode: int | None, detail: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        msg = f"Command {' '.join(cmd)!r} failed"
        if returncode is not None:
            msg += f" (exit {returncode})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
