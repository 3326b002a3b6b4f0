"""package.json wrapper shared by the source and destination projects."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from scaffold_migrator.exceptions import ManifestError

log = structlog.get_logger("scaffold_migrator.manifest")


class PackageManifest:
    """A parsed package.json.

    The source manifest is only read; the destination manifest is mutated
    in place by the walker and the finalizer and persisted with :meth:`save`.
    """

    def __init__(self, path: Path, data: dict) -> None:
        self.path = path
        self.data = data

    @classmethod
    def load(cls, path: Path) -> PackageManifest:
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ManifestError(f"package.json not found: {path}") from None
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ManifestError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ManifestError(f"{path} must contain a JSON object")
        return cls(path, data)

    @property
    def dependencies(self) -> dict[str, str]:
        return self._group("dependencies")

    @property
    def dev_dependencies(self) -> dict[str, str]:
        return self._group("devDependencies")

    def _group(self, key: str) -> dict[str, str]:
        group = self.data.get(key)
        if not isinstance(group, dict):
            group = {}
            self.data[key] = group
        return group

    def pinned_version(self, name: str) -> str | None:
        """Version pin for *name*, devDependencies first."""
        for key in ("devDependencies", "dependencies"):
            group = self.data.get(key)
            if isinstance(group, dict) and group.get(name):
                return group[name]
        return None

    def add_dependency(self, name: str, version: str) -> bool:
        """Add *name* to dependencies unless already present. Returns True if added."""
        deps = self.dependencies
        if deps.get(name):
            return False
        deps[name] = version
        log.debug("manifest.dependency_added", package=name, version=version)
        return True

    def set_block(self, key: str, value: object) -> None:
        self.data[key] = value

    def merge_scripts(self, scripts: dict[str, str]) -> None:
        merged = dict(self.data.get("scripts") or {})
        merged.update(scripts)
        self.data["scripts"] = merged

    def save(self, indent: int = 4) -> None:
        self.path.write_text(
            json.dumps(self.data, indent=indent, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
        log.info("manifest.saved", path=str(self.path))
