"""Data models for the migrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RouteDescriptor(BaseModel):
    """One entry of the migration descriptor file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    route_path: str = Field(alias="routePath")
    component_path: str = Field(alias="componentPath")

    @field_validator("route_path", "component_path", mode="before")
    @classmethod
    def _strip_whitespace(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v

    @field_validator("route_path", "component_path")
    @classmethod
    def _not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v


@dataclass(frozen=True)
class ImportEdge:
    """A module specifier found in an import-like declaration."""

    specifier: str
    kind: str  # "import" | "export" | "export-all"
    line: int

    @property
    def is_relative(self) -> bool:
        return self.specifier.startswith(".")


@dataclass
class WalkReport:
    """What a Dependency Walker run did."""

    copied: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    parsed: list[Path] = field(default_factory=list)
    packages_added: dict[str, str] = field(default_factory=dict)
    unpinned: set[str] = field(default_factory=set)
    advisories: dict[str, list[Path]] = field(default_factory=dict)

    def summary(self) -> dict:
        return {
            "copied": len(self.copied),
            "skipped": len(self.skipped),
            "parsed": len(self.parsed),
            "packages_added": dict(sorted(self.packages_added.items())),
            "unpinned": sorted(self.unpinned),
            "advisories": {k: [str(p) for p in v] for k, v in self.advisories.items()},
        }


@dataclass
class MigrationResult:
    """Orchestrator return value."""

    walk: WalkReport
    routes_appended: int | None
    install_started: bool
    scaffolded: bool = False
