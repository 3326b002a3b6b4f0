"""scaffold-migrator: move pages of a front-end project into a newly scaffolded sibling."""

__version__ = "0.1.0"

from scaffold_migrator.config import MigrationSettings
from scaffold_migrator.manifest import PackageManifest
from scaffold_migrator.models import (
    ImportEdge,
    MigrationResult,
    RouteDescriptor,
    WalkReport,
)
from scaffold_migrator.orchestrator import Migrator, load_route_descriptors
from scaffold_migrator.routes import RouteElement, build_element, register_routes
from scaffold_migrator.walker import DependencyWalker

__all__ = [
    "DependencyWalker",
    "ImportEdge",
    "MigrationResult",
    "MigrationSettings",
    "Migrator",
    "PackageManifest",
    "RouteDescriptor",
    "RouteElement",
    "WalkReport",
    "build_element",
    "load_route_descriptors",
    "register_routes",
]
