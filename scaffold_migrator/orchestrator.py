"""Migration orchestrator: scaffold, walk, register routes, finalize."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

import structlog
from pydantic import TypeAdapter, ValidationError

from scaffold_migrator import process
from scaffold_migrator.config import MigrationSettings
from scaffold_migrator.exceptions import MigrationConfigError, SourceFileNotFoundError
from scaffold_migrator.finalize import finalize
from scaffold_migrator.manifest import PackageManifest
from scaffold_migrator.models import MigrationResult, RouteDescriptor
from scaffold_migrator.resolver import join_specifier, resolve_module_path
from scaffold_migrator.routes import build_element, register_routes
from scaffold_migrator.walker import DependencyWalker

log = structlog.get_logger("scaffold_migrator.orchestrator")

_ROUTES_ADAPTER = TypeAdapter(list[RouteDescriptor])


def load_route_descriptors(path: Path) -> list[RouteDescriptor]:
    """Read the migration descriptor: a JSON array of ``{routePath, componentPath}``."""
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise MigrationConfigError(f"Migration config not found: {path}") from None
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise MigrationConfigError(f"Invalid JSON in {path}: {e}") from e
    try:
        return _ROUTES_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise MigrationConfigError(f"Invalid migration config {path}: {e}") from e


class Migrator:
    """
    Run one migration from the source project into the destination project.

    Step 1: scaffold the destination project if its directory is missing
    Step 2: DependencyWalker over the entry points and every route component
    Step 3: register_routes() on the destination router configuration
    Step 4: finalize() the manifest and env file, then start the install
    """

    def __init__(self, settings: MigrationSettings) -> None:
        self.settings = settings

    def load_routes(self, path: Path) -> list[RouteDescriptor]:
        return load_route_descriptors(path)

    def resolve_component(self, descriptor: RouteDescriptor) -> Path:
        """Source file of a route's component, relative to the source router directory."""
        target = join_specifier(self.settings.source_router_dir, descriptor.component_path)
        resolved = resolve_module_path(target)
        if resolved is None:
            raise SourceFileNotFoundError(target, self.settings.source_root / self.settings.source_router)
        return resolved

    def run(
        self,
        routes: Sequence[RouteDescriptor],
        *,
        scaffold: bool = True,
        install: bool = True,
        wait_install: bool = False,
        strict_routes: bool = False,
    ) -> MigrationResult:
        settings = self.settings
        structlog.contextvars.bind_contextvars(dest_project=settings.dest_project)
        try:
            scaffolded = False
            dest_exists = settings.dest_root.exists()
            log.info("migrate.dest_checked", dest=str(settings.dest_root), exists=dest_exists)
            if not dest_exists:
                if not scaffold:
                    raise MigrationConfigError(
                        f"Destination project {settings.dest_root} does not exist and scaffolding is disabled"
                    )
                process.run_scaffold(settings)
                scaffolded = True

            source_manifest = PackageManifest.load(settings.source_manifest_path)
            dest_manifest = PackageManifest.load(settings.dest_manifest_path)

            walker = DependencyWalker(settings, source_manifest, dest_manifest)
            for entry in settings.entry_paths():
                walker.walk(entry)

            elements = []
            for descriptor in routes:
                walker.walk(self.resolve_component(descriptor))
                elements.append(build_element(descriptor))

            appended = register_routes(
                settings.dest_router_config_path, elements, strict=strict_routes
            )

            finalize(settings, dest_manifest)

            if install:
                process.start_install(settings, wait=wait_install)

            log.info("migrate.finished", **walker.report.summary())
            return MigrationResult(
                walk=walker.report,
                routes_appended=appended,
                install_started=install,
                scaffolded=scaffolded,
            )
        finally:
            structlog.contextvars.unbind_contextvars("dest_project")
