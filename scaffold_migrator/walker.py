"""Dependency Walker: copy a module and everything it transitively imports."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

import structlog

from scaffold_migrator.advisories import append_advisory, matching_rules
from scaffold_migrator.config import MigrationSettings
from scaffold_migrator.exceptions import SourceFileNotFoundError
from scaffold_migrator.manifest import PackageManifest
from scaffold_migrator.models import ImportEdge, WalkReport
from scaffold_migrator.resolver import (
    join_specifier,
    package_name,
    resolve_module_path,
    types_package_name,
)
from scaffold_migrator.sources import extract_import_edges, has_source_extension, parse_file

log = structlog.get_logger("scaffold_migrator.walker")


class DependencyWalker:
    """
    Walk local imports from entry modules, copying each file once.

    Local (relative) imports are followed recursively; package imports are
    pinned into the destination manifest from the source manifest. Files
    that already exist in the destination tree are never overwritten, and a
    module is walked at most once per walker, so cyclic imports terminate.
    """

    def __init__(
        self,
        settings: MigrationSettings,
        source_manifest: PackageManifest,
        dest_manifest: PackageManifest,
    ) -> None:
        self.settings = settings
        self.source_manifest = source_manifest
        self.dest_manifest = dest_manifest
        self.report = WalkReport()
        self._visited: set[Path] = set()

    def walk(self, entry_path: Path) -> WalkReport:
        """Walk *entry_path* and its transitive local imports.

        Can be called repeatedly; the report accumulates across calls.
        """
        stack: list[tuple[Path, Path | None]] = [(_normalize(entry_path), None)]

        while stack:
            path, imported_from = stack.pop()
            if path in self._visited:
                continue
            self._visited.add(path)

            if not path.is_file():
                raise SourceFileNotFoundError(path, imported_from)

            dest = self.settings.to_dest(path)
            self._copy_once(path, dest)

            if not has_source_extension(path):
                continue

            tree = parse_file(path)
            self.report.parsed.append(path)

            local: list[Path] = []
            for edge in extract_import_edges(tree):
                if edge.is_relative:
                    target = self._resolve_local(edge, path)
                    if target is not None:
                        local.append(target)
                else:
                    self._add_package(edge)
                self._write_advisories(edge, dest)

            # Reversed so modules are visited in import order
            stack.extend((target, path) for target in reversed(local))

        return self.report

    # ── local imports ────────────────────────────────────────────────────

    def _resolve_local(self, edge: ImportEdge, importer: Path) -> Path | None:
        """Return the module to walk, or copy an unresolvable target as-is."""
        target = join_specifier(importer.parent, edge.specifier)
        resolved = resolve_module_path(target)
        if resolved is not None:
            return resolved

        if target in self._visited:
            return None
        self._visited.add(target)
        log.debug("walker.opaque", path=str(target), importer=str(importer))

        if target.is_dir():
            dest = self.settings.to_dest(target)
            if dest.exists():
                self.report.skipped.append(dest)
            else:
                shutil.copytree(target, dest)
                self.report.copied.append(dest)
                log.info("walker.copied_tree", src=str(target), dest=str(dest))
        elif target.is_file():
            self._copy_once(target, self.settings.to_dest(target))
        else:
            raise SourceFileNotFoundError(target, importer)
        return None

    def _copy_once(self, src: Path, dest: Path) -> None:
        if dest.exists():
            self.report.skipped.append(dest)
            log.debug("walker.skipped_existing", dest=str(dest))
            return
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest)
        self.report.copied.append(dest)
        log.info("walker.copied", src=str(src), dest=str(dest))

    # ── package imports ──────────────────────────────────────────────────

    def _add_package(self, edge: ImportEdge) -> None:
        name = package_name(edge.specifier)
        self._propagate_pin(name)

        types_name = types_package_name(name)
        if self.source_manifest.pinned_version(types_name):
            self._propagate_pin(types_name)

    def _propagate_pin(self, name: str) -> None:
        version = self.source_manifest.pinned_version(name)
        if version is None:
            if name not in self.dest_manifest.dependencies and name not in self.report.unpinned:
                self.report.unpinned.add(name)
                log.warning("walker.package_unpinned", package=name)
            return

        if self.dest_manifest.add_dependency(name, version):
            self.report.packages_added[name] = version
            log.info("walker.package_added", package=name, version=version)

    # ── advisories ───────────────────────────────────────────────────────

    def _write_advisories(self, edge: ImportEdge, dest: Path) -> None:
        for rule in matching_rules(edge):
            advisory_path = self.settings.dest_root / rule.file_name
            if append_advisory(advisory_path, rule.header, str(dest)):
                self.report.advisories.setdefault(rule.name, []).append(dest)


def _normalize(path: Path) -> Path:
    return Path(os.path.normpath(os.path.abspath(path)))
