"""CLI entry point: scaffold-migrate.

Subcommands:
    scaffold-migrate create-config -o migration.config.json
    scaffold-migrate run DEST_PROJECT [MIGRATION_CONFIG]
    scaffold-migrate walk src/pages/Home.tsx --dest-project new-app
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from scaffold_migrator.config import DEFAULT_MIGRATION_CONFIG, MigrationSettings
from scaffold_migrator.core.logging import setup_logging
from scaffold_migrator.exceptions import MigratorError
from scaffold_migrator.manifest import PackageManifest
from scaffold_migrator.models import WalkReport
from scaffold_migrator.orchestrator import Migrator
from scaffold_migrator.walker import DependencyWalker

# Migration descriptor template
_MIGRATION_TEMPLATE = [
    {"routePath": "/example", "componentPath": "../pages/Example"},
]


def _fail(err: MigratorError) -> None:
    click.echo(f"Error: {err}", err=True)
    sys.exit(1)


def _print_report(report: WalkReport, as_json: bool) -> None:
    summary = report.summary()
    if as_json:
        click.echo(json.dumps(summary, indent=2))
        return

    click.echo(f"Copied {summary['copied']} file(s), skipped {summary['skipped']} existing")
    if summary["packages_added"]:
        click.echo("Packages added:")
        for name, version in summary["packages_added"].items():
            click.echo(f"  {name} {version}")
    if summary["unpinned"]:
        click.echo("Packages without a version in the source manifest:")
        for name in summary["unpinned"]:
            click.echo(f"  {name}")
    for rule, paths in summary["advisories"].items():
        click.echo(f"Advisory '{rule}': {len(paths)} file(s) need follow-up")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """scaffold-migrator: move pages of a front-end project into a new scaffold."""
    setup_logging(verbose=verbose)


@main.command("create-config")
@click.option("-o", "--output", default=DEFAULT_MIGRATION_CONFIG, help="Output file path")
def create_config(output: str) -> None:
    """Generate a migration descriptor template JSON file."""
    Path(output).write_text(json.dumps(_MIGRATION_TEMPLATE, indent=2) + "\n")
    click.echo(f"Migration descriptor template written to {output}")
    click.echo("Edit the file, then run: scaffold-migrate run <dest-project> " + output)


@main.command("run")
@click.argument("dest_project")
@click.argument("migration_config", default=DEFAULT_MIGRATION_CONFIG)
@click.option("--source-root", type=click.Path(file_okay=False), default=None,
              help="Source project root (default: $MIGRATOR_SOURCE_ROOT or cwd)")
@click.option("--dest-root", type=click.Path(file_okay=False), default=None,
              help="Destination project root (default: sibling named DEST_PROJECT)")
@click.option("--no-scaffold", is_flag=True, help="Fail instead of generating a missing project")
@click.option("--no-install", is_flag=True, help="Skip the package installation step")
@click.option("--wait", "wait_install", is_flag=True, help="Wait for the installation to finish")
@click.option("--strict-routes", is_flag=True, help="Fail when the router config has no `routes`")
def run(
    dest_project: str,
    migration_config: str,
    source_root: str | None,
    dest_root: str | None,
    no_scaffold: bool,
    no_install: bool,
    wait_install: bool,
    strict_routes: bool,
) -> None:
    """Migrate the routes listed in MIGRATION_CONFIG into DEST_PROJECT."""
    try:
        settings = MigrationSettings.from_env(dest_project, source_root, dest_root)
        migrator = Migrator(settings)
        routes = migrator.load_routes(Path(migration_config))
        result = migrator.run(
            routes,
            scaffold=not no_scaffold,
            install=not no_install,
            wait_install=wait_install,
            strict_routes=strict_routes,
        )
    except MigratorError as e:
        _fail(e)
        return

    _print_report(result.walk, as_json=False)
    if result.routes_appended is None:
        click.echo("Warning: no `routes` declaration found, router config left unchanged", err=True)
    else:
        click.echo(f"Registered {result.routes_appended} route(s)")
    click.echo("Write dependencies success!")


@main.command("walk")
@click.argument("entries", nargs=-1, required=True, type=click.Path())
@click.option("--dest-project", required=True, help="Destination project name")
@click.option("--source-root", type=click.Path(file_okay=False), default=None)
@click.option("--dest-root", type=click.Path(file_okay=False), default=None)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def walk(
    entries: tuple[str, ...],
    dest_project: str,
    source_root: str | None,
    dest_root: str | None,
    as_json: bool,
) -> None:
    """Copy ENTRIES and their local imports only (no routes, no finalization)."""
    try:
        settings = MigrationSettings.from_env(dest_project, source_root, dest_root)
        source_manifest = PackageManifest.load(settings.source_manifest_path)
        dest_manifest = PackageManifest.load(settings.dest_manifest_path)
        walker = DependencyWalker(settings, source_manifest, dest_manifest)
        for entry in entries:
            entry_path = Path(entry)
            if not entry_path.is_absolute():
                entry_path = settings.source_root / entry_path
            walker.walk(entry_path)
        if walker.report.packages_added:
            dest_manifest.save(indent=4)
    except MigratorError as e:
        _fail(e)
        return

    _print_report(walker.report, as_json)


if __name__ == "__main__":
    main()
