"""Manifest & environment finalization: the last writes of a migration."""

from __future__ import annotations

import structlog

from scaffold_migrator.config import MigrationSettings
from scaffold_migrator.manifest import PackageManifest

log = structlog.get_logger("scaffold_migrator.finalize")


def finalize(settings: MigrationSettings, dest_manifest: PackageManifest) -> None:
    """Merge the fixed lint/script blocks, persist the manifest, write the env line."""
    dest_manifest.set_block("eslintConfig", settings.lint_config)
    dest_manifest.merge_scripts(settings.extra_scripts)
    dest_manifest.save(indent=4)
    append_env_line(settings)


def append_env_line(settings: MigrationSettings) -> bool:
    """Append ``<env_key>=<dest_project>`` to the destination env file.

    Returns False when the exact line is already there.
    """
    env_path = settings.dest_env_path
    line = f"{settings.env_key}={settings.dest_project}"

    existing = env_path.read_text(encoding="utf-8") if env_path.exists() else ""
    if line in existing.splitlines():
        log.debug("finalize.env_present", path=str(env_path), line=line)
        return False

    prefix = "" if not existing or existing.endswith("\n") else "\n"
    with env_path.open("a", encoding="utf-8") as fh:
        fh.write(f"{prefix}{line}\n")
    log.info("finalize.env_appended", path=str(env_path), line=line)
    return True
