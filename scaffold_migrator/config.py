"""Migration settings: roots, fixed file locations and the blocks merged into package.json."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path

from scaffold_migrator.exceptions import MissingArgumentError, PathMappingError

DEFAULT_MIGRATION_CONFIG = "migration.config.json"

# Recognised module extensions, in probing preference order
SOURCE_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx")

LINT_CONFIG: dict = {
    "extends": "@qxwz/eslint-config-react-app",
    "rules": {
        "@typescript-eslint/class-name-casing": ["warn"],
        "lines-between-class-members": ["warn"],
        "class-methods-use-this": ["warn"],
        "max-len": ["error", 180],
        "@typescript-eslint/no-unused-vars": ["warn"],
        "react/jsx-closing-tag-location": ["warn"],
    },
}

EXTRA_SCRIPTS: dict[str, str] = {
    "codegen-watch": "graphql-codegen --config codegen.yml --watch",
}

_DEFAULT_SCAFFOLD_COMMAND = (
    "npx",
    "create-react-app",
    "{dest}",
    "--scripts-version=@qxwz/react-scripts",
    "--template=@qxwz/cra-template-bops",
)


@dataclass
class MigrationSettings:
    """Where things live in the source and destination projects.

    ``dest_root`` defaults to a sibling of ``source_root`` named after the
    destination project.
    """

    source_root: Path
    dest_project: str
    dest_root: Path
    source_router: str = "src/router/router.js"
    dest_router_config: str = "src/router/config.ts"
    entry_points: tuple[str, ...] = ("src/stores/index.ts",)
    env_file: str = ".env"
    env_key: str = "QBP_LIBRARY"
    install_command: tuple[str, ...] = ("yarn",)
    scaffold_command: tuple[str, ...] = _DEFAULT_SCAFFOLD_COMMAND
    lint_config: dict = field(default_factory=lambda: dict(LINT_CONFIG))
    extra_scripts: dict[str, str] = field(default_factory=lambda: dict(EXTRA_SCRIPTS))

    def __post_init__(self) -> None:
        self.source_root = Path(os.path.abspath(self.source_root))
        self.dest_root = Path(os.path.abspath(self.dest_root))

    @classmethod
    def from_env(
        cls,
        dest_project: str | None,
        source_root: str | Path | None = None,
        dest_root: str | Path | None = None,
    ) -> MigrationSettings:
        """Build settings, letting explicit arguments win over env vars.

        Env vars: MIGRATOR_SOURCE_ROOT, MIGRATOR_DEST_ROOT, MIGRATOR_ENV_KEY,
        MIGRATOR_INSTALL_CMD.
        """
        if not dest_project:
            raise MissingArgumentError("dest project name not provided")

        src = Path(source_root or os.environ.get("MIGRATOR_SOURCE_ROOT") or os.getcwd())
        src = Path(os.path.abspath(src))
        dst = dest_root or os.environ.get("MIGRATOR_DEST_ROOT") or src.parent / dest_project

        kwargs: dict = {}
        env_key = os.environ.get("MIGRATOR_ENV_KEY")
        if env_key:
            kwargs["env_key"] = env_key
        install_cmd = os.environ.get("MIGRATOR_INSTALL_CMD")
        if install_cmd:
            kwargs["install_command"] = tuple(shlex.split(install_cmd))

        return cls(source_root=src, dest_project=dest_project, dest_root=Path(dst), **kwargs)

    # ── derived paths ────────────────────────────────────────────────────

    @property
    def source_manifest_path(self) -> Path:
        return self.source_root / "package.json"

    @property
    def dest_manifest_path(self) -> Path:
        return self.dest_root / "package.json"

    @property
    def source_router_dir(self) -> Path:
        return (self.source_root / self.source_router).parent

    @property
    def dest_router_config_path(self) -> Path:
        return self.dest_root / self.dest_router_config

    @property
    def dest_env_path(self) -> Path:
        return self.dest_root / self.env_file

    def entry_paths(self) -> list[Path]:
        return [self.source_root / entry for entry in self.entry_points]

    def scaffold_argv(self) -> list[str]:
        return [part.format(dest=str(self.dest_root)) for part in self.scaffold_command]

    def to_dest(self, path: Path) -> Path:
        """Map a path under ``source_root`` to the same place under ``dest_root``."""
        normalized = Path(os.path.normpath(os.path.abspath(path)))
        try:
            rel = normalized.relative_to(self.source_root)
        except ValueError:
            raise PathMappingError(
                f"{normalized} is outside the source root {self.source_root}"
            ) from None
        return self.dest_root / rel
