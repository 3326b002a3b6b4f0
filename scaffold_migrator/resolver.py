"""Specifier resolution: relative specifiers to files, bare specifiers to package names."""

from __future__ import annotations

import os
from pathlib import Path

from scaffold_migrator.config import SOURCE_EXTENSIONS
from scaffold_migrator.sources import has_source_extension


def resolve_module_path(path: Path) -> Path | None:
    """Resolve an extensionless module path to a concrete source file.

    Order: the path itself if it already carries a source extension, then
    ``<path>.<ext>``, then ``<path>/index.<ext>``. Returns None when nothing
    matches.
    """
    if has_source_extension(path):
        return path

    for ext in SOURCE_EXTENSIONS:
        candidate = Path(f"{path}{ext}")
        if candidate.is_file():
            return candidate

    for ext in SOURCE_EXTENSIONS:
        candidate = path / f"index{ext}"
        if candidate.is_file():
            return candidate

    return None


def join_specifier(importer_dir: Path, specifier: str) -> Path:
    """Absolute, normalized path of a relative *specifier* seen from *importer_dir*."""
    return Path(os.path.normpath(os.path.join(importer_dir, specifier)))


def package_name(specifier: str) -> str:
    """``lodash/get`` -> ``lodash``, ``@scope/pkg/sub`` -> ``@scope/pkg``."""
    parts = specifier.split("/")
    if specifier.startswith("@") and len(parts) >= 2:
        return "/".join(parts[:2])
    return parts[0]


def types_package_name(name: str) -> str:
    """DefinitelyTyped package for *name* (``@scope/pkg`` -> ``@types/scope__pkg``)."""
    if name.startswith("@") and "/" in name:
        scope, pkg = name[1:].split("/", 1)
        return f"@types/{scope}__{pkg}"
    return f"@types/{name}"
