"""Advisory notes: side files listing copied modules that need manual follow-up."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from scaffold_migrator.models import ImportEdge

log = structlog.get_logger("scaffold_migrator.advisories")


@runtime_checkable
class AdvisoryRule(Protocol):
    """Interface that every advisory rule must satisfy."""

    name: str
    file_name: str
    header: str

    def matches(self, edge: ImportEdge) -> bool: ...


ADVISORY_REGISTRY: dict[str, AdvisoryRule] = {}


def register_advisory(rule: AdvisoryRule) -> None:
    """Register a rule instance by its name."""
    ADVISORY_REGISTRY[rule.name] = rule


def matching_rules(edge: ImportEdge) -> list[AdvisoryRule]:
    return [rule for rule in ADVISORY_REGISTRY.values() if rule.matches(edge)]


def append_advisory(advisory_path: Path, header: str, entry: str) -> bool:
    """Append *entry* to *advisory_path*, creating it with *header* on first use.

    Returns False when *entry* already appears in the file.
    """
    if not advisory_path.exists():
        advisory_path.parent.mkdir(parents=True, exist_ok=True)
        advisory_path.write_text(f"{header}\n", encoding="utf-8")

    if entry in advisory_path.read_text(encoding="utf-8"):
        return False

    with advisory_path.open("a", encoding="utf-8") as fh:
        fh.write(f"{entry}\n")
    log.info("advisory.appended", file=advisory_path.name, entry=entry)
    return True


class ApiHelperRule:
    """Modules importing the server-call helper need their API calls reworked."""

    name = "ajax"
    file_name = "help-ajax.txt"
    header = "*** The following files depend on node-layer APIs, rework the API calls ***"

    def matches(self, edge: ImportEdge) -> bool:
        # "../utils/ajax" and "./ajax/user" both reach the helper module
        return edge.kind == "import" and "ajax" in edge.specifier.split("/")[1:]


class I18nServiceRule:
    """Modules using the i18n service must drop that dependency."""

    name = "i18n"
    file_name = "help-i18n.txt"
    header = "*** The following files depend on the i18n service, remove the dependency ***"

    def matches(self, edge: ImportEdge) -> bool:
        return edge.kind == "import" and edge.specifier == "react-intl-universal"


register_advisory(ApiHelperRule())
register_advisory(I18nServiceRule())
