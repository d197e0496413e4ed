"""Dependency resolution — ancestor closures, global union, and verification.

A command needs the programs declared on itself and on every ancestor up to
the root. Names repeat freely across the chain; all results here use set
semantics, so registration order never changes the outcome. Only the
reporting order is fixed: missing names and inventory rows are sorted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from mixer.infrastructure.executables import find_program
from mixer.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from mixer.domain.registry import DependencyRegistry
    from mixer.domain.tree import CommandTree

logger = logging.getLogger(__name__)

MISSING_EXTERNAL_TOOL = "MISSING_EXTERNAL_TOOL"


def resolve_chain(tree: CommandTree, registry: DependencyRegistry, handle: int) -> frozenset[str]:
    """Union of the programs declared on *handle* and all of its ancestors."""
    names: set[str] = set()
    for node in tree.ancestry(handle):
        names |= registry.declared(node)
    return frozenset(names)


def resolve_all(registry: DependencyRegistry) -> frozenset[str]:
    """Union of the programs declared on every registered command."""
    names: set[str] = set()
    for _handle, declared in registry.items():
        names |= declared
    return frozenset(names)


def verify(names: Iterable[str], *, search_path: str | None = None) -> list[str]:
    """Return the names that do not resolve on the search path, sorted."""
    return [name for name in sorted(set(names)) if find_program(name, search_path) is None]


def missing_tools_error(missing: Iterable[str]) -> ServiceError:
    """Build the MissingExternalTool error for *missing* program names."""
    names = sorted(set(missing))
    return ServiceError(
        code=MISSING_EXTERNAL_TOOL,
        message=f"missing following external programs: {', '.join(names)}",
        detail={"missing": names},
    )


class DependencyService:
    """Check declared external programs against the environment.

    Usage::

        svc = DependencyService(tree, tree.dependencies)
        result = svc.check_command(tree.handle_of(cmd))
        if not result.ok:
            ...
    """

    def __init__(
        self,
        tree: CommandTree,
        registry: DependencyRegistry,
        *,
        search_path: str | None = None,
    ) -> None:
        self._tree = tree
        self._registry = registry
        self._search_path = search_path

    def check_command(self, handle: int) -> ServiceResult:
        """Verify every program required by *handle* and its ancestors."""
        required = sorted(resolve_chain(self._tree, self._registry, handle))
        missing = verify(required, search_path=self._search_path)
        logger.debug(
            "Checked dependencies for %s: required=%s missing=%s",
            self._tree.path(handle),
            required,
            missing,
        )
        if missing:
            return ServiceResult(
                ok=False,
                op="check_command",
                data={"required": required},
                error=missing_tools_error(missing),
            )
        return ServiceResult(ok=True, op="check_command", data={"required": required})

    def check_all(self) -> ServiceResult:
        """Inventory every declared program system-wide.

        ``data["programs"]`` lists ``{"name", "found", "path"}`` rows sorted
        by name; ``data["width"]`` is the longest name, for column alignment.
        """
        programs = []
        for name in sorted(resolve_all(self._registry)):
            path = find_program(name, self._search_path)
            programs.append({"name": name, "found": path is not None, "path": path})

        missing = [row["name"] for row in programs if not row["found"]]
        width = max((len(row["name"]) for row in programs), default=0)
        data = {"programs": programs, "width": width}
        if missing:
            return ServiceResult(
                ok=False,
                op="check_all",
                data=data,
                error=missing_tools_error(missing),
            )
        return ServiceResult(ok=True, op="check_all", data=data)
