"""CommandTree — arena of click commands addressed by stable handles.

Click already owns the parent/child wiring used for parsing. The tree
mirrors it as a flat list of nodes so that dependency resolution can walk
from any command to the root without touching click internals. Parents are
referenced by index; ownership flows strictly from the root down.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Final

import click

from mixer.errors import RegistrationError
from mixer.domain.registry import DependencyRegistry

ROOT: Final = 0


@dataclass
class CommandNode:
    """One command in the tree."""

    handle: int
    name: str
    command: click.Command
    parent: int | None = None
    children: list[int] = field(default_factory=list)


class CommandTree:
    """Hierarchical registry of named commands.

    The root group occupies handle :data:`ROOT`. Every other command is
    attached with :meth:`register`, which also adds it to the parent click
    group. After :meth:`freeze` the tree and its dependency registry are
    read-only.
    """

    def __init__(
        self,
        root: click.Group,
        dependencies: DependencyRegistry | None = None,
    ) -> None:
        self.dependencies = dependencies if dependencies is not None else DependencyRegistry()
        self._nodes: list[CommandNode] = [CommandNode(ROOT, root.name or "", root)]
        self._handles: dict[int, int] = {id(root): ROOT}
        self._frozen = False

    @property
    def root(self) -> click.Group:
        command = self._nodes[ROOT].command
        assert isinstance(command, click.Group)
        return command

    def register(
        self,
        parent: int,
        command: click.Command,
        *,
        requires: Iterable[str] = (),
    ) -> int:
        """Attach *command* under the group at *parent* and return its handle."""
        if self._frozen:
            raise RegistrationError(f"cannot register {command.name!r}: command tree is frozen")
        if not 0 <= parent < len(self._nodes):
            raise RegistrationError(f"unknown parent handle {parent}")
        parent_node = self._nodes[parent]
        if not isinstance(parent_node.command, click.Group):
            raise RegistrationError(
                f"cannot register {command.name!r} under {parent_node.name!r}: not a group"
            )
        if id(command) in self._handles:
            raise RegistrationError(f"command {command.name!r} is already registered")
        if not command.name:
            raise RegistrationError("cannot register a command without a name")
        if any(self._nodes[child].name == command.name for child in parent_node.children):
            raise RegistrationError(
                f"{parent_node.name!r} already has a subcommand named {command.name!r}"
            )

        handle = len(self._nodes)
        self._nodes.append(CommandNode(handle, command.name, command, parent=parent))
        self._handles[id(command)] = handle
        parent_node.children.append(handle)
        parent_node.command.add_command(command)

        requires = list(requires)
        if requires:
            self.declare_dependencies(handle, requires)
        return handle

    def declare_dependencies(self, handle: int, names: Iterable[str]) -> None:
        """Declare external programs needed by the command at *handle*."""
        if not 0 <= handle < len(self._nodes):
            raise RegistrationError(f"unknown command handle {handle}")
        self.dependencies.declare(handle, names)

    def node(self, handle: int) -> CommandNode:
        if not 0 <= handle < len(self._nodes):
            raise KeyError(handle)
        return self._nodes[handle]

    def parent(self, handle: int) -> int | None:
        return self.node(handle).parent

    def children(self, handle: int) -> list[int]:
        return list(self.node(handle).children)

    def ancestry(self, handle: int) -> Iterator[int]:
        """Yield *handle* and then each ancestor up to the root."""
        current: int | None = handle
        while current is not None:
            yield current
            current = self._nodes[current].parent

    def handle_of(self, command: click.Command) -> int:
        """Return the handle of a registered click command."""
        try:
            return self._handles[id(command)]
        except KeyError:
            raise KeyError(f"command {command.name!r} is not registered") from None

    def handles(self) -> range:
        return range(len(self._nodes))

    def path(self, handle: int) -> str:
        """Space-separated command path, root first (``"mixer init"``)."""
        names = [self._nodes[h].name for h in self.ancestry(handle)]
        return " ".join(reversed(names))

    def freeze(self) -> None:
        self._frozen = True
        self.dependencies.freeze()

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._nodes)
