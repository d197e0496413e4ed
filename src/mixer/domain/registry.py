"""DependencyRegistry — external programs declared per command.

Commands are addressed by their handle in the :class:`CommandTree` arena.
The registry is filled while the CLI is constructed and frozen before the
first invocation, so resolution never needs synchronization.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from mixer.errors import RegistrationError


class DependencyRegistry:
    """Mapping from command handle to the set of programs it requires."""

    def __init__(self) -> None:
        self._declared: dict[int, set[str]] = {}
        self._frozen = False

    def declare(self, handle: int, names: Iterable[str]) -> None:
        """Associate *names* with *handle*. Repeated calls union the set."""
        if self._frozen:
            raise RegistrationError(
                f"cannot declare dependencies for command {handle}: registry is frozen"
            )
        if isinstance(names, str):
            names = [names]
        cleaned = set()
        for name in names:
            if not isinstance(name, str) or not name.strip():
                raise RegistrationError(f"invalid program name {name!r} for command {handle}")
            cleaned.add(name.strip())
        self._declared.setdefault(handle, set()).update(cleaned)

    def declared(self, handle: int) -> frozenset[str]:
        """Programs declared directly on *handle* (ancestors not included)."""
        return frozenset(self._declared.get(handle, ()))

    def items(self) -> Iterator[tuple[int, frozenset[str]]]:
        for handle, names in self._declared.items():
            yield handle, frozenset(names)

    def freeze(self) -> None:
        self._frozen = True
