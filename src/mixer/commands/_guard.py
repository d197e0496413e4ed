"""ExecutionGuard — gate command actions on their external programs."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mixer.commands._exit import ExitProtocol
    from mixer.services.dependencies import DependencyService


class ExecutionGuard:
    """Resolve a command's dependency chain before its action runs.

    The root's ``--version`` and ``--check`` flags are handled before any
    guard is consulted, so they keep working when every program is missing.
    """

    def __init__(self, service: DependencyService, exit_protocol: ExitProtocol) -> None:
        self._service = service
        self._exit = exit_protocol

    def enforce(self, handle: int) -> None:
        """Return normally if all programs resolve; otherwise abort the process."""
        result = self._service.check_command(handle)
        if result.ok:
            return
        if result.error is None:
            self._exit.failf("%s failed", result.op)
        self._exit.fail(result.error)
