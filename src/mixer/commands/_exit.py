"""ExitProtocol — the one way mixer reports a failure and terminates.

Both entry points release the active profiling scope first, so a failure
never leaves a truncated capture behind, then write a single ``ERROR:``
line to stderr and exit with status 1. Logging is silenced during the
release so nothing else reaches stderr on the way out.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click

from mixer.config.logging import quiet_logging

if TYPE_CHECKING:
    from mixer.infrastructure.profiling import ProfilingScope
    from mixer.services.result import ServiceError


class ExitProtocol:
    """Uniform failure reporting bound to one profiling scope."""

    def __init__(self, profiler: ProfilingScope | None = None) -> None:
        self._profiler = profiler

    def fail(self, error: BaseException | ServiceError | str) -> NoReturn:
        """Report a pre-built error value and exit with status 1."""
        self._teardown()
        message = " ".join(str(error).split()) or error.__class__.__name__
        click.echo(f"ERROR: {message}", err=True)
        raise SystemExit(1)

    def failf(self, fmt: str, *args: object) -> NoReturn:
        """Report a printf-style message and exit with status 1."""
        self.fail(fmt % args if args else fmt)

    def _teardown(self) -> None:
        if self._profiler is not None:
            with quiet_logging():
                self._profiler.release()
