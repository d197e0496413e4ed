"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Owns the profiling scope, the exit protocol and the
execution guard for the current invocation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click

from mixer.commands._exit import ExitProtocol
from mixer.commands._guard import ExecutionGuard
from mixer.errors import ProfilingError
from mixer.infrastructure.profiling import ProfilingScope
from mixer.output.formatters import format_inventory
from mixer.services.dependencies import DependencyService

if TYPE_CHECKING:
    from mixer.config.settings import MixerSettings
    from mixer.domain.tree import CommandTree


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. The profiling scope is
    created disabled and only acquired by :meth:`start_profiling`, so
    ``--help`` never opens a capture.
    """

    def __init__(self, settings: MixerSettings, tree: CommandTree) -> None:
        self.settings = settings
        self.tree = tree

        from mixer.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        self.profiler = ProfilingScope(settings.cpu_profile)
        self.exit = ExitProtocol(self.profiler)
        self.dependencies = DependencyService(tree, tree.dependencies)
        self.guard = ExecutionGuard(self.dependencies, self.exit)

    def start_profiling(self) -> None:
        """Acquire the profiling scope, terminating on failure."""
        try:
            self.profiler.acquire()
        except ProfilingError as exc:
            self.fail(exc)

    def stop_profiling(self) -> None:
        self.profiler.release()

    def check_all(self) -> bool:
        """Print the global program inventory; return whether all are present."""
        result = self.dependencies.check_all()
        click.echo(format_inventory(result), nl=False)
        return result.ok

    def fail(self, error: BaseException | str) -> NoReturn:
        self.exit.fail(error)

    def failf(self, fmt: str, *args: object) -> NoReturn:
        self.exit.failf(fmt, *args)
