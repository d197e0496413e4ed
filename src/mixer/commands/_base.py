"""Custom Click base classes for mixer commands.

``MixerCommand`` runs the execution guard before its callback, so a
command's action never starts while a required program is missing.
Both classes also accept an ``examples`` parameter: when ``--examples`` is
passed, the command prints usage examples and exits.
"""

from __future__ import annotations

import sys
from typing import Any

import click

from mixer.commands._context import AppContext


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class MixerCommand(click.Command):
    """Click Command subclass guarded by its declared external programs."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)

    def invoke(self, ctx: click.Context) -> Any:
        app = ctx.find_object(AppContext)
        if app is not None:
            app.guard.enforce(app.tree.handle_of(self))
        return super().invoke(ctx)


class MixerGroup(click.Group):
    """Click Group subclass that supports an ``--examples`` flag.

    Sets ``command_class = MixerCommand`` so all subcommands created with
    ``@group.command()`` are guarded without explicit ``cls=`` each time.
    """

    command_class = MixerCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)

    def main(self, *args: Any, standalone_mode: bool = True, **kwargs: Any) -> Any:
        """Run as the program entry point; every failure exits with status 1.

        Click reports usage errors with status 2. Mixer has a single failure
        status, so click errors are shown as usual and mapped to 1.
        """
        if not standalone_mode:
            return super().main(*args, standalone_mode=False, **kwargs)
        try:
            rv = super().main(*args, standalone_mode=False, **kwargs)
        except click.ClickException as exc:
            exc.show()
            sys.exit(1)
        except click.Abort:
            click.echo("Aborted!", err=True)
            sys.exit(1)
        # Non-standalone click returns the code of ctx.exit() instead of exiting.
        sys.exit(rv if isinstance(rv, int) else 0)

    def invoke(self, ctx: click.Context) -> Any:
        # The root group has no AppContext yet; its callback guards itself.
        app = ctx.find_object(AppContext)
        if app is not None:
            app.guard.enforce(app.tree.handle_of(self))
        return super().invoke(ctx)
