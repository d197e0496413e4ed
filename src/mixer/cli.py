"""Root CLI group for mixer with global flags and command registration."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import click

from mixer import __version__
from mixer.commands import register_commands
from mixer.commands._base import MixerGroup
from mixer.commands._context import AppContext
from mixer.config.settings import MixerSettings
from mixer.domain.tree import ROOT, CommandTree

_ROOT_EXAMPLES = """\
  mixer --version
  mixer --check
  mixer init --clear-version 21060 --mix-version 10
  mixer add-rpms --config ./builder.toml"""


def create_cli(
    register: Callable[[CommandTree], None] = register_commands,
) -> MixerGroup:
    """Build the root group and its command tree.

    *register* attaches subcommands to the tree; the tree and its dependency
    registry are frozen before the group is returned.
    """

    @click.group(
        "mixer",
        cls=MixerGroup,
        invoke_without_command=True,
        examples=_ROOT_EXAMPLES,
    )
    @click.option(
        "--version",
        "show_version",
        is_flag=True,
        help="Print version information and quit.",
    )
    @click.option(
        "--check",
        "check_deps",
        is_flag=True,
        help="Check all dependencies needed by mixer and quit.",
    )
    @click.option(
        "--cpu-profile",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        hidden=True,
        help="Write CPU profile to a file.",
    )
    @click.option(
        "--new-swupd",
        is_flag=True,
        help="EXPERIMENTAL: Use new implementation of swupd-server when possible.",
    )
    @click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
    @click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
    @click.pass_context
    def cli(
        ctx: click.Context,
        show_version: bool,
        check_deps: bool,
        cpu_profile: Path | None,
        new_swupd: bool,
        verbose: bool,
        log_json: bool,
    ) -> None:
        """Mixer is a tool used to compose OS update content and images."""
        settings = MixerSettings.from_cli(
            cpu_profile=cpu_profile,
            new_swupd=new_swupd,
            verbose=verbose,
            log_json=log_json,
        )
        app = AppContext(settings, tree)
        ctx.obj = app

        from mixer.infrastructure import builder

        builder.USE_NEW_SWUPD_SERVER = settings.new_swupd

        # Runs when the root context closes, on success and on every exit.
        ctx.call_on_close(app.stop_profiling)
        app.start_profiling()

        # Both --version and --check work regardless of missing programs.
        if show_version:
            click.echo(f"Mixer {__version__}")
            ctx.exit(0)
        if check_deps:
            ctx.exit(0 if app.check_all() else 1)

        app.guard.enforce(ROOT)
        if ctx.invoked_subcommand is None:
            click.echo(ctx.get_help())

    tree = CommandTree(cli)
    register(tree)
    tree.freeze()
    return cli


cli = create_cli()


def main() -> None:
    """Console-script entry point."""
    cli()
