"""Command: mix workspace initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mixer.commands._base import MixerCommand

if TYPE_CHECKING:
    from mixer.commands._context import AppContext

DEFAULT_UPSTREAM_URL = "https://download.clearlinux.org"

_INIT_EXAMPLES = """\
  mixer init --clear-version 21060 --mix-version 10
  mixer init --clear-version 21060 --mix-version 10 --all
  mixer init --clear-version 21060 --mix-version 10 --local-rpms
  mixer init --clear-version 21060 --mix-version 10 --config ./builder.toml"""


@click.command("init", cls=MixerCommand, examples=_INIT_EXAMPLES)
@click.option(
    "--clear-version",
    type=int,
    required=True,
    help="Supply the Clear version to compose the mix from.",
)
@click.option("--mix-version", type=int, required=True, help="Supply the Mix version to build.")
@click.option(
    "--all",
    "all_bundles",
    is_flag=True,
    help="Initialize mix with all upstream bundles automatically included.",
)
@click.option("--local-rpms", is_flag=True, help="Create and configure local RPMs directories.")
@click.option(
    "--config",
    "config_path",
    default=None,
    help="Supply a specific builder.toml to use for mixing.",
)
@click.option(
    "--upstream-url",
    default=DEFAULT_UPSTREAM_URL,
    show_default=True,
    help="Supply an upstream URL to use for mixing.",
)
@click.pass_obj
def init_cmd(
    app: AppContext,
    clear_version: int,
    mix_version: int,
    all_bundles: bool,
    local_rpms: bool,
    config_path: str | None,
    upstream_url: str,
) -> None:
    """Initialize the mixer and workspace."""
    from mixer.errors import BuilderError
    from mixer.infrastructure.builder import Builder

    b = Builder()
    try:
        if not config_path:
            config_path = str(b.create_default_config(local_rpms))
        b.load_builder_conf(config_path)
        b.read_builder_conf()
        b.init_mix(str(clear_version), str(mix_version), all_bundles, upstream_url)
    except BuilderError as exc:
        app.fail(exc)
