"""Commands: local RPM import."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import click

from mixer.commands._base import MixerCommand

if TYPE_CHECKING:
    from mixer.commands._context import AppContext


@click.command(
    "add-rpms",
    cls=MixerCommand,
    examples="""\
  mixer add-rpms
  mixer add-rpms -c ./builder.toml""",
)
@click.option("-c", "--config", "config_path", default=None, help="Builder config to use.")
@click.pass_obj
def add_rpms(app: AppContext, config_path: str | None) -> None:
    """Add RPMs from the configured RPM directory to the local yum repository."""
    from mixer.errors import BuilderError
    from mixer.infrastructure.builder import Builder

    try:
        b = Builder.new_from_config(config_path)
    except BuilderError as exc:
        app.fail(exc)

    if b.rpm_dir is None:
        app.failf("RPMDIR not set in configuration")
    try:
        with os.scandir(b.rpm_dir) as it:
            rpms = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        app.failf("cannot read RPMDIR: %s", exc)

    try:
        b.add_rpm_list(rpms)
    except BuilderError as exc:
        app.fail(exc)
