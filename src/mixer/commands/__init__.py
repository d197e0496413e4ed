"""Subcommand modules for mixer.

Provides register_commands(), which attaches every subcommand to the
command tree together with the external programs it needs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mixer.domain.tree import ROOT

if TYPE_CHECKING:
    from mixer.domain.tree import CommandTree


def register_commands(tree: CommandTree) -> None:
    """Register all subcommands and their external program dependencies."""
    from mixer.commands.init_cmd import init_cmd
    from mixer.commands.rpms import add_rpms

    tree.register(ROOT, init_cmd, requires=["git"])
    tree.register(ROOT, add_rpms, requires=["createrepo_c", "hardlink"])
