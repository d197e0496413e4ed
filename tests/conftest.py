"""Shared pytest fixtures and test helpers for mixer tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from mixer.infrastructure import builder
from mixer.infrastructure.profiling import ProfilingScope


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep MIXER_* variables, color forcing and global toggles out of tests."""
    for var in (
        "MIXER_CPU_PROFILE",
        "MIXER_NEW_SWUPD",
        "MIXER_VERBOSE",
        "MIXER_LOG_JSON",
        "MIXER_BUILDER_CONFIG",
        "FORCE_COLOR",
        "TTY_COMPATIBLE",
        "TTY_INTERACTIVE",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(builder, "USE_NEW_SWUPD_SERVER", False)

    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    mixer_logger = logging.getLogger("mixer")
    mixer_handlers = mixer_logger.handlers[:]
    mixer_level = mixer_logger.level
    mixer_propagate = mixer_logger.propagate
    yield
    logging.disable(logging.NOTSET)
    root.handlers = original_handlers
    root.setLevel(original_level)
    mixer_logger.handlers = mixer_handlers
    mixer_logger.setLevel(mixer_level)
    mixer_logger.propagate = mixer_propagate

    live = ProfilingScope._live
    if live is not None:
        live.release()


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """Empty directory used as the only PATH entry."""
    d = tmp_path / "bin"
    d.mkdir()
    return d


@pytest.fixture
def isolated_path(bin_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point PATH at an empty directory so no external program resolves."""
    monkeypatch.setenv("PATH", str(bin_dir))
    return bin_dir


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Change CWD to an empty mix workspace."""
    ws = tmp_path / "mix"
    ws.mkdir()
    monkeypatch.chdir(ws)
    return ws


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_program(directory: Path, name: str, *, log: Path | None = None) -> Path:
    """Write an executable shell script called *name* into *directory*.

    With *log*, each invocation appends ``<name> <args>`` to that file.
    """
    script = directory / name
    body = "#!/bin/sh\n"
    if log is not None:
        body += f'echo "{name} $*" >> "{log}"\n'
    body += "exit 0\n"
    script.write_text(body)
    script.chmod(0o755)
    return script
