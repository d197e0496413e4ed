"""Tests for the builder collaborator."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest

from mixer.config.models import DEFAULT_BUNDLES
from mixer.errors import BuilderError
from mixer.infrastructure import builder
from mixer.infrastructure.builder import Builder


class _RunRecorder:
    def __init__(self, fail: subprocess.CalledProcessError | None = None) -> None:
        self.calls: list[list[str]] = []
        self._fail = fail

    def __call__(self, argv: list[str], **_kwargs: object) -> subprocess.CompletedProcess[str]:
        self.calls.append(argv)
        if self._fail is not None:
            raise self._fail
        return subprocess.CompletedProcess(argv, 0, "", "")


@pytest.fixture
def run(monkeypatch: pytest.MonkeyPatch) -> _RunRecorder:
    recorder = _RunRecorder()
    monkeypatch.setattr(subprocess, "run", recorder)
    return recorder


@pytest.fixture
def loaded(workspace: Path) -> Builder:
    (workspace / "builder.toml").write_text(
        '[local]\nrpm_dir = "local-rpms"\nrepo_dir = "local-yum"\n'
    )
    return Builder.new_from_config(None)


class TestConfig:
    def test_create_default_config(self, workspace: Path) -> None:
        path = Builder().create_default_config()
        assert path == workspace / "builder.toml"
        assert "[builder]" in path.read_text()
        assert "[local]" not in path.read_text()

    def test_create_default_config_keeps_existing(self, workspace: Path) -> None:
        existing = workspace / "builder.toml"
        existing.write_text("# mine\n")
        Builder().create_default_config(local_rpms=True)
        assert existing.read_text() == "# mine\n"
        assert not (workspace / "local-rpms").exists()

    def test_load_discovers_config(
        self, workspace: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (workspace / "builder.toml").write_text("")
        child = workspace / "sub"
        child.mkdir()
        monkeypatch.chdir(child)
        b = Builder()
        b.load_builder_conf(None)
        assert b.config_path == (workspace / "builder.toml").resolve()

    @pytest.mark.usefixtures("workspace")
    def test_load_without_config(self) -> None:
        with pytest.raises(BuilderError, match="no builder.toml found"):
            Builder().load_builder_conf(None)

    def test_read_before_load(self) -> None:
        with pytest.raises(BuilderError, match="no config loaded"):
            Builder().read_builder_conf()

    def test_invalid_toml(self, workspace: Path) -> None:
        (workspace / "builder.toml").write_text("[builder\n")
        with pytest.raises(BuilderError, match="invalid TOML"):
            Builder.new_from_config(workspace / "builder.toml")

    def test_invalid_value(self, workspace: Path) -> None:
        (workspace / "builder.toml").write_text("[builder]\nstate_dir = 3\n")
        with pytest.raises(BuilderError, match="invalid config") as exc_info:
            Builder.new_from_config(workspace / "builder.toml")
        message = str(exc_info.value)
        assert "\n" not in message
        assert message.endswith(": builder.state_dir: Input should be a valid string")

    def test_paths_resolve_against_config_dir(self, loaded: Builder, workspace: Path) -> None:
        assert loaded.rpm_dir == (workspace / "local-rpms").resolve()
        assert loaded.repo_dir == (workspace / "local-yum").resolve()
        assert loaded.workspace == workspace.resolve()

    def test_unset_local_dirs(self, workspace: Path) -> None:
        (workspace / "builder.toml").write_text("")
        b = Builder.new_from_config(None)
        assert b.rpm_dir is None
        assert b.repo_dir is None

    def test_experimental_toggle_read_at_creation(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(builder, "USE_NEW_SWUPD_SERVER", True)
        assert Builder().use_new_swupd is True


class TestInitMix:
    def test_lays_out_workspace(self, loaded: Builder, workspace: Path, run: _RunRecorder) -> None:
        loaded.init_mix("21060", "10", False, "https://download.clearlinux.org")
        assert (workspace / "mixbundles").read_text().split() == list(DEFAULT_BUNDLES)
        assert run.calls == [["git", "init", "--quiet", str(workspace.resolve())]]

    def test_skips_git_init_for_existing_repo(
        self, loaded: Builder, workspace: Path, run: _RunRecorder
    ) -> None:
        (workspace / ".git").mkdir()
        loaded.init_mix("1", "2", True, "https://example.com")
        assert run.calls == []

    def test_requires_config(self) -> None:
        with pytest.raises(BuilderError, match="has not been read"):
            Builder().init_mix("1", "2", False, "https://example.com")

    def test_git_failure(
        self, loaded: Builder, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        error = subprocess.CalledProcessError(1, ["git"], output="", stderr="boom\n")
        monkeypatch.setattr(subprocess, "run", _RunRecorder(fail=error))
        with pytest.raises(BuilderError, match="^git failed with status 1: boom$"):
            loaded.init_mix("1", "2", False, "https://example.com")

    def test_git_not_installed(self, loaded: Builder, monkeypatch: pytest.MonkeyPatch) -> None:
        def _missing(*_args: object, **_kwargs: object) -> None:
            raise FileNotFoundError("git")

        monkeypatch.setattr(subprocess, "run", _missing)
        with pytest.raises(BuilderError, match="^git not found$"):
            loaded.init_mix("1", "2", False, "https://example.com")


class TestAddRpmList:
    def test_links_rpms_and_runs_tools(
        self, loaded: Builder, workspace: Path, run: _RunRecorder
    ) -> None:
        src = workspace / "local-rpms"
        src.mkdir()
        rpm = src / "a-1.rpm"
        rpm.write_bytes(b"a")
        (src / "notes.txt").write_text("skip")
        loaded.add_rpm_list([rpm, src / "notes.txt"])

        repo = workspace.resolve() / "local-yum"
        assert (repo / "a-1.rpm").read_bytes() == b"a"
        assert not (repo / "notes.txt").exists()
        assert run.calls == [
            ["createrepo_c", "--quiet", str(repo)],
            ["hardlink", str(repo)],
        ]

    def test_accepts_dir_entries(self, loaded: Builder, workspace: Path, run: _RunRecorder) -> None:
        src = workspace / "local-rpms"
        src.mkdir()
        (src / "b-2.rpm").write_bytes(b"b")
        with os.scandir(src) as it:
            loaded.add_rpm_list(list(it))
        assert (workspace / "local-yum" / "b-2.rpm").exists()

    def test_no_rpms(self, loaded: Builder, run: _RunRecorder) -> None:
        with pytest.raises(BuilderError, match="no RPMs found"):
            loaded.add_rpm_list([])
        assert run.calls == []

    def test_repo_dir_required(self, workspace: Path) -> None:
        (workspace / "builder.toml").write_text('[local]\nrpm_dir = "local-rpms"\n')
        b = Builder.new_from_config(None)
        with pytest.raises(BuilderError, match="REPODIR not set"):
            b.add_rpm_list([])


class TestFailureMessages:
    def test_multiline_failure_keeps_last_line(
        self, loaded: Builder, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        error = subprocess.CalledProcessError(
            1, ["git"], output="", stderr="hint: using master\n\nfatal: cannot init\n"
        )
        monkeypatch.setattr(subprocess, "run", _RunRecorder(fail=error))
        with pytest.raises(BuilderError, match="^git failed with status 1: fatal: cannot init$"):
            loaded.init_mix("1", "2", False, "https://example.com")

    def test_resolve_without_config(self) -> None:
        with pytest.raises(BuilderError, match="no config loaded"):
            Builder()._resolve("local-rpms")
