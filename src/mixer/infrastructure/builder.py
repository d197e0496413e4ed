"""Builder — the compose-engine collaborator behind the mixer CLI.

Only the narrow entry points the CLI consumes live here: creating, loading
and reading ``builder.toml``, laying out a mix workspace, and importing
local RPMs into a yum repository. Failures raise :class:`BuilderError`,
which the CLI forwards to the user unchanged.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tomllib
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from mixer.config.discovery import CONFIG_FILENAME, find_config
from mixer.config.models import DEFAULT_BUNDLES, BuilderConfig
from mixer.errors import BuilderError

logger = logging.getLogger(__name__)

# EXPERIMENTAL: set from ``mixer --new-swupd``; read when a Builder is created.
USE_NEW_SWUPD_SERVER = False

_DEFAULT_CONFIG = """\
# mixer builder configuration
[builder]
state_dir = "update"
bundle_dir = "local-bundles"
version_path = "."
"""

_LOCAL_RPMS_CONFIG = """
[local]
rpm_dir = "local-rpms"
repo_dir = "local-yum"
"""

_ALL_UPSTREAM_MARKER = "include-all-upstream"


class Builder:
    """Front for one mix workspace described by a builder.toml file."""

    def __init__(self) -> None:
        self.config_path: Path | None = None
        self.config: BuilderConfig | None = None
        self.use_new_swupd = USE_NEW_SWUPD_SERVER

    @classmethod
    def new_from_config(cls, path: str | Path | None) -> Builder:
        """Create a builder with *path* loaded and parsed."""
        b = cls()
        b.load_builder_conf(path)
        b.read_builder_conf()
        return b

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def create_default_config(self, local_rpms: bool = False) -> Path:
        """Write a default builder.toml in the current directory if absent.

        With *local_rpms* the config also points at ``local-rpms/`` and
        ``local-yum/``, which are created.
        """
        path = Path.cwd() / CONFIG_FILENAME
        if path.exists():
            logger.debug("Keeping existing config %s", path)
            return path

        content = _DEFAULT_CONFIG
        if local_rpms:
            content += _LOCAL_RPMS_CONFIG
        try:
            path.write_text(content, encoding="utf-8")
            if local_rpms:
                (path.parent / "local-rpms").mkdir(exist_ok=True)
                (path.parent / "local-yum").mkdir(exist_ok=True)
        except OSError as exc:
            raise BuilderError(f"couldn't create default config {path}: {exc}") from exc
        logger.info("Created default config %s", path)
        return path

    def load_builder_conf(self, path: str | Path | None) -> None:
        """Locate the config file: *path* if given, otherwise by discovery."""
        if path:
            candidate = Path(path)
            if not candidate.is_file():
                raise BuilderError(f"config file {candidate} not found")
        else:
            found = find_config()
            if found is None:
                raise BuilderError(f"no {CONFIG_FILENAME} found, run 'mixer init' first")
            candidate = found
        self.config_path = candidate.resolve()

    def read_builder_conf(self) -> None:
        """Parse and validate the loaded config file."""
        if self.config_path is None:
            raise BuilderError("no config loaded")
        try:
            raw = self.config_path.read_text(encoding="utf-8")
            data = tomllib.loads(raw)
        except OSError as exc:
            raise BuilderError(f"cannot read {self.config_path}: {exc}") from exc
        except tomllib.TOMLDecodeError as exc:
            raise BuilderError(f"invalid TOML in {self.config_path}: {exc}") from exc
        try:
            self.config = BuilderConfig.model_validate(data)
        except ValidationError as exc:
            raise BuilderError(
                f"invalid config {self.config_path}: {_validation_summary(exc)}"
            ) from exc

    def _require_config(self) -> BuilderConfig:
        if self.config is None or self.config_path is None:
            raise BuilderError("builder config has not been read")
        return self.config

    def _resolve(self, value: str) -> Path:
        if self.config_path is None:
            raise BuilderError("no config loaded")
        return (self.config_path.parent / value).resolve()

    @property
    def workspace(self) -> Path:
        config = self._require_config()
        return self._resolve(config.builder.version_path)

    @property
    def rpm_dir(self) -> Path | None:
        config = self._require_config()
        return self._resolve(config.local.rpm_dir) if config.local.rpm_dir else None

    @property
    def repo_dir(self) -> Path | None:
        config = self._require_config()
        return self._resolve(config.local.repo_dir) if config.local.repo_dir else None

    # ------------------------------------------------------------------
    # Mix operations
    # ------------------------------------------------------------------

    def init_mix(
        self,
        upstream_version: str,
        mix_version: str,
        all_bundles: bool,
        upstream_url: str,
    ) -> None:
        """Lay out a new mix workspace and put it under git."""
        config = self._require_config()
        workspace = self.workspace
        logger.info(
            "Initializing mix %s from upstream %s (new swupd server: %s)",
            mix_version,
            upstream_version,
            self.use_new_swupd,
        )
        try:
            workspace.mkdir(parents=True, exist_ok=True)
            self._resolve(config.builder.bundle_dir).mkdir(parents=True, exist_ok=True)
            (workspace / "upstreamversion").write_text(f"{upstream_version}\n", encoding="utf-8")
            (workspace / "mixversion").write_text(f"{mix_version}\n", encoding="utf-8")
            (workspace / "upstreamurl").write_text(f"{upstream_url}\n", encoding="utf-8")
            bundles = [_ALL_UPSTREAM_MARKER] if all_bundles else list(DEFAULT_BUNDLES)
            (workspace / "mixbundles").write_text("\n".join(bundles) + "\n", encoding="utf-8")
        except OSError as exc:
            raise BuilderError(f"couldn't initialize mix workspace {workspace}: {exc}") from exc

        if not (workspace / ".git").exists():
            self._run(["git", "init", "--quiet", str(workspace)])

    def add_rpm_list(self, entries: Iterable[os.DirEntry[str] | Path]) -> None:
        """Import the ``*.rpm`` files among *entries* into the local repository."""
        repo_dir = self.repo_dir
        if repo_dir is None:
            raise BuilderError("REPODIR not set in configuration")

        rpms = [Path(entry) for entry in entries if _is_rpm(entry)]
        if not rpms:
            raise BuilderError("no RPMs found to add")

        try:
            repo_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BuilderError(f"couldn't create repository {repo_dir}: {exc}") from exc

        for rpm in rpms:
            target = repo_dir / rpm.name
            if target.exists():
                continue
            try:
                os.link(rpm, target)
            except OSError:
                try:
                    shutil.copy2(rpm, target)
                except OSError as exc:
                    raise BuilderError(f"couldn't add {rpm.name}: {exc}") from exc
            logger.debug("Added %s to %s", rpm.name, repo_dir)

        self._run(["createrepo_c", "--quiet", str(repo_dir)])
        self._run(["hardlink", str(repo_dir)])

    @staticmethod
    def _run(argv: list[str]) -> None:
        logger.debug("Running %s", " ".join(argv))
        try:
            subprocess.run(argv, check=True, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise BuilderError(f"{argv[0]} not found") from exc
        except subprocess.CalledProcessError as exc:
            output = _last_line(exc.stderr or exc.stdout or "")
            msg = f"{argv[0]} failed with status {exc.returncode}"
            raise BuilderError(f"{msg}: {output}" if output else msg) from exc


def _validation_summary(exc: ValidationError) -> str:
    """One line per pydantic error, joined: ``local.rpm_dir: Input should be ...``."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


def _last_line(output: str) -> str:
    lines = [line.strip() for line in output.splitlines() if line.strip()]
    return lines[-1] if lines else ""


def _is_rpm(entry: os.DirEntry[str] | Path) -> bool:
    if not entry.name.endswith(".rpm"):
        return False
    try:
        return entry.is_file()
    except OSError:
        return False
