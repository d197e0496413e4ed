"""Pydantic models for builder.toml with code-baked defaults.

Sparse TOML contract: defaults baked here, builder.toml only contains
overrides. Relative paths are resolved against the config file's directory.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_BUNDLES: tuple[str, ...] = (
    "bootloader",
    "kernel-native",
    "os-core",
    "os-core-update",
)


class BuilderSection(BaseModel):
    """[builder] section."""

    model_config = {"frozen": True}

    state_dir: str = "update"
    bundle_dir: str = "local-bundles"
    version_path: str = "."


class LocalSection(BaseModel):
    """[local] section — local RPM input and repository output."""

    model_config = {"frozen": True}

    rpm_dir: str | None = None
    repo_dir: str | None = None


class BuilderConfig(BaseModel):
    """Root config model composing all sections."""

    model_config = {"frozen": True}

    builder: BuilderSection = Field(default_factory=BuilderSection)
    local: LocalSection = Field(default_factory=LocalSection)
