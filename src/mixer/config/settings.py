"""Settings for one mixer invocation — CLI flags and env vars in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``MIXER_*`` prefix
  3. Code defaults
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings


class MixerSettings(BaseSettings):
    """Root-level settings, frozen after construction.

    Attributes:
        cpu_profile: Destination for a CPU profile, or None to disable.
        new_swupd: EXPERIMENTAL toggle forwarded to the builder.
        verbose: Enable debug logging.
        log_json: Emit JSON log lines.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "MIXER_",
    }

    cpu_profile: Path | None = None
    new_swupd: bool = False
    verbose: bool = False
    log_json: bool = False

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> MixerSettings:
        """Construct settings from a CLI invocation.

        Unset flags (``None`` or ``False``) are dropped so environment
        variables can still provide them.
        """
        overrides = {name: value for name, value in cli_flags.items() if value}
        return cls(**overrides)
