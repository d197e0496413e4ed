"""CPU profiling bound to a single command invocation.

At most one capture is live per process. The destination file is created
up front so an unwritable path fails before any work starts; the stats are
written when the scope is released. Release is idempotent, so every exit
path may call it.
"""

from __future__ import annotations

import cProfile
import logging
from pathlib import Path
from types import TracebackType
from typing import ClassVar

from mixer.errors import ProfilingError

logger = logging.getLogger(__name__)


class ProfilingScope:
    """Guarded start/stop of one ``cProfile`` capture.

    A scope without a destination is disabled: :meth:`acquire` and
    :meth:`release` do nothing.
    """

    _live: ClassVar[ProfilingScope | None] = None

    def __init__(self, destination: Path | None = None) -> None:
        self.destination = destination
        self._profile: cProfile.Profile | None = None

    @property
    def enabled(self) -> bool:
        return self.destination is not None

    @property
    def active(self) -> bool:
        return self._profile is not None

    def acquire(self) -> None:
        """Start the capture if a destination is configured."""
        if self.destination is None:
            return
        if self._profile is not None:
            raise ProfilingError("profiling session already started")
        if ProfilingScope._live is not None:
            raise ProfilingError("another profiling session is already active")

        try:
            self.destination.open("wb").close()
        except OSError as exc:
            raise ProfilingError(f"couldn't create file for CPU profile: {exc}") from exc

        profile = cProfile.Profile()
        try:
            profile.enable()
        except ValueError as exc:
            raise ProfilingError(f"couldn't start profiling: {exc}") from exc

        self._profile = profile
        ProfilingScope._live = self
        logger.debug("CPU profiling started, writing to %s", self.destination)

    def release(self) -> None:
        """Stop the capture and write it out. Safe to call more than once."""
        profile = self._profile
        if profile is None:
            return
        self._profile = None
        if ProfilingScope._live is self:
            ProfilingScope._live = None

        profile.disable()
        if self.destination is None:
            logger.debug("CPU profile discarded, no destination")
            return
        try:
            profile.dump_stats(self.destination)
        except OSError:
            logger.warning("Could not write CPU profile to %s", self.destination, exc_info=True)
            return
        logger.debug("CPU profile written to %s", self.destination)

    def __enter__(self) -> ProfilingScope:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
