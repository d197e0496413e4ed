"""Exception hierarchy for the mixer front end."""

from __future__ import annotations


class MixerError(Exception):
    """Base class for all mixer errors."""


class RegistrationError(MixerError):
    """Raised when the command tree is assembled incorrectly.

    This is a programmer error: it surfaces while the CLI object is being
    constructed, never in response to user input.
    """


class ProfilingError(MixerError):
    """Raised when a CPU profile capture cannot be started."""


class BuilderError(MixerError):
    """Raised by the builder collaborator. Forwarded to the user verbatim."""
