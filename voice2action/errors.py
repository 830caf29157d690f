"""Exception taxonomy shared across the request core."""

from __future__ import annotations


class Voice2ActionError(Exception):
    """Base class for all errors raised by voice2action."""


class ConfigurationError(Voice2ActionError):
    """A required backend or credential is not configured."""


class CollaboratorError(Voice2ActionError):
    """An external collaborator (LLM, STT, Google API) failed."""


class ExtractionError(CollaboratorError):
    """The extraction backend failed to produce a response."""


class TranscriptionError(CollaboratorError):
    """Speech-to-text failed (distinct from an empty transcription)."""


class DeliveryError(CollaboratorError):
    """Email or calendar delivery failed."""


class InvalidCallbackError(Voice2ActionError):
    """A callback payload could not be parsed into action + id."""
