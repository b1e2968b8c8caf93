"""Error taxonomy for scene generation."""

from typing import Optional


class ForgeError(Exception):
    """Base class for every error raised by avatarforge.

    Attributes:
        stage: Pipeline stage that failed, set by the orchestrator
            (validate, narrative, compose, submit, poll, fetch).
    """

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class ConfigurationError(ForgeError):
    """A required setting (usually an API key) is missing."""


class ValidationError(ForgeError):
    """Orchestration input is malformed. Raised before any remote call."""


class RecordNotFoundError(ForgeError):
    """A gallery record with the requested id does not exist."""


class GenerationError(ForgeError):
    """The generation service rejected or failed a request."""

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, stage)
        self.status_code = status_code


class ContractViolation(GenerationError):
    """A remote response does not match the declared output shape."""


class RemoteOperationError(GenerationError):
    """A finished operation reports an explicit error."""


class MissingMediaError(GenerationError):
    """A finished operation reports success but carries no media."""


class TransportError(GenerationError):
    """Network failure or timeout while talking to a remote service."""


class OperationTimeoutError(TransportError, TimeoutError):
    """Polling exceeded the configured wait bound."""


class OperationCancelledError(ForgeError):
    """Polling was stopped by the caller's cancellation event."""


class FetchError(ForgeError):
    """Downloading a generated asset failed."""
