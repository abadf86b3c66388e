"""Base exception classes for domain-level errors."""

from __future__ import annotations

from playlist_player.domain.shared.messages import ErrorMessages


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class InvalidStateTransitionError(InvalidOperationError):
    """Raised when a playback state machine is asked for a transition it cannot make."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        super().__init__(operation, current_state, message)
        self.code = "INVALID_STATE_TRANSITION"


class InvalidIndexError(DomainError):
    """Raised when an index-based access falls outside the track list."""

    def __init__(self, index: int, size: int, message: str | None = None) -> None:
        msg = message or ErrorMessages.INDEX_OUT_OF_RANGE.format(index=index, size=size)
        super().__init__(msg, code="INVALID_INDEX")
        self.index = index
        self.size = size


class LoadFailure(DomainError):
    """Raised when a resource cannot be fetched or decoded."""

    def __init__(
        self,
        resource_ref: str,
        reason: str,
        *,
        cause: BaseException | None = None,
    ) -> None:
        msg = ErrorMessages.LOAD_FAILED.format(resource_ref=resource_ref, reason=reason)
        super().__init__(msg, code="LOAD_FAILURE")
        self.resource_ref = resource_ref
        self.reason = reason
        self.cause = cause


class FetchError(LoadFailure):
    """The resource could not be retrieved."""


class DecodeError(LoadFailure):
    """The resource was retrieved but is not decodable audio."""
