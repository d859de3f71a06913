"""restwire Error Taxonomy.

This module defines the error hierarchy raised by the message dispatch
core. Every error carries a code following the ``restwire:<area>/<kind>``
pattern plus optional context. Transport failures are not part of this
hierarchy: ``httpx.HTTPError`` subclasses propagate unchanged.
"""
from __future__ import annotations

from typing import Any


class RestWireError(Exception):
    """Base exception for all restwire errors.

    Attributes:
        code: Error code following the restwire:... pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidArgumentError(RestWireError, ValueError):
    """Raised when a required argument is missing or unusable.

    Detected synchronously, before any I/O takes place.

    Attributes:
        argument: Name of the offending argument
    """

    def __init__(
        self, argument: str, reason: str = "cannot be None", details: dict[str, Any] | None = None
    ) -> None:
        message = f"{argument} {reason}"
        super().__init__(
            code="restwire:argument/invalid",
            message=message,
            details={"argument": argument, **(details or {})},
        )
        self.argument = argument


class OperationCancelledError(RestWireError):
    """Raised when a cancellation token is triggered before or during a dispatch step.

    Attributes:
        stage: The dispatch step that observed the cancellation
    """

    def __init__(self, stage: str | None = None, details: dict[str, Any] | None = None) -> None:
        message = "Operation was cancelled"
        if stage:
            message = f"{message} during {stage}"
        super().__init__(
            code="restwire:operation/cancelled",
            message=message,
            details={"stage": stage, **(details or {})} if stage else dict(details or {}),
        )
        self.stage = stage


class SerializationError(RestWireError):
    """Raised when a body cannot be serialized or deserialized.

    Only raised on the response side once the media-type guard has passed;
    a mismatched media type is skipped silently.

    Attributes:
        media_type: Media type of the body being processed, if known
        cause: Underlying parser or validation error
    """

    def __init__(
        self,
        reason: str,
        media_type: str | None = None,
        cause: Exception | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = f"Serialization failed: {reason}"
        super().__init__(
            code="restwire:content/serialization",
            message=message,
            details={"media_type": media_type, **(details or {})},
        )
        self.media_type = media_type
        self.cause = cause


class InvalidStateError(RestWireError):
    """Raised when a message is driven through an illegal state transition.

    Attributes:
        from_state: The current message state
        to_state: The attempted target state
    """

    def __init__(
        self, from_state: str, to_state: str, details: dict[str, Any] | None = None
    ) -> None:
        message = f"Invalid message transition from '{from_state}' to '{to_state}'"
        super().__init__(
            code="restwire:message/invalid_state",
            message=message,
            details={"from_state": from_state, "to_state": to_state, **(details or {})},
        )
        self.from_state = from_state
        self.to_state = to_state


__all__ = [
    "RestWireError",
    "InvalidArgumentError",
    "OperationCancelledError",
    "SerializationError",
    "InvalidStateError",
]
