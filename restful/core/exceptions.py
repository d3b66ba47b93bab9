"""Structured exception hierarchy for consistent error handling.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for logging and alerting
- **RestfulError**: Base exception with context, cause and fingerprinting
- **Specialized exceptions**: Identifier generation, body decoding and
  route registration failures

Client-facing outcomes (not found, conflict, ...) are never raised: controllers
return them as response envelopes. Exceptions are reserved for failures the
dispatch layer itself cannot turn into a normal response.
"""

import hashlib
import traceback
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for the dispatch layer."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""

    IDENTIFIER_UNAVAILABLE = "IDENTIFIER_UNAVAILABLE"
    """No request identifier could be generated."""

    DECODE_ERROR = "DECODE_ERROR"
    """The request body could not be decoded."""

    ROUTE_CONFLICT = "ROUTE_CONFLICT"
    """A path was registered more than once."""


class Severity(Enum):
    """Severity levels used to pick the log level of an error."""

    LOW = "LOW"
    """Expected errors caused by client input."""

    MEDIUM = "MEDIUM"
    """Errors that affect a single request."""

    HIGH = "HIGH"
    """Errors caused by service misconfiguration."""

    CRITICAL = "CRITICAL"
    """A critical dependency of the service is unavailable."""


class RestfulError(Exception):
    """Base exception class for all restful exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        # Capture stack trace at creation time
        self.stack_trace = traceback.format_stack()[:-1]

        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Generate a fingerprint for error grouping.

        Returns:
            str: A hash of the error type and the frames that raised it
        """
        max_frames = 5
        relevant_frames = self.stack_trace[-max_frames:]

        fingerprint_data = f"{self.__class__.__name__}:{self.error_code}"
        for frame in relevant_frames:
            if "site-packages" not in frame and "restful/" in frame:
                lines = frame.strip().split("\n")
                if lines:
                    fingerprint_data += f":{lines[0]}"

        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether the error is part of normal operation (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    @property
    def should_alert(self) -> bool:
        """Whether the error needs immediate attention (HIGH or CRITICAL)."""
        return self.severity in (Severity.HIGH, Severity.CRITICAL)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class IdentifierGenerationError(RestfulError):
    """Raised when the randomness source behind request identifiers fails.

    A request cannot be dispatched without an identifier, so this error is
    always CRITICAL.

    Args:
        message: Description of the failure
        cause: The original exception raised by the randomness source
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(
            ErrorCode.IDENTIFIER_UNAVAILABLE, message, Severity.CRITICAL, None, cause
        )


class BodyDecodeError(RestfulError):
    """Raised when a request body cannot be decoded.

    This error is returned to the controller that asked for the body; the
    controller decides which response the client gets.

    Args:
        message: Description of the decode failure
        context: Additional context information about the error
        cause: The original decoder or validation error
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(ErrorCode.DECODE_ERROR, message, Severity.LOW, context, cause)


class RouteConflictError(RestfulError):
    """Raised when strict routing is enabled and a path is registered twice.

    Args:
        path: The path that is already routed
    """

    def __init__(self, path: str) -> None:
        super().__init__(
            ErrorCode.ROUTE_CONFLICT,
            f"Path '{path}' is already registered",
            Severity.HIGH,
            {"path": path},
        )
