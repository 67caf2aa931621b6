"""Error hierarchy for datemarkers.

Every error class inherits from :class:`DateMarkersError`. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

None of these errors reach an end user.  Per-item errors
(:class:`TimestampParseError`, :class:`MarkerLayoutError`) are caught where
the item is evaluated and the item is skipped; pass-level errors
(:class:`CollaboratorUnavailableError`) abort only the current
reconciliation pass.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    PARSE_ERROR = "PARSE_ERROR"
    LAYOUT_ERROR = "LAYOUT_ERROR"
    COLLABORATOR_UNAVAILABLE = "COLLABORATOR_UNAVAILABLE"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class DateMarkersError(Exception):
    """Base exception for all datemarkers errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Per-item errors
# ---------------------------------------------------------------------------

class TimestampParseError(DateMarkersError):
    """An item's raw timestamp could not be turned into a calendar day.

    Context keys: ``raw``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PARSE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class MarkerLayoutError(DateMarkersError):
    """An item's position is missing, unparsable or not finite.

    Context keys: ``position``, ``ordinal``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.LAYOUT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Pass-level errors
# ---------------------------------------------------------------------------

class CollaboratorUnavailableError(DateMarkersError):
    """The list source or rendering container could not be found.

    Raised by collaborator implementations; aborts the current pass only.

    Context keys: ``collaborator``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.COLLABORATOR_UNAVAILABLE,
            message=message,
            context=context,
            cause=cause,
        )


class InternalInvariantViolation(DateMarkersError):
    """The marker registry no longer matches its own invariants.

    Raised by :meth:`MarkerRegistry.verify`; the reconciler responds by
    clearing and rebuilding the registry.

    Context keys: ``key``, ``reason``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVARIANT_VIOLATION,
            message=message,
            context=context,
            cause=cause,
        )
