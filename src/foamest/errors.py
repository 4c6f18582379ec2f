"""Exceptions raised by the estimating engine and its state reducers."""

from __future__ import annotations


class EstimateError(ValueError):
    """Base class for recoverable, user-facing estimate validation failures."""


class InvalidPitchFormat(EstimateError):
    """Raised when a roof pitch is not a usable ``rise/run`` pair."""

    def __init__(self, pitch: object) -> None:
        super().__init__(f"Invalid roof pitch {pitch!r}; expected rise/run such as 4/12")
        self.pitch = pitch


class MarkupBelowFloorRejected(EstimateError):
    """Raised when a committed price or rate would imply a negative markup."""

    def __init__(self, message: str, minimum: float) -> None:
        super().__init__(message)
        self.minimum = minimum


class ApplicationRemovalRejected(EstimateError):
    """Raised when removing a foam application would leave its area empty."""


class UnknownEntity(EstimateError):
    """Raised when a reducer addresses an area or application id that does not exist."""


class DocumentError(EstimateError):
    """Raised when a saved estimate document cannot be read or validated."""


__all__ = [
    "EstimateError",
    "InvalidPitchFormat",
    "MarkupBelowFloorRejected",
    "ApplicationRemovalRejected",
    "UnknownEntity",
    "DocumentError",
]
