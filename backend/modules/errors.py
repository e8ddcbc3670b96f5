"""
modules/errors.py
-----------------
Caller-visible failures of the engine and the edit operations.

Each error carries a stable ``code`` so the API layer (and the UI behind
it) can tell an expected, user-actionable outcome such as an exhausted
candidate pool apart from an internal fault.
"""

from __future__ import annotations


class ConciergeError(Exception):
    """Base class; ``code`` is the machine-readable identifier."""

    code: str = "CONCIERGE_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {"error": {"message": self.message, "code": self.code}}


class NoAlternativesError(ConciergeError):
    """Regenerating an option found no unused venue in its category."""
    code = "NO_ALTERNATIVES"


class NoVenuesError(ConciergeError):
    """Switching a slot's category found no venue even without availability filtering."""
    code = "NO_VENUES"


class NotFoundError(ConciergeError):
    code = "NOT_FOUND"


class InvalidSelectionError(ConciergeError):
    code = "INVALID_SELECTION"


class InvalidInputError(ConciergeError):
    code = "INVALID_INPUT"
