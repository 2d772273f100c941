"""
Errors raised by the draft lifecycle.

Invariant violations (for example a gallery without a primary item) are
repaired in place and never raised.
"""


class HeritageDeskError(Exception):
    """Base class for all HeritageDesk errors."""


class LoadError(HeritageDeskError):
    """The site detail could not be fetched or has no core record."""


class ValidationError(HeritageDeskError):
    """The draft is missing required fields; nothing was sent."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class SubmitError(HeritageDeskError):
    """The backend rejected a create/update request; the draft is unchanged."""

    def __init__(self, message: str, details: object = None) -> None:
        super().__init__(message)
        self.details = details
