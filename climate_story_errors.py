"""
Climate Story Errors
Exception types raised by the data and state layers.
"""


class ClimateStoryError(Exception):
    """Base class for viewer errors."""


class LoadFailure(ClimateStoryError):
    """A dataset could not be read or failed schema validation.  Fatal for the session."""

    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Error loading {self.path}: {reason}")


class InsufficientData(ClimateStoryError):
    """A delta was requested for an empty series."""


class InvalidSelectionAttempt(ClimateStoryError):
    """A selection would leave no active scenarios."""
