"""
Exceptions raised by the analysis engine.
"""


class MortalityInsightsError(Exception):
    """Base class for all engine errors."""


class RecordValidationError(MortalityInsightsError, ValueError):
    """A record field is missing or out of range."""


class InsufficientDataError(MortalityInsightsError, ValueError):
    """Not enough observations to fit the requested model."""
