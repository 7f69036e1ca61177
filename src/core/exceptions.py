"""
Custom exceptions for the assurance detector.

Configuration problems are the only failures the detector reports; numeric
edge cases in the sample stream are handled locally and never raised.
"""


class AssuranceError(Exception):
    """Base exception for assurance detection failures."""
    pass


class ConfigurationError(AssuranceError):
    """Raised when detector configuration is invalid or missing."""
    pass
