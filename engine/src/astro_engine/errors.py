"""Custom exceptions for the chart engine."""


class AstroEngineError(Exception):
    """Base exception for all engine errors."""
    pass


class NotInitializedError(AstroEngineError):
    """Raised when a calculation is requested before initialize() completed."""
    pass


class UnsupportedBodyError(AstroEngineError):
    """Raised when the ephemeris is asked for a body it does not track."""
    pass


class EphemerisError(AstroEngineError):
    """Raised when the ephemeris cannot produce a position."""
    pass


class InvalidCoordinatesError(AstroEngineError, ValueError):
    """Raised when coordinates are invalid."""
    pass
