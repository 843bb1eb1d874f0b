"""
Custom exceptions for the tournament notation analyzer.

Malformed notation is reported through diagnostics, never through these.
"""


class TorneoError(Exception):
    """Base exception for all custom errors."""
    pass


class SourceTextError(TorneoError, TypeError):
    """Raised when the analyzer is given no source text at all."""
    def __init__(self, received: object = None):
        self.received_type = type(received).__name__
        super().__init__(f"Source text must be a str, got {self.received_type}")


# Configuration Errors
class ConfigurationError(TorneoError):
    """Raised when configuration is invalid or inconsistent."""
    pass


# Export Errors
class ExportError(TorneoError):
    """Raised when a report frame cannot be written."""
    pass
