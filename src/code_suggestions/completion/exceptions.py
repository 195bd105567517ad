"""
Exceptions raised by the completion pipeline.
"""

class CompletionError(Exception):
    """Base exception for completion pipeline errors."""
    pass

class MissingCursorMarkerError(CompletionError):
    """Raised when the context text carries no cursor marker (client error)."""
    pass

class ModelUnavailableError(CompletionError):
    """Raised when the generation endpoint cannot be reached or answers with an error status."""
    pass
