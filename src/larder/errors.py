"""Exceptions raised by the engine."""


class LarderError(Exception):
    """Base class for engine errors."""


class ConfigurationError(LarderError):
    """Raised when scoring configuration cannot be loaded or is inconsistent."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        if source:
            message = f"{message} (in {source})"
        super().__init__(message)


class ShoppingListGenerationError(LarderError):
    """Raised when shopping-list generation fails on malformed input."""
