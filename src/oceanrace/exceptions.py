"""Custom exceptions for the voyage simulation."""


class VoyageError(Exception):
    """Base exception for voyage errors."""

    pass


class PersistedPayloadError(VoyageError):
    """Raised when a saved payload cannot be parsed at all."""

    pass


class InvalidFieldError(VoyageError):
    """Raised when a single persisted field fails validation."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class ConfigError(VoyageError):
    """Raised when a config file cannot be located."""

    pass
