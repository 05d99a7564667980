"""Custom exceptions used across birthdayflow."""


class BirthdayFlowError(Exception):
    """Base error for the application."""


class ConfigError(BirthdayFlowError):
    """Configuration related error."""


class CredentialsError(ConfigError):
    """Service account credentials are missing or unusable."""


class SourceError(BirthdayFlowError):
    """Raised when the source table cannot be fetched or read."""


class RenderError(BirthdayFlowError):
    """Raised when a document cannot be generated."""
