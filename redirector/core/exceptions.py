"""
Custom Exceptions

This module defines custom exceptions for better error handling
and more specific error messages.

Taxonomy:
- ConfigurationError: required settings missing, the process must not start
- VisitLogError: the visit log cannot be opened (fatal at startup) or
  closed (reported at shutdown)
- SlugStoreError: the slug data file cannot be read; logged, not fatal
"""


class RedirectorException(Exception):
    """Base exception for the redirector service."""
    pass


class ConfigurationError(RedirectorException):
    """Raised when required configuration is missing or invalid."""

    def __init__(self, setting: str, reason: str = "missing or invalid"):
        self.setting = setting
        self.reason = reason
        super().__init__(f"Invalid configuration ({setting}): {reason}")


class SlugStoreError(RedirectorException):
    """Raised when the slug data file cannot be loaded."""

    def __init__(self, path: str, original_error: Exception = None):
        self.path = path
        self.original_error = original_error
        super().__init__(f"Failed to load slugs from '{path}': {original_error}")


class VisitLogError(RedirectorException):
    """Raised when the durable visit log cannot be opened or closed."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Visit log error: {message}")
