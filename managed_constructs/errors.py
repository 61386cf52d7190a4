"""
Configuration error classes for the managed constructs.

Every error is raised while a construct is being declared, before any
resource is added to the construct tree. None of them is transient, so
nothing in this library retries.
"""

from typing import Dict, Any, List


class ConfigurationError(Exception):
    """
    Base class for all configuration errors.

    Carries a stable error code, a human-readable message and optional
    details (for example the offending field names).
    """

    def __init__(self, code: str, message: str, details: Dict[str, Any] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}


class MissingRequiredPropertyError(ConfigurationError):
    """
    Raised when a property needed by the chosen configuration is absent.

    Provisioned billing without read and write scaling hints is the only
    case today.
    """

    def __init__(self, message: str, missing: List[str]):
        super().__init__('MISSING_REQUIRED_PROPERTY', message, {'missing': list(missing)})


class InvalidNameFormatError(ConfigurationError):
    """Raised when a resource name does not have the shape its type requires."""

    def __init__(self, message: str, name: str):
        super().__init__('INVALID_NAME_FORMAT', message, {'name': name})
