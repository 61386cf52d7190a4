"""CDK constructs with organization security and retention defaults."""

from .errors import (
    ConfigurationError,
    MissingRequiredPropertyError,
    InvalidNameFormatError,
)
from .naming import derive_dead_letter_name
from .precedence import apply_precedence

__version__ = "0.1.0"

__all__ = [
    # Errors
    'ConfigurationError',
    'MissingRequiredPropertyError',
    'InvalidNameFormatError',
    # Resolution
    'derive_dead_letter_name',
    'apply_precedence',
]
