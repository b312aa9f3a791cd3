"""
Error taxonomy — every failure buildloom raises on purpose.

Validation and configuration errors surface at Project construction, so a
partially valid Project is never handed out. Argument errors are raised
synchronously by builders and factories, never deferred into a task.
"""

from __future__ import annotations


class BuildloomError(Exception):
    """Root of all buildloom errors."""


class ValidationError(BuildloomError):
    """A descriptor field is malformed."""


class SchemaValidationError(ValidationError):
    """A descriptor failed schema validation.

    Attributes:
        field_path: Dotted path to the offending field (e.g. ``buildMetadata.type``).
        message: What is wrong with it.
    """

    def __init__(self, field_path: str, message: str):
        self.field_path = field_path
        self.message = message
        super().__init__(f"Schema validation failed [{field_path} {message}]")


class ConfigurationError(BuildloomError):
    """The descriptor is well formed but semantically incomplete."""


class NotFoundError(BuildloomError, LookupError):
    """A requested target or child directory does not exist."""


class InvalidArgumentError(BuildloomError, TypeError):
    """A public operation received an argument of the wrong type or shape."""
