"""Core domain exceptions.

All exceptions raised by core logic inherit from CoreError.
Adapters catch provider-specific errors and re-raise as these.
"""


class CoreError(Exception):
    """Base for all core domain errors."""
    pass


class ValidationError(CoreError):
    """Request data failed validation (e.g. unknown condition type)."""
    pass


class ConfigurationError(CoreError):
    """RAF table or environment configuration is missing or malformed."""
    pass


class ClassifierError(CoreError):
    """External classifier failed or returned an unusable payload."""
    pass
