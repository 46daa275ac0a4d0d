"""Domain-specific exceptions for Ventas Core.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from VentasCoreError for easy catching.
"""


class VentasCoreError(Exception):
    """Base exception for all Ventas Core errors.

    Users can catch this exception to handle any error raised by the package.
    The grouping engine itself never raises on malformed row contents; these
    are raised by configuration and input adapters only.
    """

    pass


class ConfigError(VentasCoreError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided
    - Unknown configuration keys are passed to EngineConfig.from_mapping
    """

    pass


class DataQualityError(VentasCoreError):
    """Raised when input data cannot be turned into line records.

    This exception is raised when:
    - The value column is missing from an input DataFrame
    - The date column is missing from an input DataFrame
    """

    pass
