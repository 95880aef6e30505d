"""Custom exceptions for the Pinup routing layer.

These exceptions make it clear which part of the layer failed, rather than
raising a generic Exception from controller setup or the request pipeline.
"""


class PinupError(Exception):
    """Base exception for all Pinup operations."""
    pass


class ConfigError(PinupError):
    """Configuration is missing or still holds a placeholder value."""
    pass


class ControllerError(PinupError):
    """A class used as a controller (or controller parent) is not a PinupController."""
    pass


class AuthDisabledError(PinupError):
    """JWT auth was requested but no secret is configured."""
    pass
