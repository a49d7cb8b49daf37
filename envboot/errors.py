from __future__ import annotations


class EnvbootError(Exception):
    """Base class for fatal bootstrapper errors."""


class UnsupportedPlatformError(EnvbootError):
    pass


class ProfileError(EnvbootError):
    pass


class ConfigError(EnvbootError):
    pass
