"""Catalog domain exceptions."""

from mediascope.core.domain.exceptions import ConfigurationError


class InvalidTimeoutError(ConfigurationError):
    """Raised when a per-source timeout is not a positive duration."""

    error_code = "INVALID_SOURCE_TIMEOUT"

    def __init__(self, timeout_ms: int):
        super().__init__(
            f"Per-source timeout must be a positive duration, got {timeout_ms}ms"
        )
        self.timeout_ms = timeout_ms


class SiteConfigError(ConfigurationError):
    """Raised when the site configuration file cannot be used."""

    error_code = "SITE_CONFIG_ERROR"


class MalformedSourceResponseError(ValueError):
    """Upstream payload does not have the expected shape."""
