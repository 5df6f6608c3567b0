class ConfigError(RuntimeError):
    """Configuration validation or loading error."""


class AdapterError(RuntimeError):
    """Raised for platform client initialization failures."""


class WebhookError(ValueError):
    """Raised for malformed or unauthenticated webhook deliveries."""
