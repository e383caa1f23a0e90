class ConfigurationError(ValueError):
    """Raised when simulator parameters are out of range."""
