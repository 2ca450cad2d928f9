class RequestDecodeError(Exception):
    """Exception raised when a request document cannot be decoded into workflow state."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot decode '{source}': {reason}")


class ConfigError(ValueError):
    """Exception raised when loomstats.toml holds an invalid value."""

    pass
