class TransitError(Exception):
    """Base exception for all transit operations errors."""
    pass

class DataSourceUnavailable(TransitError):
    """
    Raised when a simulated external provider times out or returns
    a malformed payload. Callers treat the source as temporarily empty.
    """

    def __init__(self, source: str, reason: str, retryable: bool = True):
        self.source = source
        self.reason = reason
        self.retryable = retryable
        super().__init__(f"Data source '{source}' unavailable: {reason}")

class ConfigurationError(TransitError):
    """Raised when configuration is invalid."""
    pass
