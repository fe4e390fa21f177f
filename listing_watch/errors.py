class ListingWatchError(Exception):
    """Base class for every error raised by the ingestion pipeline."""


class ConfigurationError(ListingWatchError):
    pass


class ValidationError(ListingWatchError):
    pass


class InvalidQueryError(ValidationError):
    pass


class InvalidAlertError(ValidationError):
    pass


class SourceError(ListingWatchError):
    retryable = False

    def __init__(self, message: str, source: str = "", status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.source = source
        self.status_code = status_code
        self.context = ""

    def add_context(self, context: str) -> None:
        if not self.context:
            self.context = context

    def __str__(self) -> str:
        if self.context:
            return f"{self.context}: {self.message}"
        return self.message


class SourceUnavailable(SourceError):
    pass


class SourceAuthError(SourceError):
    pass


class SourceQuotaExceeded(SourceError):
    retryable = True


class SourceProtocolError(SourceError):
    pass
