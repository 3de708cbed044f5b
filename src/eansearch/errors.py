"""Exceptions raised by the ean-search client."""


class EANSearchError(Exception):
    """Base class for every error the client raises."""


class ConfigurationError(EANSearchError):
    """The client configuration is unusable (e.g. missing API token)."""


class TransportError(EANSearchError):
    """The HTTP round trip failed or returned a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(EANSearchError):
    """The response body is not JSON or does not have the expected shape."""


class ServiceError(EANSearchError):
    """The service answered with its own error message."""


class EmptyResponseError(EANSearchError):
    """The service returned neither data nor an error message."""

    def __init__(self, message: str = "No response from API") -> None:
        super().__init__(message)


class EncodingError(EANSearchError):
    """A base64 image payload could not be decoded."""
