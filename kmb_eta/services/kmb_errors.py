"""KMB-specific exception definitions."""

from __future__ import annotations


class KMBServiceError(Exception):
    """Base class for failures raised by the KMB ETA client."""


class TransportError(KMBServiceError):
    """Raised when the ETA endpoint cannot be reached or answers with an error."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class UnsupportedLanguageError(KMBServiceError, ValueError):
    """Raised when a language code has no KMB API equivalent."""


class EtaPayloadError(KMBServiceError):
    """Raised when the ETA response body does not have the expected shape."""


__all__ = [
    "KMBServiceError",
    "TransportError",
    "UnsupportedLanguageError",
    "EtaPayloadError",
]
