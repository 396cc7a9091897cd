"""Real-time KMB bus arrival estimates."""

from kmb_eta.services.kmb_client import KMBClient
from kmb_eta.services.kmb_dto import (
    Eta,
    Language,
    Route,
    Secret,
    Stop,
    StopRoute,
    Variant,
)
from kmb_eta.services.kmb_errors import (
    EtaPayloadError,
    KMBServiceError,
    TransportError,
    UnsupportedLanguageError,
)
from kmb_eta.services.kmb_secret import SecretProvider, StaticSecretProvider

__all__ = [
    "KMBClient",
    "Eta",
    "Language",
    "Route",
    "Secret",
    "Stop",
    "StopRoute",
    "Variant",
    "SecretProvider",
    "StaticSecretProvider",
    "KMBServiceError",
    "TransportError",
    "UnsupportedLanguageError",
    "EtaPayloadError",
]
