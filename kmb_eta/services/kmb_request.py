"""Request assembly and signing for the ``geteta`` action."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote_plus, urlencode

from kmb_eta.services.kmb_dto import Language, StopRoute
from kmb_eta.services.kmb_errors import UnsupportedLanguageError
from kmb_eta.services.kmb_secret import SecretProvider

ETA_ACTION = "geteta"

LANGUAGE_MAP: dict[str, str] = {
    Language.EN.value: "en",
    Language.ZH_HANS.value: "sc",
    Language.ZH_HANT.value: "tc",
}

SUPPORTED_METHODS = ("GET", "POST")


def form_quote(value: str, safe: str = "", encoding=None, errors=None) -> str:
    """Percent-encode like an HTML form: keep ``*`` literal, escape ``~``."""
    return quote_plus(value, safe="*", encoding=encoding, errors=errors).replace(
        "~", "%7E"
    )


def resolve_language(language: Language | str) -> str:
    """Map a client language code to the value the API expects."""
    key = language.value if isinstance(language, Language) else language
    try:
        return LANGUAGE_MAP[key]
    except (KeyError, TypeError):
        raise UnsupportedLanguageError(
            f"Unsupported language '{language}'. "
            f"Expected one of: {', '.join(LANGUAGE_MAP)}."
        ) from None


@dataclass(frozen=True)
class EtaRequest:
    """Unsigned ETA request for one stop route.

    ``query`` holds the canonical parameters in wire order, minus ``action``
    which always travels on the URL.
    """

    url: str
    query: dict[str, str]
    secret_provider: SecretProvider

    @property
    def action_url(self) -> str:
        separator = "&" if "?" in self.url else "?"
        return f"{self.url}{separator}{urlencode({'action': ETA_ACTION})}"

    def prepare(self, method: str) -> tuple[str, dict[str, Any]]:
        """Return the URL and signed parameters to send with ``method``."""
        signed = self.sign(method)
        if method.upper() == "GET":
            return self.url, {"action": ETA_ACTION, **signed}
        return self.action_url, signed

    def sign(self, method: str) -> dict[str, Any]:
        """Return the signed parameters for ``method``.

        GET yields the query merged with ``apiKey``/``ctr``. POST signs the
        same way first, then asks the provider for a second credential keyed
        by that exact query string and yields it as the ``d``/``ctr`` body.
        """
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method '{method}'.")

        secret = self.secret_provider.get_secret()
        signed: dict[str, Any] = {
            **self.query,
            "apiKey": secret.api_key,
            "ctr": str(secret.ctr),
        }
        if method == "GET":
            return signed

        body_secret = self.secret_provider.get_secret(
            f"?{urlencode(signed, quote_via=form_quote)}"
        )
        return {"d": body_secret.api_key, "ctr": body_secret.ctr}


def build_request(
    stop_route: StopRoute,
    language: Language | str,
    secret_provider: SecretProvider,
    url: str,
) -> EtaRequest:
    """Assemble the canonical ETA query for ``stop_route``."""
    lang = resolve_language(language)
    variant = stop_route.variant
    query = {
        "lang": lang,
        "route": variant.route.number,
        "bound": str(variant.route.bound),
        "stop_seq": str(stop_route.sequence),
        "service_type": str(variant.service_type),
        "vendor_id": secret_provider.vendor_id,
    }
    return EtaRequest(url=url, query=query, secret_provider=secret_provider)


__all__ = [
    "ETA_ACTION",
    "LANGUAGE_MAP",
    "SUPPORTED_METHODS",
    "EtaRequest",
    "build_request",
    "resolve_language",
]
