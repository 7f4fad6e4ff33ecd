"""Base class for text-completion backends used for translation."""

from abc import ABC, abstractmethod

import httpx

from finlingo.config import settings
from finlingo.errors import BackendTranslationFailure


class TranslationBackend(ABC):
    """Shared infrastructure for all translation backends."""

    provider_name: str  # "Google"
    api_key_env: str    # "GEMINI_API_KEY"
    default_timeout: float = 15.0

    def make_client(self, timeout: float | None = None) -> httpx.AsyncClient:
        """Create an httpx async client with the backend's default timeout."""
        return httpx.AsyncClient(timeout=timeout or settings.get_float("TRANSLATE_TIMEOUT", self.default_timeout))

    def auth_params(self, api_key: str) -> dict[str, str]:
        """Return query params for auth. Default: empty. Override per provider."""
        return {}

    def raise_on_error(self, response: httpx.Response) -> None:
        """Raise BackendTranslationFailure if response indicates an error."""
        if response.status_code < 400:
            return
        try:
            payload = response.json()
        except ValueError:
            raise BackendTranslationFailure(
                f"{self.provider_name} returned an unexpected error ({response.status_code})."
            )

        error_obj = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error_obj, dict) and error_obj.get("message"):
            raise BackendTranslationFailure(f"{self.provider_name}: {error_obj['message']}")

        raise BackendTranslationFailure(
            f"{self.provider_name} error ({response.status_code}). Please try again."
        )

    @abstractmethod
    async def translate(self, text: str, target_locale: str) -> str:
        """Return ``text`` translated into ``target_locale`` or raise."""
