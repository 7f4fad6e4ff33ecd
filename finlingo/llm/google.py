import itertools
import logging
import re

import httpx

from finlingo.config import settings
from finlingo.errors import BackendTranslationFailure
from finlingo.llm.base import TranslationBackend
from finlingo.locales import LANGUAGE_NAMES

logger = logging.getLogger("finlingo.llm.google")

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_MODEL = "gemini-2.5-flash"

TRANSLATE_PROMPT = (
    "Translate the following English text to {language}. Return ONLY the translated text "
    "without quotes, explanations, or extra commentary. Keep the meaning accurate and natural.\n\n"
    "Text: {text}"
)

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")
_QUOTE_PAIRS = (('"', '"'), ("'", "'"), ("“", "”"), ("«", "»"))


def clean_output(raw: str) -> str:
    text = _FENCE_RE.sub("", raw.strip()).strip()
    for left, right in _QUOTE_PAIRS:
        if len(text) >= 2 and text.startswith(left) and text.endswith(right):
            text = text[1:-1].strip()
    return text


class GeminiTranslator(TranslationBackend):
    provider_name = "Google"
    api_key_env = "GEMINI_API_KEY"

    def __init__(self) -> None:
        self._counter = itertools.count()

    def next_api_key(self) -> str:
        """Round-robin over every configured Gemini key."""
        keys = settings.gemini_api_keys()
        if not keys:
            raise BackendTranslationFailure(
                f"{self.provider_name} API key not found in {self.api_key_env}"
            )
        return keys[next(self._counter) % len(keys)]

    def auth_params(self, api_key: str) -> dict[str, str]:
        return {"key": api_key}

    async def translate(self, text: str, target_locale: str) -> str:
        api_key = self.next_api_key()
        language = LANGUAGE_NAMES.get(target_locale, target_locale)
        model = settings.get("GEMINI_MODEL") or DEFAULT_MODEL

        try:
            async with self.make_client() as client:
                response = await client.post(
                    GEMINI_URL.format(model=model),
                    params=self.auth_params(api_key),
                    headers={"Content-Type": "application/json"},
                    json={
                        "contents": [{"parts": [{"text": TRANSLATE_PROMPT.format(language=language, text=text)}]}],
                    },
                )
        except httpx.HTTPError as exc:
            raise BackendTranslationFailure(f"{self.provider_name} request failed: {exc!r}") from exc

        self.raise_on_error(response)

        payload = response.json()
        parts = []
        for candidate in payload.get("candidates") or []:
            for part in ((candidate.get("content") or {}).get("parts")) or []:
                if part.get("text"):
                    parts.append(part["text"])
        translated = clean_output("".join(parts))
        if not translated:
            raise BackendTranslationFailure(f"{self.provider_name} returned no translation")

        logger.info('Translated "%s" to %s: "%s"', text[:50], language, translated[:50])
        return translated


# Module-level singleton
_backend = GeminiTranslator()


async def translate_text(text: str, target_locale: str) -> str:
    return await _backend.translate(text, target_locale)
