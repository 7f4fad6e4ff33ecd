from collections.abc import Awaitable, Callable

from finlingo.llm.base import TranslationBackend
from finlingo.llm.google import GeminiTranslator, _backend

# (text, target_locale) -> translated text
TranslateFn = Callable[[str, str], Awaitable[str]]


def default_backend() -> TranslationBackend:
    return _backend


__all__ = ["GeminiTranslator", "TranslateFn", "TranslationBackend", "default_backend"]
