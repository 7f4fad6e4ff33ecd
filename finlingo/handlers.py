"""Core handler functions — no FastAPI types. Used by the REST routes and in-process callers."""

import logging

from finlingo.catalog import Localizer
from finlingo.errors import BackendTranslationFailure, MissingParameter, UnsupportedLocale
from finlingo.llm import TranslateFn
from finlingo.locales import LOCALE_NAMES, default_locale, is_supported
from finlingo.overlay import TranslationCacheStore

logger = logging.getLogger("finlingo.handlers")


async def handle_translate_fallback(
    key: str | None,
    text: str | None,
    target_locale: str | None,
    store: TranslationCacheStore,
    translate: TranslateFn,
) -> dict:
    params = {"key": key, "text": text, "targetLocale": target_locale}
    missing = [name for name, value in params.items() if not value or not value.strip()]
    if missing:
        raise MissingParameter(missing)
    if not is_supported(target_locale):
        raise UnsupportedLocale(target_locale)

    if target_locale == default_locale():
        return {"ok": True, "key": key, "translated": text}

    try:
        translated = await translate(text, target_locale)
    except BackendTranslationFailure as exc:
        logger.error("translate-fallback error for %s (%s): %s", key, target_locale, exc)
        raise
    except Exception as exc:
        logger.exception("translate-fallback error for %s (%s)", key, target_locale)
        raise BackendTranslationFailure(str(exc) or exc.__class__.__name__) from exc

    if not isinstance(translated, str) or not translated.strip():
        logger.error("translate-fallback got empty output for %s (%s)", key, target_locale)
        raise BackendTranslationFailure("backend returned no translation")

    translated = translated.strip()
    store.set(target_locale, key, translated)
    return {"ok": True, "key": key, "translated": translated}


async def handle_messages(locale: str, localizer: Localizer) -> dict:
    if not is_supported(locale):
        raise UnsupportedLocale(locale)
    return {"locale": locale, "messages": localizer.effective_nested(locale)}


async def handle_locales() -> dict:
    return {
        "default": default_locale(),
        "locales": [{"code": code, "name": name} for code, name in LOCALE_NAMES.items()],
    }


class LocalRequester:
    """Sends fallback requests straight to the endpoint logic, in-process."""

    def __init__(self, store: TranslationCacheStore, translate: TranslateFn) -> None:
        self.store = store
        self.translate = translate

    async def __call__(self, key: str, text: str, target_locale: str) -> str:
        result = await handle_translate_fallback(key, text, target_locale, self.store, self.translate)
        return result["translated"]
