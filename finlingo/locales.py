"""Supported locales and locale resolution helpers."""

from finlingo.config import settings

LOCALE_NAMES: dict[str, str] = {
    "en": "English",
    "hi": "हिन्दी",
    "kn": "ಕನ್ನಡ",
}

# Language names used in translation prompts
LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "hi": "Hindi",
    "kn": "Kannada",
}

SUPPORTED_LOCALES: tuple[str, ...] = tuple(LOCALE_NAMES)

PREFERRED_LOCALE_COOKIE = "preferred-locale"


def default_locale() -> str:
    return settings.default_locale


def is_supported(locale: str | None) -> bool:
    return bool(locale) and locale in SUPPORTED_LOCALES


def path_locale(path: str) -> str | None:
    """Return the locale prefix of a URL path, if it is a supported one."""
    segment = path.lstrip("/").split("/", 1)[0]
    return segment if is_supported(segment) else None


def resolve_locale(path: str, cookie: str | None = None) -> str:
    """Path prefix wins for the current request, then the preference cookie."""
    locale = path_locale(path)
    if locale:
        return locale
    if is_supported(cookie):
        return cookie
    return default_locale()


def preferred_redirect(path: str, cookie: str | None) -> str | None:
    """Where to send a bare ``/`` request when a preferred locale is known."""
    if path != "/" or not is_supported(cookie):
        return None
    return f"/{cookie}"


def switch_locale_path(path: str, current: str, new: str) -> str:
    """Re-prefix ``path`` with ``new`` (``/hi/markets`` -> ``/kn/markets``)."""
    rest = path
    if path == f"/{current}" or path.startswith(f"/{current}/"):
        rest = path[len(current) + 1:]
    if not rest or rest == "/":
        rest = ""
    return f"/{new}{rest}"
