"""Locale preference persistence — client storage plus the ``preferred-locale`` cookie.

The cookie lets server-side routing redirect ``/`` to ``/<preferred>`` without
a client round trip; the storage entry is what client code reads back.
"""

from collections.abc import MutableMapping
from typing import Any

from starlette.responses import Response

from finlingo.locales import PREFERRED_LOCALE_COOKIE, is_supported

COOKIE_MAX_AGE = 31536000  # one year
STORAGE_KEY = PREFERRED_LOCALE_COOKIE


def cookie_string(locale: str) -> str:
    """``document.cookie`` form of the preference cookie."""
    return f"{PREFERRED_LOCALE_COOKIE}={locale}; path=/; max-age={COOKIE_MAX_AGE}; SameSite=Lax"


def set_locale_cookie(response: Response, locale: str) -> None:
    response.set_cookie(
        PREFERRED_LOCALE_COOKIE,
        locale,
        max_age=COOKIE_MAX_AGE,
        path="/",
        samesite="lax",
    )


def persist_locale(
    locale: str,
    storage: MutableMapping[str, Any],
    response: Response | None = None,
) -> bool:
    """Record ``locale`` in ``storage`` (and on ``response`` as a cookie).

    Returns True when the stored preference changed.
    """
    if not is_supported(locale):
        raise ValueError(f"unsupported locale: {locale}")
    changed = storage.get(STORAGE_KEY) != locale
    if changed:
        storage[STORAGE_KEY] = locale
    if response is not None:
        set_locale_cookie(response, locale)
    return changed
