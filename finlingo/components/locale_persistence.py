"""NiceGUI helpers that remember the user's locale and switch between locales."""

from nicegui import app, ui

from finlingo.locales import LOCALE_NAMES, switch_locale_path
from finlingo.preferences import cookie_string, persist_locale


class LocalePersistence:
    """Stores the active locale in ``app.storage.user`` and the cookie."""

    def __init__(self, locale: str) -> None:
        self.changed = persist_locale(locale, app.storage.user)
        ui.run_javascript(f"document.cookie = {cookie_string(locale)!r};")


class LanguageSwitcher:
    """Locale dropdown; a change persists the choice and reloads under the new prefix."""

    def __init__(self, locale: str, path: str) -> None:
        self.locale = locale
        self.path = path
        self.select = ui.select(
            dict(LOCALE_NAMES),
            value=locale,
            on_change=lambda e: self.switch(e.value),
        ).props("dense outlined")

    def switch(self, new_locale: str) -> None:
        if new_locale == self.locale:
            return
        persist_locale(new_locale, app.storage.user)
        ui.run_javascript(f"document.cookie = {cookie_string(new_locale)!r};")
        ui.navigate.to(switch_locale_path(self.path, self.locale, new_locale))
