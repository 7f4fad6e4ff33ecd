"""Generated translation overlay — per-locale JSON files plus an in-process cache.

One document per target locale lives under the generated directory
(``static/messages/generated/<locale>.json`` by default).  Dotted keys are
stored as nested objects::

    store = TranslationCacheStore(settings.generated_dir)
    store.set("hi", "ai.chatTitle", "एआई वित्तीय सहायक")
    store.get("hi")          # {"ai": {"chatTitle": "एआई वित्तीय सहायक"}}

Writes are whole-file rewrites, last writer wins.  Failures to read or write
the files are logged and never raised: serving translations must keep working
from memory when the disk does not cooperate.
"""

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from finlingo.errors import CacheLoadFailure, PersistenceFailure
from finlingo.util import flatten_messages, get_nested, set_nested

logger = logging.getLogger("finlingo.overlay")


class TranslationCacheStore:
    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        self._cache: dict[str, dict[str, Any]] = {}
        self._unreadable: set[str] = set()
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Cannot create generated messages dir %s: %s", self.directory, exc)

    def path_for(self, locale: str) -> Path:
        return self.directory / f"{locale}.json"

    def get(self, locale: str) -> dict[str, Any]:
        """Return the overlay for ``locale``, loading it on first access.

        A malformed file counts as empty and is replaced by the next write.
        A file that exists but cannot be read is retried on every access;
        until then new values are kept in memory only, so the file on disk
        is never overwritten with a partial overlay.
        """
        cached = self._cache.get(locale)
        if cached is not None and locale not in self._unreadable:
            return cached
        try:
            messages = self._read(locale)
        except CacheLoadFailure as exc:
            if exc.retryable:
                logger.warning("Generated messages unreadable, holding writes in memory: %s", exc)
                self._unreadable.add(locale)
                return self._cache.setdefault(locale, {})
            logger.error("Failed to read generated messages: %s", exc)
            messages = {}

        if locale in self._unreadable:
            self._unreadable.discard(locale)
            changed = False
            for key, value in flatten_messages(cached or {}).items():
                if get_nested(messages, key) != value:
                    set_nested(messages, key, value)
                    changed = True
            if changed:
                self._persist(locale, messages)
        self._cache[locale] = messages
        return messages

    def lookup(self, locale: str, key: str) -> str | None:
        value = get_nested(self.get(locale), key)
        return value if isinstance(value, str) else None

    def flat(self, locale: str) -> dict[str, str]:
        return flatten_messages(self.get(locale))

    def set(self, locale: str, key: str, value: str) -> None:
        messages = self.get(locale)
        if get_nested(messages, key) == value:
            return
        set_nested(messages, key, value)
        self._persist(locale, messages)

    def merge(self, locale: str, new_messages: Mapping[str, Any]) -> None:
        """Merge many entries (nested or dotted keys) and persist once."""
        messages = self.get(locale)
        changed = False
        for key, value in flatten_messages(new_messages).items():
            if get_nested(messages, key) != value:
                set_nested(messages, key, value)
                changed = True
        if changed:
            self._persist(locale, messages)

    def _read(self, locale: str) -> dict[str, Any]:
        path = self.path_for(locale)
        try:
            if not path.is_file():
                return {}
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise CacheLoadFailure(f"{path}: {exc}", retryable=True) from exc
        except ValueError as exc:
            raise CacheLoadFailure(f"{path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CacheLoadFailure(f"{path}: expected a JSON object")
        return data

    def _write(self, locale: str, messages: dict[str, Any]) -> None:
        path = self.path_for(locale)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(messages, f, ensure_ascii=False, indent=2)
        except OSError as exc:
            raise PersistenceFailure(f"{path}: {exc}") from exc

    def _persist(self, locale: str, messages: dict[str, Any]) -> None:
        self._cache[locale] = messages
        if locale in self._unreadable:
            return
        try:
            self._write(locale, messages)
        except PersistenceFailure as exc:
            logger.error("Failed to write generated messages file: %s", exc)
