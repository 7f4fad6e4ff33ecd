"""Message catalogs — reads ``static/messages/<locale>.json``.

The base catalogs are source-controlled and immutable at runtime.  The
effective catalog for a request is the base catalog of the locale overlaid by
the generated translations of ``finlingo.overlay`` (overlay wins).

Usage::

    from finlingo.catalog import Localizer

    localizer = Localizer(catalog, store, requester)
    t = localizer.translator('hi', namespace='ai')

    t('chatTitle')                        # "एआई वित्तीय सहायक"
    t('greeting', name='Asha')            # "नमस्ते Asha"

Lookups that miss are answered by the locale's ``FallbackResolver``.
"""

import json
import logging
from pathlib import Path
from typing import Any

from finlingo.fallback import FallbackResolver, Requester
from finlingo.overlay import TranslationCacheStore
from finlingo.util import expand_messages, flatten_messages

logger = logging.getLogger("finlingo.catalog")


def _load_json(path: Path) -> dict[str, Any] | None:
    if not path.is_file():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as exc:
        logger.error("Error reading messages file at %s: %s", path, exc)
        return None


class MessageCatalog:
    """Base message files, flattened to dotted keys and memoized per locale."""

    def __init__(self, directory: Path | str, default_locale: str = "en") -> None:
        self.directory = Path(directory)
        self.default_locale = default_locale
        self._flat: dict[str, dict[str, str]] = {}

    def messages(self, locale: str) -> dict[str, str]:
        if locale in self._flat:
            return self._flat[locale]
        raw = _load_json(self.directory / f"{locale}.json")
        if not isinstance(raw, dict):
            # every lookup misses and goes through the fallback resolver
            logger.warning("No usable messages for %s", locale)
            raw = {}
        flat = flatten_messages(raw)
        self._flat[locale] = flat
        return flat

    def source(self) -> dict[str, str]:
        return self.messages(self.default_locale)


class Translator:
    """Key→string lookup with ``.format()`` interpolation and fallback."""

    def __init__(
        self,
        locale: str,
        messages: dict[str, str],
        resolver: FallbackResolver | None = None,
        namespace: str | None = None,
    ) -> None:
        self.locale = locale
        self.messages = messages
        self.resolver = resolver
        self.namespace = namespace

    def scoped(self, namespace: str) -> "Translator":
        if self.namespace:
            namespace = f"{self.namespace}.{namespace}"
        return Translator(self.locale, self.messages, self.resolver, namespace)

    def __call__(self, key: str, **kwargs: Any) -> str:
        full_key = f"{self.namespace}.{key}" if self.namespace else key
        template = self.messages.get(full_key)
        if template is None:
            if self.resolver is None:
                template = full_key
            else:
                template = self.resolver.resolve(key, namespace=self.namespace)
        if not kwargs:
            return template
        try:
            return template.format(**kwargs)
        except (KeyError, IndexError, ValueError):
            logger.warning("Bad placeholders in %s for %s: %r", full_key, self.locale, template)
            return template


class Localizer:
    """Ties the base catalog, the generated overlay and the fallback resolvers."""

    def __init__(
        self,
        catalog: MessageCatalog,
        store: TranslationCacheStore,
        requester: Requester | None = None,
    ) -> None:
        self.catalog = catalog
        self.store = store
        self.requester = requester
        self._resolvers: dict[str, FallbackResolver] = {}

    @property
    def default_locale(self) -> str:
        return self.catalog.default_locale

    def effective(self, locale: str) -> dict[str, str]:
        """Base catalog overlaid by generated translations, computed fresh."""
        merged = dict(self.catalog.messages(locale))
        if locale != self.default_locale:
            merged.update(self.store.flat(locale))
        return merged

    def effective_nested(self, locale: str) -> dict[str, Any]:
        return expand_messages(self.effective(locale))

    def resolver(self, locale: str) -> FallbackResolver:
        resolver = self._resolvers.get(locale)
        if resolver is None:
            resolver = FallbackResolver(
                locale,
                self.catalog.source(),
                self.store,
                self.requester,
                default_locale=self.default_locale,
            )
            self._resolvers[locale] = resolver
        return resolver

    def translator(self, locale: str, namespace: str | None = None) -> Translator:
        return Translator(locale, self.effective(locale), self.resolver(locale), namespace)

    async def drain(self) -> None:
        for resolver in list(self._resolvers.values()):
            await resolver.drain()
