"""Fallback resolution for message lookups that miss the effective catalog.

The resolver answers immediately with the best value it has (generated
overlay, then source-language text, then the key itself) and, for non-default
locales, asks for a translation in the background so the next render finds it
in the overlay.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping

from finlingo.overlay import TranslationCacheStore

logger = logging.getLogger("finlingo.fallback")

# (key, text, target_locale) -> translated text
Requester = Callable[[str, str, str], Awaitable[str]]


class FallbackResolver:
    def __init__(
        self,
        locale: str,
        source_messages: Mapping[str, str],
        store: TranslationCacheStore,
        requester: Requester | None,
        default_locale: str = "en",
    ) -> None:
        self.locale = locale
        self.source_messages = source_messages
        self.store = store
        self.requester = requester
        self.default_locale = default_locale
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def resolve(self, key: str, namespace: str | None = None, source_text: str | None = None) -> str:
        full_key = f"{namespace}.{key}" if namespace else key

        if self.locale != self.default_locale:
            generated = self.store.lookup(self.locale, full_key)
            if generated:
                return generated

        source = source_text or self.source_messages.get(full_key)
        if not source:
            return full_key

        if self.locale != self.default_locale and self.requester is not None:
            self._spawn(full_key, source)
        return source

    async def resolve_now(self, key: str, namespace: str | None = None, source_text: str | None = None) -> str:
        """Like :meth:`resolve`, but wait for the translation to arrive."""
        full_key = f"{namespace}.{key}" if namespace else key
        source = source_text or self.source_messages.get(full_key) or full_key
        if self.locale == self.default_locale or self.requester is None:
            return source
        generated = self.store.lookup(self.locale, full_key)
        if generated:
            return generated
        if source == full_key:
            return full_key
        try:
            return await self.requester(full_key, source, self.locale) or source
        except Exception as exc:
            logger.error("Translation error for %s (%s): %s", full_key, self.locale, exc)
            return source

    def _spawn(self, full_key: str, source: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; skipping background translation of %s", full_key)
            return
        task = loop.create_task(self._request(full_key, source))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _request(self, full_key: str, source: str) -> None:
        try:
            await self.requester(full_key, source, self.locale)
        except Exception as exc:
            logger.warning("Background translation of %s to %s failed: %s", full_key, self.locale, exc)

    async def drain(self) -> None:
        """Wait for in-flight background requests (shutdown and tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
