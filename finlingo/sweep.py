"""DOM text sweep — best-effort translation of text the message catalog does not cover.

The sweep is independent of the rendering technology.  An adapter hands it
the rendered text as ``TextNode(location, text, kind)`` items and receives
``(location, translated)`` rewrites back::

    sweep = DomSweep('hi', EndpointClient(base_url), StorageSweepCache(storage))
    report = await sweep.run(adapter.nodes(), adapter.apply)

One run goes Idle -> Scanning -> Diffing -> Translating -> Applying -> Idle:

* Scanning keeps visible, non-empty strings under the length ceiling that are
  not just digits, punctuation or currency (``"₹1,234.56"``, ``"12:30 PM"``).
* Identical strings are grouped; one request rewrites every location.
* Strings already in the per-locale cache are applied without a request.
* At most ``batch_limit`` novel strings are translated per run, one after the
  other; the rest wait for a later sweep.
* A failed string is logged and skipped.  The cache is saved once at the end.
"""

import json
import logging
import re
from collections.abc import Callable, Hashable, Iterable, MutableMapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from finlingo.config import settings
from finlingo.fallback import Requester
from finlingo.util import short_hash

logger = logging.getLogger("finlingo.sweep")

DEFAULT_BATCH_LIMIT = 60
DEFAULT_MAX_TEXT_LENGTH = 300

_SYMBOLS_ONLY = re.compile(r"[-–—\d\s:,.%₹$()]+")
_CLOCK_SUFFIX = re.compile(r"\s*[AaPp]\.?[Mm]\.?$")
_DIGIT = re.compile(r"\d")


def is_trivial(text: str) -> bool:
    """True for strings made only of digits, separators and currency signs."""
    core = _CLOCK_SUFFIX.sub("", text) if _DIGIT.search(text) else text
    return bool(_SYMBOLS_ONLY.fullmatch(core))


def is_translatable(text: str | None, max_length: int = DEFAULT_MAX_TEXT_LENGTH) -> bool:
    if not text:
        return False
    text = text.strip()
    if not text or len(text) > max_length:
        return False
    return not is_trivial(text)


def text_key(text: str) -> str:
    return f"dom.{short_hash(text)}"


class SweepState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    DIFFING = "diffing"
    TRANSLATING = "translating"
    APPLYING = "applying"


@dataclass(frozen=True)
class TextNode:
    location: Hashable
    text: str
    kind: str = "text"  # "text" | "placeholder"


@dataclass
class SweepReport:
    scanned: int = 0
    distinct: int = 0
    cached: int = 0
    requested: int = 0
    translated: int = 0
    failed: int = 0
    deferred: int = 0
    rewrites: list[tuple[Hashable, str]] = field(default_factory=list)


class SweepCache(Protocol):
    def load(self, locale: str) -> dict[str, str]: ...

    def save(self, locale: str, entries: dict[str, str]) -> None: ...


class StorageSweepCache:
    """Per-locale cache kept as a JSON string in a key/value storage.

    ``storage`` is anything dict-like that outlives the page: NiceGUI's
    ``app.storage.user``, a plain dict in tests.
    """

    def __init__(self, storage: MutableMapping[str, Any], prefix: str = "dom-trans-") -> None:
        self.storage = storage
        self.prefix = prefix

    def key(self, locale: str) -> str:
        return f"{self.prefix}{locale}"

    def load(self, locale: str) -> dict[str, str]:
        raw = self.storage.get(self.key(locale))
        if not raw:
            return {}
        try:
            data = json.loads(raw) if isinstance(raw, str) else raw
        except ValueError:
            logger.warning("Discarding malformed sweep cache for %s", locale)
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def save(self, locale: str, entries: dict[str, str]) -> None:
        self.storage[self.key(locale)] = json.dumps(entries, ensure_ascii=False)


class DomSweep:
    def __init__(
        self,
        locale: str,
        translate: Requester,
        cache: SweepCache,
        *,
        batch_limit: int | None = None,
        max_text_length: int | None = None,
        default_locale: str | None = None,
    ) -> None:
        self.locale = locale
        self.translate = translate
        self.cache = cache
        self.batch_limit = (
            batch_limit if batch_limit is not None
            else settings.get_int("DOM_SWEEP_BATCH_LIMIT", DEFAULT_BATCH_LIMIT)
        )
        self.max_text_length = (
            max_text_length if max_text_length is not None
            else settings.get_int("DOM_SWEEP_MAX_TEXT_LENGTH", DEFAULT_MAX_TEXT_LENGTH)
        )
        self.default_locale = default_locale or settings.default_locale
        self.state = SweepState.IDLE

    @property
    def enabled(self) -> bool:
        return bool(self.locale) and self.locale != self.default_locale

    def scan(self, nodes: Iterable[TextNode]) -> dict[str, list[Hashable]]:
        """Group the locations of every translatable string, in first-seen order."""
        groups: dict[str, list[Hashable]] = {}
        for node in nodes:
            if not is_translatable(node.text, self.max_text_length):
                continue
            groups.setdefault(node.text.strip(), []).append(node.location)
        return groups

    async def run(
        self,
        nodes: Iterable[TextNode],
        apply: Callable[[Hashable, str], None] | None = None,
    ) -> SweepReport:
        report = SweepReport()
        if not self.enabled:
            return report
        if self.state is not SweepState.IDLE:
            logger.warning("Sweep for %s already running (%s); skipping", self.locale, self.state.value)
            return report

        try:
            self.state = SweepState.SCANNING
            groups = self.scan(nodes)
            report.scanned = sum(len(locations) for locations in groups.values())
            report.distinct = len(groups)

            self.state = SweepState.DIFFING
            entries = self.cache.load(self.locale)
            novel = [text for text in groups if text not in entries]
            known = [text for text in groups if text in entries]
            report.cached = len(known)

            self.state = SweepState.APPLYING
            for text in known:
                self._rewrite(groups[text], entries[text], apply, report)

            batch = novel[:self.batch_limit]
            report.deferred = len(novel) - len(batch)
            if not batch:
                return report

            for text in batch:
                self.state = SweepState.TRANSLATING
                report.requested += 1
                try:
                    translated = await self.translate(text_key(text), text, self.locale)
                except Exception as exc:
                    logger.error("Dom translate error for %r: %s", text, exc)
                    report.failed += 1
                    continue
                if not translated:
                    logger.error("Dom translate returned nothing for %r", text)
                    report.failed += 1
                    continue
                report.translated += 1
                entries[text] = translated
                self.state = SweepState.APPLYING
                self._rewrite(groups[text], translated, apply, report)

            self._save(entries)
            return report
        finally:
            self.state = SweepState.IDLE

    def _rewrite(
        self,
        locations: list[Hashable],
        translated: str,
        apply: Callable[[Hashable, str], None] | None,
        report: SweepReport,
    ) -> None:
        for location in locations:
            if apply is not None:
                try:
                    apply(location, translated)
                except Exception as exc:
                    logger.warning("Could not rewrite %r: %s", location, exc)
                    continue
            report.rewrites.append((location, translated))

    def _save(self, entries: dict[str, str]) -> None:
        try:
            self.cache.save(self.locale, entries)
        except Exception as exc:
            logger.error("Failed to save sweep cache for %s: %s", self.locale, exc)
