"""NiceGUI integration of the DOM text sweep.

Usage inside a page::

    @ui.page('/{locale}')
    async def dashboard(locale: str):
        ...build the page...
        DomTranslator(locale)

After the page is mounted, one sweep walks the page's element tree, collects
label-like texts and input placeholders, and rewrites them in place.  Results
are cached per locale in ``app.storage.user``.
"""

import logging
from collections.abc import Hashable, Iterator
from typing import Any

from nicegui import app, context, ui

from finlingo.client import EndpointClient
from finlingo.config import settings
from finlingo.fallback import Requester
from finlingo.sweep import DomSweep, StorageSweepCache, SweepReport, TextNode

logger = logging.getLogger("finlingo.components.dom_translator")

MOUNT_DELAY = 0.3


class ElementTreeAdapter:
    """Exposes an element tree as ``TextNode`` items and applies rewrites.

    Locations are ``(kind, element id)`` tuples.  Elements with a string
    ``text`` attribute are treated as text nodes; a ``placeholder`` prop is
    treated as a placeholder.  Hidden elements and everything inside them
    are skipped.
    """

    def __init__(self, root: Any) -> None:
        self.root = root
        self._elements: dict[int, Any] = {}

    def _walk(self) -> Iterator[Any]:
        yield self.root
        yield from self.root.descendants()

    def nodes(self) -> list[TextNode]:
        found: list[TextNode] = []
        hidden: set[int] = set()
        self._elements.clear()
        for element in self._walk():
            # pre-order walk: a hidden parent is seen before its children
            if element.id in hidden or not getattr(element, "visible", True):
                hidden.add(element.id)
                hidden.update(child.id for child in element.descendants())
                continue
            self._elements[element.id] = element
            text = getattr(element, "text", None)
            if isinstance(text, str) and text.strip():
                found.append(TextNode(("text", element.id), text, "text"))
            placeholder = element._props.get("placeholder")
            if isinstance(placeholder, str) and placeholder.strip():
                found.append(TextNode(("placeholder", element.id), placeholder, "placeholder"))
        return found

    def apply(self, location: Hashable, translated: str) -> None:
        kind, element_id = location
        element = self._elements[element_id]
        if kind == "text":
            element.set_text(translated)
        else:
            element._props["placeholder"] = translated
            element.update()


def default_requester() -> Requester:
    base_url = settings.get("ENDPOINT_BASE_URL") or "http://127.0.0.1:8080"
    return EndpointClient(base_url)


async def sweep_element_tree(
    locale: str,
    root: Any,
    requester: Requester,
    storage: Any,
) -> SweepReport:
    adapter = ElementTreeAdapter(root)
    sweep = DomSweep(locale, requester, StorageSweepCache(storage))
    report = await sweep.run(adapter.nodes(), adapter.apply)
    logger.debug(
        "Sweep %s: %d distinct, %d cached, %d translated, %d failed, %d deferred",
        locale, report.distinct, report.cached, report.translated, report.failed, report.deferred,
    )
    return report


class DomTranslator:
    """Schedules one sweep of the current page once it is mounted."""

    def __init__(
        self,
        locale: str,
        root: Any = None,
        requester: Requester | None = None,
        storage: Any = None,
    ) -> None:
        self.locale = locale
        self.report: SweepReport | None = None
        if locale == settings.default_locale:
            return
        self._root = root if root is not None else context.client.layout
        self._requester = requester or default_requester()
        self._storage = storage if storage is not None else app.storage.user
        ui.timer(MOUNT_DELAY, self._sweep, once=True)

    async def _sweep(self) -> None:
        self.report = await sweep_element_tree(self.locale, self._root, self._requester, self._storage)
