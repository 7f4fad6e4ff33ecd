import asyncio
from unittest.mock import AsyncMock

import pytest

from finlingo.fallback import FallbackResolver

SOURCE = {"ai.chatTitle": "AI Financial Assistant", "common.home": "Home"}


def _resolver(store, locale="hi", requester=None):
    return FallbackResolver(locale, SOURCE, store, requester, default_locale="en")


class TestResolve:
    @pytest.mark.asyncio
    async def test_generated_value_first(self, store):
        store.set("hi", "ai.chatTitle", "सहायक")
        requester = AsyncMock()
        resolver = _resolver(store, requester=requester)
        assert resolver.resolve("chatTitle", namespace="ai") == "सहायक"
        await resolver.drain()
        requester.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_source_text_second(self, store):
        requester = AsyncMock(return_value="सहायक")
        resolver = _resolver(store, requester=requester)
        assert resolver.resolve("chatTitle", namespace="ai") == "AI Financial Assistant"
        await resolver.drain()
        requester.assert_awaited_once_with("ai.chatTitle", "AI Financial Assistant", "hi")

    @pytest.mark.asyncio
    async def test_explicit_source_text(self, store):
        requester = AsyncMock(return_value="x")
        resolver = _resolver(store, requester=requester)
        assert resolver.resolve("newKey", namespace="ai", source_text="Brand new") == "Brand new"
        await resolver.drain()
        requester.assert_awaited_once_with("ai.newKey", "Brand new", "hi")

    @pytest.mark.asyncio
    async def test_key_last_and_no_request(self, store):
        requester = AsyncMock()
        resolver = _resolver(store, requester=requester)
        assert resolver.resolve("unknown", namespace="markets") == "markets.unknown"
        await resolver.drain()
        requester.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_default_locale_never_requests(self, store):
        requester = AsyncMock()
        resolver = _resolver(store, locale="en", requester=requester)
        assert resolver.resolve("chatTitle", namespace="ai") == "AI Financial Assistant"
        await resolver.drain()
        requester.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_does_not_wait_for_translation(self, store):
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow(key, text, locale):
            started.set()
            await release.wait()
            return "late"

        resolver = _resolver(store, requester=slow)
        assert resolver.resolve("chatTitle", namespace="ai") == "AI Financial Assistant"
        assert resolver.pending == 1
        await started.wait()
        release.set()
        await resolver.drain()
        assert resolver.pending == 0

    @pytest.mark.asyncio
    async def test_requester_failure_is_swallowed(self, store):
        requester = AsyncMock(side_effect=RuntimeError("backend down"))
        resolver = _resolver(store, requester=requester)
        assert resolver.resolve("home", namespace="common") == "Home"
        await resolver.drain()
        requester.assert_awaited_once()
        assert store.get("hi") == {}

    @pytest.mark.asyncio
    async def test_redundant_calls_tolerated(self, store):
        requester = AsyncMock(return_value="होम")
        resolver = _resolver(store, requester=requester)
        for _ in range(3):
            assert resolver.resolve("common.home") == "Home"
        await resolver.drain()
        assert requester.await_count == 3

    def test_without_event_loop(self, store):
        requester = AsyncMock()
        resolver = _resolver(store, requester=requester)
        assert resolver.resolve("common.home") == "Home"
        assert resolver.pending == 0
        requester.assert_not_called()

    def test_without_requester(self, store):
        resolver = _resolver(store)
        assert resolver.resolve("common.home") == "Home"


class TestResolveNow:
    @pytest.mark.asyncio
    async def test_returns_translation(self, store):
        resolver = _resolver(store, requester=AsyncMock(return_value="होम"))
        assert await resolver.resolve_now("home", namespace="common") == "होम"

    @pytest.mark.asyncio
    async def test_falls_back_on_error(self, store):
        resolver = _resolver(store, requester=AsyncMock(side_effect=RuntimeError("boom")))
        assert await resolver.resolve_now("home", namespace="common") == "Home"

    @pytest.mark.asyncio
    async def test_uses_generated_value(self, store):
        store.set("hi", "common.home", "होम")
        requester = AsyncMock()
        resolver = _resolver(store, requester=requester)
        assert await resolver.resolve_now("common.home") == "होम"
        requester.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_default_locale(self, store):
        requester = AsyncMock()
        resolver = _resolver(store, locale="en", requester=requester)
        assert await resolver.resolve_now("common.home") == "Home"
        requester.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_key(self, store):
        requester = AsyncMock()
        resolver = _resolver(store, requester=requester)
        assert await resolver.resolve_now("x.y") == "x.y"
        requester.assert_not_awaited()
