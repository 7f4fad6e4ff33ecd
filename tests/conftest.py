import json
from unittest.mock import AsyncMock

import pytest
from starlette.testclient import TestClient

from finlingo.catalog import Localizer, MessageCatalog
from finlingo.main import create_app
from finlingo.overlay import TranslationCacheStore


EN_MESSAGES = {
    "common": {"home": "Home", "markets": "Markets"},
    "ai": {
        "chatTitle": "AI Financial Assistant",
        "chatSubtitle": "Ask anything about your spending",
    },
    "dashboard": {"greeting": "Welcome back, {name}"},
}

HI_MESSAGES = {
    "common": {"home": "होम", "markets": "बाज़ार"},
}


@pytest.fixture
def messages_dir(tmp_path):
    directory = tmp_path / "messages"
    directory.mkdir()
    (directory / "en.json").write_text(json.dumps(EN_MESSAGES), encoding="utf-8")
    (directory / "hi.json").write_text(json.dumps(HI_MESSAGES, ensure_ascii=False), encoding="utf-8")
    return directory


@pytest.fixture
def store(tmp_path):
    return TranslationCacheStore(tmp_path / "generated")


@pytest.fixture
def catalog(messages_dir):
    return MessageCatalog(messages_dir, default_locale="en")


@pytest.fixture
def translate():
    return AsyncMock(return_value="अनुवाद")


@pytest.fixture
def localizer(catalog, store):
    return Localizer(catalog, store)


@pytest.fixture
def client(localizer, translate):
    return TestClient(create_app(localizer=localizer, translate=translate, serve_static=False))
