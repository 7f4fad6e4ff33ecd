import json

import pytest
from starlette.testclient import TestClient

from finlingo.errors import BackendTranslationFailure
from finlingo.overlay import TranslationCacheStore


# --- POST /api/translate-fallback ---

class TestTranslateFallback:
    def test_end_to_end(self, client, store, translate):
        translate.return_value = "एआई वित्तीय सहायक"
        resp = client.post("/api/translate-fallback", json={
            "key": "ai.chatTitle",
            "text": "AI Financial Assistant",
            "targetLocale": "hi",
        })
        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "key": "ai.chatTitle", "translated": "एआई वित्तीय सहायक"}
        translate.assert_awaited_once_with("AI Financial Assistant", "hi")
        assert store.get("hi") == {"ai": {"chatTitle": "एआई वित्तीय सहायक"}}
        assert TranslationCacheStore(store.directory).get("hi") == {"ai": {"chatTitle": "एआई वित्तीय सहायक"}}

    @pytest.mark.parametrize("missing", ["key", "text", "targetLocale"])
    def test_missing_parameter(self, client, store, translate, missing):
        body = {"key": "ai.chatTitle", "text": "AI Financial Assistant", "targetLocale": "hi"}
        del body[missing]
        resp = client.post("/api/translate-fallback", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"ok": False, "error": "missing parameters"}
        translate.assert_not_awaited()
        assert store.get("hi") == {}

    def test_blank_parameter(self, client, translate):
        resp = client.post("/api/translate-fallback", json={"key": " ", "text": "x", "targetLocale": "hi"})
        assert resp.status_code == 400
        translate.assert_not_awaited()

    def test_body_not_json(self, client, store, translate):
        resp = client.post(
            "/api/translate-fallback",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"ok": False, "error": "missing parameters"}
        translate.assert_not_awaited()
        assert store.get("hi") == {}

    def test_non_string_field(self, client, translate):
        resp = client.post("/api/translate-fallback", json={"key": 123, "text": "x", "targetLocale": "hi"})
        assert resp.status_code == 400
        assert resp.json() == {"ok": False, "error": "missing parameters"}
        translate.assert_not_awaited()

    def test_unsupported_locale(self, client, translate):
        resp = client.post("/api/translate-fallback", json={"key": "a", "text": "x", "targetLocale": "../etc"})
        assert resp.status_code == 400
        assert resp.json()["ok"] is False
        translate.assert_not_awaited()

    def test_backend_failure_leaves_cache_unchanged(self, client, store, translate):
        store.set("hi", "common.home", "होम")
        before = json.loads(store.path_for("hi").read_text(encoding="utf-8"))
        translate.side_effect = RuntimeError("quota exceeded")
        resp = client.post("/api/translate-fallback", json={
            "key": "ai.chatTitle",
            "text": "AI Financial Assistant",
            "targetLocale": "hi",
        })
        assert resp.status_code == 500
        assert resp.json() == {"ok": False, "error": "quota exceeded"}
        assert store.get("hi") == before
        assert json.loads(store.path_for("hi").read_text(encoding="utf-8")) == before

    def test_backend_translation_failure(self, client, store, translate):
        translate.side_effect = BackendTranslationFailure("Google: Quota exceeded")
        resp = client.post("/api/translate-fallback", json={"key": "a", "text": "x", "targetLocale": "kn"})
        assert resp.status_code == 500
        assert resp.json()["error"] == "Google: Quota exceeded"
        assert store.get("kn") == {}

    def test_empty_backend_output_not_persisted(self, client, store, translate):
        translate.return_value = "   "
        resp = client.post("/api/translate-fallback", json={"key": "a", "text": "x", "targetLocale": "hi"})
        assert resp.status_code == 500
        assert store.get("hi") == {}

    def test_default_locale_skips_backend(self, client, store, translate):
        resp = client.post("/api/translate-fallback", json={"key": "a", "text": "Hello", "targetLocale": "en"})
        assert resp.status_code == 200
        assert resp.json()["translated"] == "Hello"
        translate.assert_not_awaited()
        assert store.get("en") == {}

    def test_repeat_request_is_idempotent(self, client, store, translate):
        translate.return_value = "होम"
        body = {"key": "common.home", "text": "Home", "targetLocale": "hi"}
        client.post("/api/translate-fallback", json=body)
        once = store.path_for("hi").read_text(encoding="utf-8")
        client.post("/api/translate-fallback", json=body)
        assert store.path_for("hi").read_text(encoding="utf-8") == once


# --- GET /api/messages/{locale} ---

class TestMessages:
    def test_overlay_precedence(self, client, store):
        store.set("hi", "common.home", "मुख्य पृष्ठ")
        store.set("hi", "ai.chatTitle", "सहायक")
        resp = client.get("/api/messages/hi")
        assert resp.status_code == 200
        messages = resp.json()["messages"]
        assert messages["common"]["home"] == "मुख्य पृष्ठ"
        assert messages["common"]["markets"] == "बाज़ार"
        assert messages["ai"]["chatTitle"] == "सहायक"

    def test_default_locale(self, client):
        resp = client.get("/api/messages/en")
        assert resp.json()["messages"]["ai"]["chatTitle"] == "AI Financial Assistant"

    def test_unsupported_locale(self, client):
        resp = client.get("/api/messages/xx")
        assert resp.status_code == 400
        assert resp.json()["ok"] is False


# --- GET /api/locales ---

class TestLocales:
    def test_lists_supported(self, client):
        resp = client.get("/api/locales")
        assert resp.status_code == 200
        body = resp.json()
        assert body["default"] == "en"
        assert [loc["code"] for loc in body["locales"]] == ["en", "hi", "kn"]


# --- POST /api/locale ---

class TestSetLocale:
    def test_sets_cookie(self, client):
        resp = client.post("/api/locale", json={"locale": "kn"})
        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "locale": "kn"}
        cookie = resp.headers["set-cookie"]
        assert "preferred-locale=kn" in cookie
        assert "Max-Age=31536000" in cookie
        assert "Path=/" in cookie
        assert "samesite=lax" in cookie.lower()

    def test_unsupported(self, client):
        resp = client.post("/api/locale", json={"locale": "fr"})
        assert resp.status_code == 400
        assert "set-cookie" not in resp.headers

    def test_missing(self, client):
        resp = client.post("/api/locale", json={})
        assert resp.status_code == 400

    def test_non_string_locale(self, client):
        resp = client.post("/api/locale", json={"locale": ["hi"]})
        assert resp.status_code == 400
        assert resp.json()["ok"] is False
        assert "set-cookie" not in resp.headers


# --- LocaleMiddleware ---

class TestLocaleMiddleware:
    def test_root_redirects_to_preferred(self, client):
        client = TestClient(client.app, cookies={"preferred-locale": "hi"})
        resp = client.get("/", follow_redirects=False)
        assert resp.status_code == 307
        assert resp.headers["location"] == "/hi"

    def test_root_without_cookie_not_redirected(self, client):
        resp = client.get("/", follow_redirects=False)
        assert resp.status_code != 307

    def test_invalid_cookie_ignored(self, client):
        client = TestClient(client.app, cookies={"preferred-locale": "xx"})
        resp = client.get("/", follow_redirects=False)
        assert resp.status_code != 307

    def test_content_language_from_cookie(self, client):
        client = TestClient(client.app, cookies={"preferred-locale": "kn"})
        resp = client.get("/api/locales")
        assert resp.headers["content-language"] == "kn"

    def test_content_language_default(self, client):
        resp = client.get("/api/locales")
        assert resp.headers["content-language"] == "en"
