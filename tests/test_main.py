"""Tests for the HTTP surface: fragment, JSON feed, admin options."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from flickrfeed.main import app
from flickrfeed.rss_fetch import RSSFetchError

from tests.conftest import USER_ID, make_item, thumb_html


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def fetch_calls(monkeypatch):
    calls: list[str] = []

    def fake_retrieve(url, *, timeout_s):
        calls.append(url)
        return [make_item(n) for n in range(1, 6)]

    monkeypatch.setattr("flickrfeed.feed_service.retrieve_feed", fake_retrieve)
    return calls


def test_fragment_is_empty_without_user_id(client, fetch_calls):
    resp = client.get("/flickrfeed")
    assert resp.status_code == 200
    assert resp.text == ""
    assert fetch_calls == []


def test_fragment_renders_requested_count(client, fetch_calls):
    client.post("/admin/options", json={"user_id": USER_ID})

    resp = client.get("/flickrfeed", params={"count": 2, "css_class": "gallery"})

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert resp.text.startswith('<ul class="gallery">')
    assert resp.text.count("<li>") == 2
    assert thumb_html(1) in resp.text
    assert len(fetch_calls) == 1


def test_second_request_is_served_from_cache(client, fetch_calls):
    client.post("/admin/options", json={"user_id": USER_ID})

    client.get("/flickrfeed")
    client.get("/flickrfeed")

    assert len(fetch_calls) == 1


def test_fragment_rejects_negative_count(client):
    resp = client.get("/flickrfeed", params={"count": -1})
    assert resp.status_code == 422
    body = resp.json()
    assert body["code"] == "validation_error"
    assert body["request_id"] == resp.headers["X-Request-ID"]


def test_api_feed_returns_item_views(client, fetch_calls):
    client.post("/admin/options", json={"user_id": USER_ID})

    resp = client.get("/api/feed")

    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 5
    first = body["items"][0]
    assert first["title"] == "Photo 1"
    assert first["thumbnail"] == thumb_html(1)
    assert first["description_text"] == "description 1"


def test_api_feed_survives_fetch_failure(client, monkeypatch):
    def failing_retrieve(url, *, timeout_s):
        raise RSSFetchError("RSS_FETCH_FAIL: timeout")

    monkeypatch.setattr("flickrfeed.feed_service.retrieve_feed", failing_retrieve)
    client.post("/admin/options", json={"user_id": USER_ID})

    resp = client.get("/api/feed")

    assert resp.status_code == 200
    assert resp.json()["items"] == []
    assert client.get("/flickrfeed").text == ""


def test_admin_options_lists_fields_and_values(client):
    resp = client.get("/admin/options")
    assert resp.status_code == 200
    body = resp.json()
    assert set(body["supported"]) == {"Flickr User ID", "Cache time", "Clear cache"}
    assert body["values"]["flickrfeed_cachetime"] == "86400"


def test_admin_clear_cache(client, fetch_calls):
    client.post("/admin/options", json={"user_id": USER_ID})
    assert client.get("/flickrfeed").text.count("<li>") == 4

    resp = client.post("/admin/options", json={"cache_clear": True})

    assert resp.status_code == 200
    assert resp.json()["cache_cleared"] is True
    assert resp.json()["values"]["flickrfeed_cacheclear"] == "0"
    # cleared cache is fresh-but-empty until the cache time elapses
    assert client.get("/flickrfeed").text == ""
    assert len(fetch_calls) == 1


def test_admin_clear_disabled_returns_problem(client, monkeypatch):
    monkeypatch.setenv("FLICKRFEED_ALLOW_CACHE_CLEAR", "false")

    resp = client.post("/admin/options", json={"cache_clear": True})

    assert resp.status_code == 400
    assert resp.json()["code"] == "http_error"
    assert "Clear cache" not in client.get("/admin/options").json()["supported"]


def test_admin_rejects_negative_cache_time(client):
    resp = client.post("/admin/options", json={"cache_time": -5})
    assert resp.status_code == 422
    assert resp.json()["message"].startswith("body.cache_time")
