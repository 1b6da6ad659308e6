"""API endpoint tests using FastAPI TestClient."""

from __future__ import annotations

from datetime import date

import httpx
import pytest
from fastapi.testclient import TestClient

from backend.api import deps
from backend.api.main import app
from backend.engine.config import ServiceConfig

INDEX_HTML = "".join(
    f'<a class="stretched-link" href="../keywords/{name}">{name}</a>'
    for name in ("love", "hope", "success", "wisdom", "love")
)

TODAY = date(2026, 3, 14)


def _page(keyword: str, n: int) -> str:
    return "".join(
        f'<blockquote class="blockquote">&ldquo;{keyword} {i}&rdquo; &mdash; Author {i}</blockquote>'
        for i in range(n)
    )


class Upstream:
    def __init__(self) -> None:
        self.fail = False
        self.urls = []
        self.today = {"q": "Carpe diem", "a": "Horace"}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.urls.append(str(request.url))
        if self.fail:
            raise httpx.ConnectError("offline", request=request)
        path = request.url.path
        if path == "/keywords":
            return httpx.Response(200, text=INDEX_HTML)
        if path.startswith("/keywords/"):
            return httpx.Response(200, text=_page(path.rsplit("/", 1)[-1], 70))
        if path.startswith("/api/today/"):
            return httpx.Response(200, json=[self.today])
        return httpx.Response(404)


@pytest.fixture
def upstream():
    return Upstream()


@pytest.fixture
def api_key():
    return None


@pytest.fixture
def client(tmp_path, upstream, api_key):
    config = ServiceConfig(
        api_key=api_key,
        base_url="https://zenquotes.test",
        cache_path=tmp_path / "keyword_cache.json",
    )
    app.dependency_overrides[deps.get_config] = lambda: config
    app.dependency_overrides[deps.get_transport] = lambda: httpx.MockTransport(upstream)
    app.dependency_overrides[deps.get_today] = lambda: TODAY
    yield TestClient(app)
    app.dependency_overrides.clear()


# -----------------------------------------------------------------------
# Health
# -----------------------------------------------------------------------

class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


# -----------------------------------------------------------------------
# Keywords
# -----------------------------------------------------------------------

class TestKeywords:
    def test_scraped_keywords(self, client):
        r = client.get("/api/keywords")
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        assert body["source"] == "scrape"
        assert [k["name"] for k in body["data"]] == ["love", "hope", "success", "wisdom"]
        assert body["data"][0]["sourceUrl"] == "https://zenquotes.test/keywords/love"
        assert isinstance(body["timestamp"], int)
        assert "error" not in body

    def test_keywords_cached_on_disk(self, client, upstream, tmp_path):
        client.get("/api/keywords")
        client.get("/api/keywords")
        assert upstream.urls.count("https://zenquotes.test/keywords") == 1
        assert (tmp_path / "keyword_cache.json").exists()

    def test_fallback_keywords(self, client, upstream):
        upstream.fail = True
        r = client.get("/api/keywords")
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is False
        assert body["source"] == "fallback"
        assert len(body["data"]) == 10


class TestKeywordQuotes:
    def test_quotes_for_keyword(self, client):
        r = client.get("/api/keyword/success")
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        assert body["keyword"] == "success"
        assert body["count"] == 50
        assert len(body["data"]) == 50
        assert body["data"][0] == {"id": 1, "text": "success 0", "author": "Author 0", "category": "success"}

    def test_limit_param(self, client):
        body = client.get("/api/keyword/love?limit=5").json()
        assert body["count"] == 5

    def test_fallback_on_upstream_failure(self, client, upstream):
        upstream.fail = True
        r = client.get("/api/keyword/success")
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is False
        assert body["source"] == "fallback"
        assert body["count"] == len(body["data"]) > 0
        assert body["error"]

    def test_missing_keyword_is_400(self, client):
        r = client.get("/api/keyword")
        assert r.status_code == 400
        assert r.json()["success"] is False

    def test_blank_keyword_is_400(self, client):
        r = client.get("/api/keyword/%20%20")
        assert r.status_code == 400


# -----------------------------------------------------------------------
# Quotes
# -----------------------------------------------------------------------

class TestQuotes:
    def test_filtered_by_keyword(self, client):
        r = client.get("/api/quotes", params={"keyword": "hope"})
        assert r.status_code == 200
        quotes = r.json()
        assert len(quotes) == 10
        assert all(q["category"] == "hope" for q in quotes)

    def test_random_quotes(self, client):
        quotes = client.get("/api/quotes").json()
        assert len(quotes) == 3
        assert len({q["category"] for q in quotes}) == 3

    def test_random_quotes_prefer_last_selection(self, client):
        client.cookies.set("lastSelectedKeyword", "wisdom")
        quotes = client.get("/api/quotes").json()
        assert quotes[0]["category"] == "wisdom"

    def test_always_non_empty_when_upstream_down(self, client, upstream):
        upstream.fail = True
        assert len(client.get("/api/quotes").json()) == 3
        assert client.get("/api/quotes", params={"keyword": "success"}).json()

    def test_initial_groups(self, client):
        client.cookies.set("lastSelectedKeyword", "hope")
        groups = client.get("/api/quotes/initial").json()
        assert len(groups) == 3
        assert groups[0]["keyword"] == "hope"
        assert all(g["quotes"] for g in groups)

    def test_post_not_allowed(self, client):
        assert client.post("/api/quotes").status_code == 405


# -----------------------------------------------------------------------
# Quote of the day
# -----------------------------------------------------------------------

class TestQuoteOfTheDayNoKey:
    def test_default_line_without_upstream_call(self, client, upstream):
        r = client.get("/api/qod")
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/plain")
        assert r.text == '"The only way to do great work is to love what you do." - Steve Jobs'
        assert upstream.urls == []

    def test_methods_not_allowed(self, client):
        assert client.post("/api/qod").status_code == 405
        assert client.put("/api/qod").status_code == 405
        assert client.delete("/api/qod").status_code == 405


class TestQuoteOfTheDayWithKey:
    @pytest.fixture
    def api_key(self):
        return "real-key"

    def test_live_quote_sets_day_cookies(self, client):
        r = client.get("/api/qod")
        assert r.text == '"Carpe diem" - Horace'
        assert r.headers["cache-control"] == "public, max-age=3600"
        set_cookie = r.headers.get_list("set-cookie")
        assert any(c.startswith("qod_cache=") and "Max-Age=86400" in c for c in set_cookie)
        assert any(c.startswith("qod_date=2026-03-14") for c in set_cookie)

    def test_same_day_served_from_cookie(self, client, upstream):
        first = client.get("/api/qod").text
        upstream.today = {"q": "Something else", "a": "Other"}
        second = client.get("/api/qod").text
        assert first == second
        assert len(upstream.urls) == 1

    def test_stale_date_refetches(self, client, upstream):
        client.cookies.set("qod_cache", "old")
        client.cookies.set("qod_date", "2000-01-01")
        assert client.get("/api/qod").text == '"Carpe diem" - Horace'
        assert len(upstream.urls) == 1

    def test_failure_serves_fallback_without_cookies(self, client, upstream):
        upstream.fail = True
        r = client.get("/api/qod")
        assert r.status_code == 200
        assert "Robert Collier" in r.text
        assert r.headers["cache-control"] == "public, max-age=300"
        assert not r.headers.get_list("set-cookie")

    def test_alias_route(self, client):
        assert client.get("/qod").text == '"Carpe diem" - Horace'


# -----------------------------------------------------------------------
# Selection
# -----------------------------------------------------------------------

class TestSelection:
    def test_empty_by_default(self, client):
        assert client.get("/api/selection").json() == {"keyword": None}

    def test_record_and_read(self, client):
        r = client.put("/api/selection", json={"keyword": "motivation"})
        assert r.status_code == 200
        assert r.json() == {"keyword": "motivation"}
        assert "Max-Age=2592000" in r.headers["set-cookie"]
        assert client.get("/api/selection").json() == {"keyword": "motivation"}

    def test_clear(self, client):
        client.put("/api/selection", json={"keyword": "motivation"})
        assert client.delete("/api/selection").json() == {"keyword": None}
        assert client.get("/api/selection").json() == {"keyword": None}

    def test_blank_keyword_rejected(self, client):
        assert client.put("/api/selection", json={"keyword": ""}).status_code == 422
