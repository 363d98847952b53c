from fastapi.testclient import TestClient

from app.config import GatewayConfig
from app.main import app
from app.models.profile import ProfileRecord
from app.services.preview_gateway import PreviewGateway


CRAWLER_UA = "facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)"
BROWSER_UA = "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0) AppleWebKit/605.1.15 Version/17.0 Safari/605.1.15"


class _FakeStore:
    def __init__(self, records=None, error=None):
        self.records = records or {}
        self.error = error
        self.calls = []

    async def fetch_profile(self, user_code):
        self.calls.append(user_code)
        if self.error is not None:
            raise self.error
        return self.records.get(user_code)


def _client(monkeypatch, store, config=None):
    monkeypatch.setattr(app.state, "gateway", PreviewGateway(config or GatewayConfig(), store))
    return TestClient(app)


def test_browser_is_redirected_with_path_and_query_untouched(monkeypatch):
    store = _FakeStore()
    client = _client(monkeypatch, store)
    resp = client.get("/abc123?ref=qr", headers={"User-Agent": BROWSER_UA}, follow_redirects=False)
    assert resp.status_code == 302
    assert resp.headers["location"] == "/abc123?ref=qr"
    assert resp.content == b""
    assert store.calls == []


def test_browser_redirect_keeps_nested_path_and_encoded_query(monkeypatch):
    client = _client(monkeypatch, _FakeStore())
    resp = client.get("/abc123/contact?ref=qr&utm=a%20b", headers={"User-Agent": BROWSER_UA}, follow_redirects=False)
    assert resp.status_code == 302
    assert resp.headers["location"] == "/abc123/contact?ref=qr&utm=a%20b"


def test_missing_user_agent_is_treated_as_human(monkeypatch):
    client = _client(monkeypatch, _FakeStore())
    resp = client.get("/abc123", headers={"User-Agent": ""}, follow_redirects=False)
    assert resp.status_code == 302
    assert resp.headers["location"] == "/abc123"


def test_crawler_gets_profile_preview(monkeypatch):
    store = _FakeStore(
        records={
            "abc123": ProfileRecord(
                name="Ann Lee",
                title="Designer",
                company_name="Acme",
                custom_fields={"profileImage": '{"imageUrl":"https://x/y.png"}'},
            )
        }
    )
    client = _client(monkeypatch, store)
    resp = client.get(
        "/abc123/contact",
        headers={"User-Agent": CRAWLER_UA, "X-Forwarded-Proto": "https", "X-Forwarded-Host": "cards.example.com"},
    )
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "text/html; charset=utf-8"
    assert resp.headers["cache-control"] == "public, max-age=3600"
    assert store.calls == ["abc123"]
    body = resp.text
    assert "<title>Ann Lee | Contact AI</title>" in body
    assert '<meta name="description" content="Acme - Designer">' in body
    assert '<meta property="og:image" content="https://x/y.png">' in body
    assert '<meta property="og:url" content="https://cards.example.com/abc123/contact">' in body


def test_crawler_for_unknown_profile_gets_fallback_preview(monkeypatch):
    client = _client(monkeypatch, _FakeStore())
    resp = client.get("/nobody", headers={"User-Agent": "Twitterbot/1.0"})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "text/html; charset=utf-8"
    assert resp.headers["cache-control"] == "public, max-age=300"
    body = resp.text
    assert body.startswith("<!DOCTYPE html>")
    assert "<title>Contact AI</title>" in body
    assert '<meta name="description" content="Contact AI">' in body
    assert "og:image" not in body


def test_crawler_on_root_and_reserved_paths_skips_store(monkeypatch):
    store = _FakeStore()
    client = _client(monkeypatch, store)
    assert client.get("/", headers={"User-Agent": CRAWLER_UA}).status_code == 200
    assert client.get("/myclik/studio", headers={"User-Agent": CRAWLER_UA}).status_code == 200
    assert store.calls == []


def test_unexpected_failure_degrades_to_passthrough(monkeypatch):
    client = _client(monkeypatch, _FakeStore(error=RuntimeError("unexpected")))
    resp = client.get("/abc123?ref=qr", headers={"User-Agent": CRAWLER_UA}, follow_redirects=False)
    assert resp.status_code == 302
    assert resp.headers["location"] == "/abc123?ref=qr"


def test_public_base_url_overrides_request_host(monkeypatch):
    config = GatewayConfig(public_base_url="https://clik.id", product_name="CLIK")
    client = _client(monkeypatch, _FakeStore(), config)
    resp = client.get("/abc123", headers={"User-Agent": CRAWLER_UA})
    assert '<meta property="og:url" content="https://clik.id/abc123">' in resp.text
    assert "<title>CLIK</title>" in resp.text


def test_health_is_not_intercepted():
    client = TestClient(app)
    resp = client.get("/health", headers={"User-Agent": CRAWLER_UA})
    assert resp.status_code == 200
    assert resp.text == "healthy\n"


def test_crawler_still_gets_profile_when_avatar_payload_is_pathological(monkeypatch):
    store = _FakeStore(records={"abc": ProfileRecord(name="Ann", custom_fields={"profileImage": "[" * 100000})})
    client = _client(monkeypatch, store)
    resp = client.get("/abc", headers={"User-Agent": CRAWLER_UA}, follow_redirects=False)
    assert resp.status_code == 200
    assert "<title>Ann | Contact AI</title>" in resp.text
    assert "og:image" not in resp.text


def test_health_head_is_not_intercepted():
    client = TestClient(app)
    resp = client.head("/health", headers={"User-Agent": CRAWLER_UA}, follow_redirects=False)
    assert resp.status_code == 200
    assert "location" not in resp.headers
