"""
API Integration Tests — Endpoint Verification

Tests every public API endpoint using FastAPI's TestClient.
No real OCR calls: the provider dependency is overridden with fakes.
The email store is seeded with the seven sample messages on startup.

These tests catch:
  - Schema mismatches (response model vs actual data)
  - Route registration issues
  - Middleware/dependency injection bugs
  - Response format regressions
"""

from __future__ import annotations

import dataclasses
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from spamlens.ocr import ExtractionError, InvalidImageError, OCRProvider, OcrResult


class StubProvider(OCRProvider):
    def __init__(self, name, text="", error=None):
        self.name = name
        self.text = text
        self.error = error

    async def extract_text(self, image_bytes):
        if self.error:
            raise self.error
        return OcrResult(text=self.text, confidence=91.0)


def _png():
    buffer = io.BytesIO()
    Image.new("RGB", (20, 10), "white").save(buffer, format="PNG")
    return buffer.getvalue()


# --- Fixtures ---

@pytest.fixture(scope="module")
def client():
    """Create a test client for the SpamLens API."""
    from api.main import app
    with TestClient(app) as c:
        yield c


@pytest.fixture
def use_provider():
    """Swap the OCR provider dependency for the duration of a test."""
    from api.main import app, get_ocr_provider

    def _use(provider):
        app.dependency_overrides[get_ocr_provider] = lambda: provider

    yield _use
    app.dependency_overrides.pop(get_ocr_provider, None)


# ============================================================
# HEALTH & META
# ============================================================

class TestHealth:

    def test_health_returns_200(self, client):
        assert client.get("/health").status_code == 200

    def test_health_fields(self, client):
        data = client.get("/health").json()
        assert data["status"] == "operational"
        assert data["rules_version"]
        assert data["ocr_provider"] == "gemini"
        assert data["email_count"] >= 7
        assert "hit_rate" in data["ocr_cache"]

    def test_version_headers(self, client):
        r = client.get("/health")
        assert r.headers["X-SpamLens-Version"]
        assert r.headers["X-Rules-Version"]
        assert r.headers["X-Content-Type-Options"] == "nosniff"


# ============================================================
# ANALYZE
# ============================================================

class TestAnalyze:

    def test_clean_text(self, client):
        r = client.post("/analyze", json={"text": "Lunch at noon tomorrow?"})
        assert r.status_code == 200
        data = r.json()
        assert data["score"] == 0
        assert data["is_spam"] is False
        assert data["label"] == "clean"
        assert data["keywords"] == []
        assert data["highlighted_text"] == "Lunch at noon tomorrow?"
        assert data["score_breakdown"] is None

    def test_spam_text(self, client):
        r = client.post("/analyze", json={
            "text": "CONGRATULATIONS WINNER!!! Claim your FREE prize now. "
                    "URGENT: click here, buy now, order now. Call 555-123-4567",
        })
        data = r.json()
        assert data["is_spam"] is True
        assert data["label"] == "spam"
        assert 0 < len(data["keywords"]) <= 10
        assert '<span class="spam-highlight">' in data["highlighted_text"]

    def test_empty_text(self, client):
        data = client.post("/analyze", json={"text": ""}).json()
        assert data["score"] == 0
        assert data["text"] == ""

    def test_missing_text_defaults_empty(self, client):
        r = client.post("/analyze", json={})
        assert r.status_code == 200
        assert r.json()["score"] == 0

    def test_breakdown(self, client):
        data = client.post("/analyze", json={
            "text": "this is a free gift", "include_breakdown": True,
        }).json()
        assert data["score"] == 30
        assert data["score_breakdown"]["floor_applied"] is True
        assert data["score_breakdown"]["lexicon_points"] == 10
        assert data["hits"][0]["category"] == "keyword"

    def test_text_too_long(self, client):
        r = client.post("/analyze", json={"text": "a" * 50_001})
        assert r.status_code == 422


class TestAnalyzeBatch:

    def test_batch(self, client):
        r = client.post("/analyze/batch", json={"items": [
            {"text": "See you at the meeting"},
            {"text": "URGENT WINNER!!! FREE cash prize, click here, act now, buy now"},
        ]})
        assert r.status_code == 200
        data = r.json()
        assert data["total"] == 2
        assert data["spam_count"] == 1
        assert data["results"][0]["is_spam"] is False

    def test_empty_batch_rejected(self, client):
        assert client.post("/analyze/batch", json={"items": []}).status_code == 422


# ============================================================
# IMAGE ANALYSIS
# ============================================================

class TestAnalyzeImage:

    def test_scores_extracted_text(self, client, use_provider):
        use_provider(StubProvider("stub-ok", text="this is a free gift"))
        r = client.post(
            "/analyze/image",
            files={"file": ("ad.png", _png(), "image/png")},
        )
        assert r.status_code == 200
        data = r.json()
        assert data["ocr"]["text"] == "this is a free gift"
        assert data["ocr"]["confidence"] == 91.0
        assert data["analysis"]["score"] == 30

    def test_non_image_rejected(self, client, use_provider):
        use_provider(StubProvider("stub-ok"))
        r = client.post(
            "/analyze/image",
            files={"file": ("notes.txt", b"free gift", "text/plain")},
        )
        assert r.status_code == 415

    def test_unreadable_image_rejected(self, client, use_provider):
        use_provider(StubProvider("stub-bad-image", error=InvalidImageError("bad")))
        r = client.post(
            "/analyze/image",
            files={"file": ("broken.png", b"garbage", "image/png")},
        )
        assert r.status_code == 415

    def test_extraction_failure(self, client, use_provider):
        use_provider(StubProvider("stub-fail", error=ExtractionError("down")))
        r = client.post(
            "/analyze/image",
            files={"file": ("ad.png", _png(), "image/png")},
        )
        assert r.status_code == 502
        assert "Text extraction failed" in r.json()["detail"]

    def test_oversized_upload(self, client, use_provider, monkeypatch):
        import api.main as main
        provider = StubProvider("stub-oversized", text="hello")
        use_provider(provider)
        monkeypatch.setattr(
            main, "settings", dataclasses.replace(main.settings, MAX_UPLOAD_BYTES=16),
        )
        r = client.post(
            "/analyze/image",
            files={"file": ("big.png", _png(), "image/png")},
        )
        assert r.status_code == 413

    def test_upload_at_limit_accepted(self, client, use_provider, monkeypatch):
        import api.main as main
        image = _png()
        use_provider(StubProvider("stub-at-limit", text="hello"))
        monkeypatch.setattr(
            main, "settings", dataclasses.replace(main.settings, MAX_UPLOAD_BYTES=len(image)),
        )
        r = client.post(
            "/analyze/image",
            files={"file": ("exact.png", image, "image/png")},
        )
        assert r.status_code == 200


# ============================================================
# SERVER ENTRY POINT
# ============================================================

class TestRun:

    def test_serves_on_configured_host_and_port(self, monkeypatch):
        import api.main as main
        calls = []
        monkeypatch.setattr(main.uvicorn, "run", lambda *a, **kw: calls.append((a, kw)))
        main.run()
        assert calls == [(
            ("api.main:app",),
            {"host": main.settings.HOST, "port": main.settings.PORT},
        )]


# ============================================================
# RULES
# ============================================================

class TestRules:

    def test_catalogue(self, client):
        data = client.get("/rules").json()
        assert data["spam_threshold"] == 70
        assert data["score_floor"] == 30
        assert data["max_keywords"] == 10
        assert any(p["id"] == "PHONE_NUMBER" for p in data["patterns"])
        assert any(k["phrase"] == "free gift" for k in data["keywords"])


# ============================================================
# EMAILS
# ============================================================

class TestEmails:

    def test_list_all(self, client):
        data = client.get("/emails").json()
        assert data["total"] >= 7
        assert data["folder"] is None

    def test_list_spam_folder(self, client):
        data = client.get("/emails", params={"folder": "spam"}).json()
        assert data["folder"] == "spam"
        assert all(e["folder"] == "spam" for e in data["emails"])
        assert {"1", "2", "3"} <= {e["id"] for e in data["emails"]}

    def test_unknown_folder(self, client):
        assert client.get("/emails", params={"folder": "archive"}).status_code == 422

    def test_get_seeded(self, client):
        data = client.get("/emails/4").json()
        assert data["id"] == "4"
        assert data["folder"] == "inbox"
        assert data["is_spam"] is False

    def test_get_missing(self, client):
        assert client.get("/emails/does-not-exist").status_code == 404

    def test_create_spam_scored_and_filed(self, client):
        r = client.post("/emails", json={
            "subject": "URGENT WINNER!!!",
            "sender_email": "prizes@example.net",
            "recipient": "user@example.com",
            "content": "Claim your FREE cash prize now, click here, act now, buy now",
        })
        assert r.status_code == 201
        data = r.json()
        assert data["is_spam"] is True
        assert data["folder"] == "spam"
        assert data["spam_score"] >= 70

    def test_create_clean_filed_in_inbox(self, client):
        data = client.post("/emails", json={
            "subject": "Lunch",
            "sender_email": "ann@example.com",
            "recipient": "user@example.com",
            "content": "See you at noon.",
        }).json()
        assert data["spam_score"] == 0
        assert data["folder"] == "inbox"

    def test_create_with_given_score(self, client):
        data = client.post("/emails", json={
            "subject": "Hello",
            "sender_email": "a@example.com",
            "recipient": "user@example.com",
            "spam_score": 75,
        }).json()
        assert data["is_spam"] is True
        assert data["folder"] == "spam"

    def test_patch(self, client):
        created = client.post("/emails", json={
            "subject": "Draft", "sender_email": "a@example.com",
            "recipient": "user@example.com",
        }).json()
        r = client.patch(f"/emails/{created['id']}", json={"subject": "Final"})
        assert r.status_code == 200
        assert r.json()["subject"] == "Final"

    def test_patch_missing(self, client):
        assert client.patch("/emails/nope", json={"is_read": True}).status_code == 404

    def test_mark_spam_and_back(self, client):
        data = client.post("/emails/5/spam", json={"value": True}).json()
        assert data["is_spam"] is True
        assert data["folder"] == "spam"
        data = client.post("/emails/5/spam", json={"value": False}).json()
        assert data["folder"] == "inbox"

    def test_mark_read(self, client):
        assert client.post("/emails/6/read", json={"value": True}).json()["is_read"] is True
        assert client.post("/emails/6/read", json={"value": False}).json()["is_read"] is False

    def test_delete_moves_to_trash(self, client):
        created = client.post("/emails", json={
            "subject": "Old", "sender_email": "a@example.com",
            "recipient": "user@example.com",
        }).json()
        data = client.delete(f"/emails/{created['id']}").json()
        assert data["folder"] == "trash"
        trash = client.get("/emails", params={"folder": "trash"}).json()
        assert created["id"] in {e["id"] for e in trash["emails"]}

    def test_delete_permanently(self, client):
        created = client.post("/emails", json={
            "subject": "Gone", "sender_email": "a@example.com",
            "recipient": "user@example.com",
        }).json()
        assert client.delete(f"/emails/{created['id']}/permanent").status_code == 204
        assert client.get(f"/emails/{created['id']}").status_code == 404
        assert client.delete(f"/emails/{created['id']}/permanent").status_code == 404


class TestStats:

    def test_stats_consistent(self, client):
        data = client.get("/stats").json()
        assert data["total_emails"] >= 7
        assert data["spam_emails"] + data["regular_emails"] == data["total_emails"]
        expected = round(data["spam_emails"] / data["total_emails"] * 100, 1)
        assert data["spam_percentage"] == expected
