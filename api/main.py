"""
SpamLens API — Main Application

POST   /analyze                 — Score text for spam
POST   /analyze/batch           — Score multiple texts
POST   /analyze/image           — OCR an uploaded image, then score its text
GET    /rules                   — Lexicon, pattern set and heuristic constants
GET    /emails                  — List stored emails (optionally by folder)
GET    /emails/{id}             — Get one email
POST   /emails                  — Store an email (scored on the way in)
PATCH  /emails/{id}             — Update fields
POST   /emails/{id}/spam        — Mark as spam / not spam
POST   /emails/{id}/read        — Mark as read / unread
DELETE /emails/{id}             — Move to trash
DELETE /emails/{id}/permanent   — Delete for good
GET    /stats                   — Spam statistics
GET    /health                  — Health check
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from spamlens import __version__
from spamlens.cache import ocr_cache
from spamlens.config import settings
from spamlens.detector import DetailedAnalysis, analyze, analyze_detailed, scan_image
from spamlens.logging import get_logger, setup_logging
from spamlens.ocr import ExtractionError, InvalidImageError, OCRProvider
from spamlens.ocr.factory import get_provider
from spamlens.rules import RULES_VERSION, get_rules
from spamlens.scorer import is_spam_score
from spamlens.schemas.analysis import (
    AnalysisResponse,
    AnalyzeBatchRequest,
    AnalyzeBatchResponse,
    AnalyzeRequest,
    HealthResponse,
    ImageAnalysisResponse,
)
from spamlens.schemas.email import (
    EmailCreateRequest,
    EmailListResponse,
    EmailResponse,
    EmailUpdateRequest,
    FlagRequest,
    StatsResponse,
)
from spamlens.store import EmailStore, get_email_store

logger = get_logger("api")


# ============================================================
# DEPENDENCIES
# ============================================================

# Lazy singletons
_store: Optional[EmailStore] = None
_ocr: Optional[OCRProvider] = None


def get_store() -> EmailStore:
    global _store
    if _store is None:
        _store = get_email_store()
    return _store


def get_ocr_provider() -> OCRProvider:
    global _ocr
    if _ocr is None:
        _ocr = get_provider(settings.OCR_PROVIDER)
    return _ocr


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire up dependencies on startup."""
    setup_logging()
    store = get_store()
    if settings.SEED_SAMPLES:
        store.seed_samples()
    logger.info("SpamLens API starting", extra={"provider": settings.OCR_PROVIDER})
    yield
    logger.info("SpamLens API shutting down")


app = FastAPI(
    title="SpamLens API",
    description="Lexical spam scoring for typed text and OCR-extracted images",
    version=f"{__version__} (rules {RULES_VERSION})",
    lifespan=lifespan,
)

# CORS — set SPAMLENS_CORS_ORIGINS in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    allow_credentials=False,
)


# ============================================================
# GLOBAL ERROR HANDLER
# ============================================================

@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. The request could not be completed."},
    )


def _analysis_payload(detailed: DetailedAnalysis, include_breakdown: bool = False) -> dict:
    payload = detailed.result.to_dict()
    if include_breakdown:
        payload["score_breakdown"] = detailed.breakdown
        payload["hits"] = [
            {
                "rule_id": h.rule_id,
                "category": h.category,
                "matched_text": h.matched_text,
                "count": h.count,
                "points": h.points,
            }
            for h in detailed.hits
        ]
    return payload


def _require_email(record):
    if record is None:
        raise HTTPException(404, "Email not found")
    return record.to_dict()


# ============================================================
# ANALYSIS ROUTES
# ============================================================

@app.post("/analyze", response_model=AnalysisResponse)
async def analyze_text(request: AnalyzeRequest):
    """Score text for spam."""
    start = time.time()
    detailed = analyze_detailed(request.text)
    result = detailed.result

    duration = round((time.time() - start) * 1000, 2)
    logger.info(
        f"Analysis complete: score={result.score}",
        extra={
            "score": result.score,
            "is_spam": result.is_spam,
            "label": result.label,
            "keywords_count": len(result.keywords),
            "text_length": len(request.text),
            "duration_ms": duration,
        },
    )
    return _analysis_payload(detailed, request.include_breakdown)


@app.post("/analyze/batch", response_model=AnalyzeBatchResponse)
async def analyze_batch(request: AnalyzeBatchRequest):
    """Score multiple texts."""
    results = [
        _analysis_payload(analyze_detailed(item.text), item.include_breakdown)
        for item in request.items
    ]
    spam_count = sum(1 for r in results if r["is_spam"])
    logger.info(
        f"Batch complete: {spam_count}/{len(results)} flagged as spam",
    )
    return {"results": results, "total": len(results), "spam_count": spam_count}


@app.post("/analyze/image", response_model=ImageAnalysisResponse)
async def analyze_image(
    file: UploadFile = File(...),
    provider: OCRProvider = Depends(get_ocr_provider),
):
    """Extract text from an uploaded image and score it."""
    if file.content_type and not file.content_type.startswith("image/"):
        raise HTTPException(415, "Please upload an image file.")

    image_bytes = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(image_bytes) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(413, "Image too large.")

    try:
        scan = await scan_image(image_bytes, provider, cache=ocr_cache)
    except InvalidImageError:
        raise HTTPException(415, "Uploaded file is not a readable image.")
    except ExtractionError as e:
        logger.warning(
            "Text extraction failed",
            extra={"provider": provider.name, "error": str(e), "error_type": type(e).__name__},
        )
        raise HTTPException(502, "Text extraction failed. Please try again with a clearer image.")

    logger.info(
        f"Image analysis complete: score={scan.analysis.score}",
        extra={
            "score": scan.analysis.score,
            "is_spam": scan.analysis.is_spam,
            "confidence": scan.ocr.confidence,
            "provider": provider.name,
        },
    )
    return {
        "ocr": {"text": scan.ocr.text, "confidence": scan.ocr.confidence},
        "analysis": scan.analysis.to_dict(),
    }


@app.get("/rules")
async def rules():
    """Return the full detection surface."""
    return get_rules()


# ============================================================
# EMAIL ROUTES
# ============================================================

@app.get("/emails", response_model=EmailListResponse)
async def list_emails(
    folder: Optional[str] = Query(None, pattern="^(inbox|spam|trash)$"),
    store: EmailStore = Depends(get_store),
):
    """List emails, newest first."""
    records = store.list_by_folder(folder) if folder else store.list_all()
    return {
        "folder": folder,
        "total": len(records),
        "emails": [r.to_dict() for r in records],
    }


@app.get("/emails/{email_id}", response_model=EmailResponse)
async def get_email(email_id: str, store: EmailStore = Depends(get_store)):
    return _require_email(store.get(email_id))


@app.post("/emails", response_model=EmailResponse, status_code=201)
async def create_email(
    request: EmailCreateRequest,
    store: EmailStore = Depends(get_store),
):
    """Store an email. Unscored emails are analyzed and filed by verdict."""
    data = request.model_dump()
    if data["spam_score"] is None:
        result = analyze(f"{request.subject}\n{request.content}")
        data["spam_score"] = result.score
        if data["is_spam"] is None:
            data["is_spam"] = result.is_spam
    elif data["is_spam"] is None:
        data["is_spam"] = is_spam_score(data["spam_score"])
    if data["folder"] is None:
        data["folder"] = "spam" if data["is_spam"] else "inbox"

    record = store.add(**data)
    return record.to_dict()


@app.patch("/emails/{email_id}", response_model=EmailResponse)
async def update_email(
    email_id: str,
    request: EmailUpdateRequest,
    store: EmailStore = Depends(get_store),
):
    updates = request.model_dump(exclude_none=True)
    return _require_email(store.update(email_id, **updates))


@app.post("/emails/{email_id}/spam", response_model=EmailResponse)
async def mark_spam(
    email_id: str,
    request: FlagRequest,
    store: EmailStore = Depends(get_store),
):
    """Mark as spam (moves to spam) or not spam (moves to inbox)."""
    record = _require_email(store.mark_spam(email_id, request.value))
    logger.info(
        "Email marked as spam" if request.value else "Email marked as not spam",
        extra={"email_id": email_id, "folder": record["folder"]},
    )
    return record


@app.post("/emails/{email_id}/read", response_model=EmailResponse)
async def mark_read(
    email_id: str,
    request: FlagRequest,
    store: EmailStore = Depends(get_store),
):
    return _require_email(store.mark_read(email_id, request.value))


@app.delete("/emails/{email_id}", response_model=EmailResponse)
async def delete_email(email_id: str, store: EmailStore = Depends(get_store)):
    """Move an email to trash."""
    return _require_email(store.delete(email_id))


@app.delete("/emails/{email_id}/permanent", status_code=204)
async def delete_email_permanently(email_id: str, store: EmailStore = Depends(get_store)):
    if not store.delete_permanently(email_id):
        raise HTTPException(404, "Email not found")


@app.get("/stats", response_model=StatsResponse)
async def stats(store: EmailStore = Depends(get_store)):
    return store.statistics()


@app.get("/health", response_model=HealthResponse)
async def health(store: EmailStore = Depends(get_store)):
    """Health check."""
    return {
        "status": "operational",
        "version": __version__,
        "rules_version": RULES_VERSION,
        "ocr_provider": settings.OCR_PROVIDER,
        "email_count": store.count(),
        "ocr_cache": ocr_cache.stats,
    }


# --- Security + Version Headers Middleware ---
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security and version headers to all responses."""
    response = await call_next(request)
    response.headers["X-SpamLens-Version"] = __version__
    response.headers["X-Rules-Version"] = RULES_VERSION
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# --- Request Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with method, path, status, duration."""
    path = request.url.path
    if path == "/health":
        return await call_next(request)

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 1)

    logger.info(
        f"{request.method} {path} → {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


def run():
    """Serve the API with uvicorn on the configured host and port."""
    uvicorn.run("api.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
