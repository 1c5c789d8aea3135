"""
API Schemas — Analysis Request and Response Models

Pydantic models for the SpamLens analysis endpoints.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field


# ============================================================
# ANALYZE
# ============================================================

class AnalyzeRequest(BaseModel):
    """POST /analyze request body."""
    text: str = Field("", max_length=50_000,
                      description="The text to score (0-50,000 characters).")
    include_breakdown: bool = Field(False,
                                    description="Return the per-signal score breakdown and rule hits.")

    model_config = {"json_schema_extra": {"examples": [
        {"text": "URGENT!!! Click here to claim your FREE gift: http://win.example.com",
         "include_breakdown": True},
    ]}}


class AnalyzeBatchRequest(BaseModel):
    """POST /analyze/batch request body."""
    items: list[AnalyzeRequest] = Field(..., min_length=1, max_length=100)


class RuleHitResponse(BaseModel):
    rule_id: str
    category: str
    matched_text: str
    count: int
    points: int


class AnalysisResponse(BaseModel):
    """POST /analyze response body."""
    is_spam: bool
    score: int
    label: str
    text: str
    highlighted_text: str
    keywords: list[str]
    score_breakdown: Optional[dict] = None
    hits: Optional[list[RuleHitResponse]] = None


class AnalyzeBatchResponse(BaseModel):
    """POST /analyze/batch response body."""
    results: list[AnalysisResponse]
    total: int
    spam_count: int


class OcrResponse(BaseModel):
    text: str
    confidence: float


class ImageAnalysisResponse(BaseModel):
    """POST /analyze/image response body."""
    ocr: OcrResponse
    analysis: AnalysisResponse


# ============================================================
# HEALTH
# ============================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    rules_version: str
    ocr_provider: str
    email_count: int
    ocr_cache: dict
