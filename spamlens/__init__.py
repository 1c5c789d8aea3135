"""
SpamLens — Lexical Spam Scoring Engine

Scores a block of text (typed, or extracted from an image by OCR)
from 0 to 100, decides spam / not spam, lists the triggering tokens
and returns a copy of the text with those tokens highlighted.

Public API:
  - analyze:           text → AnalysisResult (pure, synchronous)
  - analyze_detailed:  analyze + score breakdown and rule hits
  - scan_image:        OCR an image, then analyze the extracted text
  - spam_engine:       Lexicon, pattern and heuristic evaluation
  - render_highlights / strip_highlights: highlight markup helpers
  - EmailStore:        Folder-partitioned message store (SQLite)
  - OCRProvider:       Abstract OCR interface for provider swapping

Usage:
    from spamlens import analyze
    result = analyze("Click here to claim your FREE gift!!!")
    result.score, result.is_spam, result.keywords
"""

__version__ = "1.0.0"

from spamlens.rules import (
    RULES_VERSION,
    SPAM_KEYWORDS,
    SPAM_PATTERNS,
    SPAM_THRESHOLD,
    SpamPattern,
    get_rules,
)
from spamlens.engine import spam_engine, Evaluation, RuleHit
from spamlens.scorer import calculate_spam_score, risk_label
from spamlens.highlight import render_highlights, strip_highlights
from spamlens.detector import (
    analyze,
    analyze_detailed,
    scan_image,
    AnalysisResult,
    DetailedAnalysis,
    ImageScan,
)
from spamlens.store import EmailStore, EmailRecord
from spamlens.ocr import OCRProvider, OcrResult, ExtractionError
from spamlens.ocr.factory import get_provider

__all__ = [
    "RULES_VERSION",
    "SPAM_KEYWORDS",
    "SPAM_PATTERNS",
    "SPAM_THRESHOLD",
    "SpamPattern",
    "get_rules",
    "spam_engine",
    "Evaluation",
    "RuleHit",
    "calculate_spam_score",
    "risk_label",
    "render_highlights",
    "strip_highlights",
    "analyze",
    "analyze_detailed",
    "scan_image",
    "AnalysisResult",
    "DetailedAnalysis",
    "ImageScan",
    "EmailStore",
    "EmailRecord",
    "OCRProvider",
    "OcrResult",
    "ExtractionError",
    "get_provider",
]
