"""
Detector — Analysis Orchestrator

Two entry points:
  - analyze:     text → AnalysisResult. Pure, synchronous, deterministic.
  - scan_image:  image → OCR text → AnalysisResult. Awaits the OCR
                 provider first and never scores a failed extraction.

This module coordinates between the engine, the scorer, the
highlight renderer and the OCR provider.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Optional

from spamlens.cache import OcrCache
from spamlens.engine import RuleHit, spam_engine
from spamlens.highlight import render_highlights
from spamlens.ocr import OCRProvider, OcrResult
from spamlens.rules import MAX_KEYWORDS
from spamlens.scorer import calculate_spam_score, is_spam_score, risk_label

logger = logging.getLogger(__name__)


# ============================================================
# RESULTS
# ============================================================

@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one analysis. Constructed fresh per call."""
    is_spam: bool
    score: int
    text: str
    highlighted_text: str
    keywords: tuple[str, ...] = ()

    @property
    def label(self) -> str:
        return risk_label(self.score)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["keywords"] = list(self.keywords)
        data["label"] = self.label
        return data


EMPTY_RESULT = AnalysisResult(
    is_spam=False, score=0, text="", highlighted_text="", keywords=(),
)


@dataclass(frozen=True)
class DetailedAnalysis:
    """An AnalysisResult plus the evidence behind its score."""
    result: AnalysisResult
    breakdown: dict = field(default_factory=dict)
    hits: tuple[RuleHit, ...] = ()


@dataclass(frozen=True)
class ImageScan:
    """OCR output and the analysis of the extracted text."""
    ocr: OcrResult
    analysis: AnalysisResult


# ============================================================
# TEXT ANALYSIS
# ============================================================

def analyze_detailed(text: str) -> DetailedAnalysis:
    """
    Analyze text and keep the score breakdown and rule hits.

    Degenerate input (empty string or non-str) yields the zero result
    without running any matcher.
    """
    if not isinstance(text, str) or not text:
        return DetailedAnalysis(result=EMPTY_RESULT, breakdown={"final_score": 0})

    evaluation = spam_engine.evaluate(text)
    score, breakdown = calculate_spam_score(evaluation)

    result = AnalysisResult(
        is_spam=is_spam_score(score),
        score=score,
        text=text,
        highlighted_text=render_highlights(text, evaluation.spans),
        keywords=tuple(evaluation.keywords[:MAX_KEYWORDS]),
    )
    logger.debug(
        "Spam score %d (%d keyword(s) found)", score, len(evaluation.keywords),
    )
    return DetailedAnalysis(result=result, breakdown=breakdown, hits=tuple(evaluation.hits))


def analyze(text: str) -> AnalysisResult:
    """Score text for spam. Never raises on bad input."""
    return analyze_detailed(text).result


# ============================================================
# IMAGE ANALYSIS
# ============================================================

async def extract_text(
    image_bytes: bytes,
    provider: OCRProvider,
    cache: Optional[OcrCache] = None,
) -> OcrResult:
    """Extract text through the provider, consulting the cache first."""
    if cache is not None:
        cached = await cache.get(image_bytes, provider.name)
        if cached is not None:
            logger.debug("OCR cache hit", extra={"provider": provider.name})
            return cached

    ocr = await provider.extract_text(image_bytes)
    logger.info(
        "Text extracted from image",
        extra={
            "provider": provider.name,
            "confidence": ocr.confidence,
            "text_length": len(ocr.text),
        },
    )

    if cache is not None:
        await cache.put(image_bytes, provider.name, ocr)
    return ocr


async def scan_image(
    image_bytes: bytes,
    provider: OCRProvider,
    cache: Optional[OcrCache] = None,
) -> ImageScan:
    """
    OCR an image and analyze the extracted text.

    Raises:
        ExtractionError: if the provider fails. The engine is not run.
    """
    ocr = await extract_text(image_bytes, provider, cache=cache)
    return ImageScan(ocr=ocr, analysis=analyze(ocr.text))
