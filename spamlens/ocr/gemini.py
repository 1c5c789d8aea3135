"""
Gemini OCR Provider — Google Gemini vision transcription.

Uses the google.genai SDK. Client is lazily initialized —
app loads without an API key and only fails on an actual extraction.

Features:
- Model fallback chain: primary model → gemini-2.5-flash on failure
- Circuit breaker: after consecutive failures, fail fast for 60s
- Exponential backoff retry on transient errors
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import time
from typing import Optional

from google import genai
from google.genai import types

from spamlens.ocr import CircuitOpenError, ExtractionError, OCRProvider, OcrResult
from spamlens.ocr.images import to_png_bytes

logger = logging.getLogger("spamlens.ocr.gemini")

FALLBACK_MODEL = "gemini-2.5-flash"

# Circuit breaker settings
_CB_FAILURE_THRESHOLD = 3   # Open after this many consecutive failures
_CB_RECOVERY_TIMEOUT = 60   # Seconds before trying again (half-open)

OCR_PROMPT = """Transcribe all legible text in this image exactly as written.
Keep the original line breaks, capitalisation and punctuation. Do not summarise,
translate or correct spelling.

Return a JSON object with:
- "text": the transcribed text ("" if the image contains no text)
- "confidence": your confidence in the transcription, a number from 0 to 100

Return ONLY valid JSON."""


class CircuitBreaker:
    """Simple circuit breaker: closed → open → half-open → closed.

    When open, extract_text() raises CircuitOpenError immediately so
    the caller reports a failed extraction instead of waiting for the
    provider to time out.
    """

    def __init__(
        self,
        failure_threshold: int = _CB_FAILURE_THRESHOLD,
        recovery_timeout: float = _CB_RECOVERY_TIMEOUT,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._failures = 0
        self._last_failure_time: float = 0
        self._state = "closed"  # closed | open | half-open

    @property
    def state(self) -> str:
        if self._state == "open":
            if time.monotonic() - self._last_failure_time >= self.recovery_timeout:
                self._state = "half-open"
        return self._state

    def record_success(self) -> None:
        self._failures = 0
        self._state = "closed"

    def record_failure(self) -> None:
        self._failures += 1
        self._last_failure_time = time.monotonic()
        if self._failures >= self.failure_threshold:
            self._state = "open"
            logger.warning(
                "Circuit breaker OPEN — %d consecutive OCR failures. "
                "Failing fast for %ds.",
                self._failures, self.recovery_timeout,
            )

    @property
    def is_open(self) -> bool:
        return self.state == "open"


def parse_transcription(raw: str) -> OcrResult:
    """Parse the model's JSON reply into an OcrResult."""
    cleaned = (raw or "").strip()
    # Strip markdown fences if the model wraps JSON in ```json blocks
    if cleaned.startswith("```"):
        cleaned = cleaned.split("\n", 1)[-1].rsplit("```", 1)[0].strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionError(
            f"OCR model returned invalid JSON: {e}. Raw response: {cleaned[:300]}"
        ) from e
    if not isinstance(data, dict):
        raise ExtractionError("OCR model returned a non-object JSON value")

    text = data.get("text") or ""
    if not isinstance(text, str):
        raise ExtractionError("OCR model returned non-string text")
    try:
        confidence = float(data.get("confidence", 0))
    except (TypeError, ValueError):
        confidence = 0.0
    return OcrResult(text=text, confidence=max(0.0, min(100.0, confidence)))


class GeminiOCRProvider(OCRProvider):
    """Google Gemini OCR provider with fallback and circuit breaker."""

    name = "gemini"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self._api_key = api_key or os.getenv("GEMINI_API_KEY", "")
        self._model = model or os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        self._client: Optional[genai.Client] = None
        self.circuit_breaker = CircuitBreaker()

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self._api_key:
                raise ExtractionError(
                    "GEMINI_API_KEY not set. Get one from "
                    "https://aistudio.google.com/apikey"
                )
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def _call_model(
        self,
        model: str,
        image_part: types.Part,
        config: types.GenerateContentConfig,
        max_retries: int = 3,
    ) -> str:
        """Call a specific model with retry logic."""
        client = self._get_client()
        last_error = None
        for attempt in range(max_retries):
            try:
                response = await client.aio.models.generate_content(
                    model=model,
                    contents=[image_part, OCR_PROMPT],
                    config=config,
                )
                return response.text
            except Exception as e:
                last_error = e
                error_str = str(e).lower()
                is_transient = any(k in error_str for k in [
                    "429", "503", "500", "rate", "quota", "timeout",
                    "connection", "unavailable", "overloaded",
                ])
                if is_transient and attempt < max_retries - 1:
                    await asyncio.sleep(2 ** attempt)
                    continue
                raise

        raise last_error  # type: ignore[misc]

    async def extract_text(self, image_bytes: bytes) -> OcrResult:
        # Circuit breaker — fast-fail when the provider is known to be down
        if self.circuit_breaker.is_open:
            raise CircuitOpenError(
                "OCR circuit breaker is open — too many consecutive failures."
            )

        # Raises InvalidImageError before any network call
        png = to_png_bytes(image_bytes)
        image_part = types.Part.from_bytes(data=png, mime_type="image/png")
        config = types.GenerateContentConfig(
            temperature=0.0,
            response_mime_type="application/json",
        )

        try:
            raw = await self._call_model(self._model, image_part, config, max_retries=2)
        except ExtractionError:
            raise
        except Exception as primary_err:
            if self._model == FALLBACK_MODEL:
                self.circuit_breaker.record_failure()
                raise ExtractionError("Failed to extract text from image") from primary_err
            logger.warning(
                "Primary model %s failed (%s), falling back to %s",
                self._model, primary_err, FALLBACK_MODEL,
            )
            try:
                raw = await self._call_model(FALLBACK_MODEL, image_part, config, max_retries=1)
            except Exception as fallback_err:
                logger.error(
                    "Fallback model %s also failed: %s", FALLBACK_MODEL, fallback_err,
                )
                self.circuit_breaker.record_failure()
                raise ExtractionError("Failed to extract text from image") from fallback_err

        self.circuit_breaker.record_success()
        return parse_transcription(raw)
