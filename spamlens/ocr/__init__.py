"""
OCR Provider — Abstract Interface

All text-from-image extraction goes through this interface. Swap
providers by changing SPAMLENS_OCR_PROVIDER in env.

The spam engine never calls a provider itself; the detector awaits
extraction first and only scores text that was actually extracted.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class ExtractionError(Exception):
    """Text could not be extracted from an image."""


class InvalidImageError(ExtractionError):
    """The uploaded bytes are not a decodable image."""


class CircuitOpenError(ExtractionError):
    """Raised when the provider's circuit breaker is open."""


@dataclass(frozen=True)
class OcrResult:
    """Text extracted from an image."""
    text: str
    confidence: float  # 0-100


class OCRProvider(ABC):
    """Abstract base for OCR providers."""

    name: str = "abstract"

    @abstractmethod
    async def extract_text(self, image_bytes: bytes) -> OcrResult:
        """
        Extract text from raw image bytes.

        Raises:
            ExtractionError: on any failure. Callers must not score
                the image when this is raised.
        """
        ...
