"""
OCR Result Cache

In-memory TTL cache for text extracted from images.
Key = SHA-256(image bytes + provider). TTL = 1 hour.

Prevents repeat provider calls when the same image is uploaded twice.
Scoring is never cached: it is cheap and pure, so only extraction is.
Thread-safe via asyncio lock.

Usage:
    from spamlens.cache import ocr_cache
    cached = await ocr_cache.get(image_bytes, provider.name)
    if cached:
        return cached
    result = await provider.extract_text(image_bytes)
    await ocr_cache.put(image_bytes, provider.name, result)
"""

from __future__ import annotations

import asyncio
import hashlib
import time
from typing import Optional

from spamlens.ocr import OcrResult


class OcrCache:
    """Thread-safe in-memory cache with TTL eviction."""

    def __init__(self, ttl_seconds: int = 3600, max_entries: int = 500):
        self._cache: dict[str, tuple[float, OcrResult]] = {}
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def _make_key(image_bytes: bytes, provider: str) -> str:
        digest = hashlib.sha256(image_bytes)
        digest.update(f"||{provider}".encode())
        return digest.hexdigest()

    async def get(self, image_bytes: bytes, provider: str) -> Optional[OcrResult]:
        """Return cached result if exists and not expired."""
        key = self._make_key(image_bytes, provider)
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None

            ts, result = entry
            if time.monotonic() - ts > self._ttl:
                del self._cache[key]
                self._misses += 1
                return None

            self._hits += 1
            return result

    async def put(self, image_bytes: bytes, provider: str, result: OcrResult) -> None:
        """Store result in cache. Evicts oldest if over max."""
        key = self._make_key(image_bytes, provider)
        async with self._lock:
            if len(self._cache) >= self._max_entries and key not in self._cache:
                oldest_key = min(
                    self._cache, key=lambda k: self._cache[k][0],
                )
                del self._cache[oldest_key]

            self._cache[key] = (time.monotonic(), result)

    async def clear(self) -> None:
        async with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    @property
    def stats(self) -> dict:
        """Cache hit/miss statistics."""
        total = self._hits + self._misses
        return {
            "entries": len(self._cache),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total, 3) if total > 0 else 0.0,
        }


def _get_ocr_cache() -> OcrCache:
    """Factory — reads TTL from config."""
    from spamlens.config import settings
    return OcrCache(ttl_seconds=settings.OCR_CACHE_TTL)


# Singleton — shared across the application
ocr_cache = _get_ocr_cache()
