"""
OCR Provider — factory.
"""

from spamlens.ocr import OCRProvider


def get_provider(provider_name: str = "gemini") -> OCRProvider:
    """Factory — returns the configured OCR provider."""
    if provider_name == "gemini":
        from spamlens.ocr.gemini import GeminiOCRProvider
        return GeminiOCRProvider()
    else:
        raise ValueError(f"Unknown OCR provider: {provider_name}")
