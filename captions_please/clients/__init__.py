"""Capability interfaces consumed by the activity pipeline."""

from captions_please.clients.base import Caption, Describer, OCRProvider, OCRResult, PostClient

__all__ = ["Caption", "Describer", "OCRProvider", "OCRResult", "PostClient"]
