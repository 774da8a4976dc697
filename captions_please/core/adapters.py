"""Capability adapters - one response per media item, computed concurrently."""

import asyncio
from abc import ABC, abstractmethod

from captions_please.clients.base import Caption, Describer, OCRProvider
from captions_please.core import messages
from captions_please.exceptions import (
    ErrorKind,
    NoHighConfidenceResultsError,
    OCRError,
    classify,
)
from captions_please.logging import get_logger
from captions_please.models.post import Media, Post
from captions_please.models.response import MediaResponse, ResponseKind

log = get_logger("adapters")

MAX_CAPTIONS = 3
LOW_CONFIDENCE_CUTOFF = 0.25


class CapabilityAdapter(ABC):
    """Produces one MediaResponse per media item of a resolved post."""

    name: str = "adapter"

    async def respond(self, post: Post, language: str) -> list[MediaResponse]:
        """
        Run the adapter over every media item of ``post`` concurrently.

        Args:
            post: The resolved post carrying the media
            language: Reply language for any localized fragments

        Returns:
            One MediaResponse per media item, in media index order
        """
        tasks = [
            self.respond_one(index, media, post, language)
            for index, media in enumerate(post.media)
        ]
        responses = await asyncio.gather(*tasks)
        return sorted(responses, key=lambda r: r.index)

    @abstractmethod
    async def respond_one(self, index: int, media: Media, post: Post, language: str) -> MediaResponse:
        """Produce the response for a single media item."""
        ...


class AltTextAdapter(CapabilityAdapter):
    """Reads the alt text the author attached to each image."""

    name = "alt_text"

    async def respond_one(self, index: int, media: Media, post: Post, language: str) -> MediaResponse:
        if media.alt_text:
            return MediaResponse(index=index, kind=ResponseKind.FOUND_ALT_TEXT, reply=media.alt_text)
        if media.is_photo:
            reply = messages.localize("no_alt_text", language, author=post.author.display_name)
            return MediaResponse(index=index, kind=ResponseKind.MISSING_ALT_TEXT, reply=reply)
        return MediaResponse(index=index, kind=ResponseKind.DO_NOTHING)


class OCRAdapter(CapabilityAdapter):
    """Scans each photo for text."""

    name = "ocr"

    def __init__(self, provider: OCRProvider):
        self.provider = provider

    async def respond_one(self, index: int, media: Media, post: Post, language: str) -> MediaResponse:
        if not media.is_photo:
            return MediaResponse(index=index, kind=ResponseKind.DO_NOTHING)

        try:
            result = await self.provider.get_ocr(media.url)
        except Exception as e:
            error = classify(e, ErrorKind.OCR_ERROR)
            log.info("ocr_failed", post_id=post.id, index=index, kind=error.kind.value, error=str(error))
            return MediaResponse(index=index, kind=ResponseKind.FOUND_OCR, error=error)

        text = result.text.strip()
        if not text:
            return MediaResponse(
                index=index,
                kind=ResponseKind.FOUND_OCR,
                error=OCRError(f"no text found in {media.url}"),
            )
        log.debug("ocr_found", post_id=post.id, index=index, language=result.language, chars=len(text))
        return MediaResponse(index=index, kind=ResponseKind.FOUND_OCR, reply=text)


class DescriptionAdapter(CapabilityAdapter):
    """Asks a captioning service to describe each photo."""

    name = "describe"

    def __init__(self, describer: Describer):
        self.describer = describer

    async def respond_one(self, index: int, media: Media, post: Post, language: str) -> MediaResponse:
        if not media.is_photo:
            return MediaResponse(index=index, kind=ResponseKind.DO_NOTHING)

        try:
            captions = await self.describer.describe(media.url, language)
        except Exception as e:
            error = classify(e, ErrorKind.DESCRIBE_ERROR)
            log.info("describe_failed", post_id=post.id, index=index, kind=error.kind.value, error=str(error))
            return MediaResponse(index=index, kind=ResponseKind.FOUND_DESCRIPTION, error=error)

        kept = filter_captions(captions)
        if not kept:
            error = NoHighConfidenceResultsError(
                f"there were {len(captions)} results, but none were high-confidence"
            )
            return MediaResponse(index=index, kind=ResponseKind.FOUND_DESCRIPTION, error=error)
        reply = messages.combine_descriptions(kept, language)
        return MediaResponse(index=index, kind=ResponseKind.FOUND_DESCRIPTION, reply=reply)


def filter_captions(captions: list[Caption]) -> list[str]:
    """
    Keep the top ranked captions that clear the confidence cutoff.

    Stops at the first caption that is past MAX_CAPTIONS or below the cutoff,
    so a low-confidence caption hides everything ranked after it.
    """
    kept = []
    for rank, caption in enumerate(captions):
        if rank >= MAX_CAPTIONS or caption.confidence < LOW_CONFIDENCE_CUTOFF:
            break
        kept.append(caption.text)
    return kept
