"""Capability interfaces for the platform and vision providers."""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from captions_please.models.post import Post


class OCRResult(BaseModel):
    """Text found in an image, with the detected language."""

    text: str
    language: str = "und"
    confidence: float = 0.0


class Caption(BaseModel):
    """One ranked caption from a description provider."""

    text: str
    confidence: float


class PostClient(ABC):
    """Abstract social platform client."""

    @abstractmethod
    async def get_post(self, post_id: str) -> Post:
        """
        Fetch the full (extended) version of a post.

        Args:
            post_id: Platform identifier of the post

        Returns:
            The fetched Post

        Raises:
            CaptionsError: if the post cannot be fetched
        """
        ...

    @abstractmethod
    async def reply_to_post(self, post_id: str, text: str) -> Post:
        """
        Publish ``text`` as a reply to ``post_id``.

        Args:
            post_id: Post being replied to
            text: A single, already length-validated message

        Returns:
            The newly created Post

        Raises:
            CaptionsError: with kind POST_TOO_LONG, MISSING_POST, DUPLICATE_POST,
                RATE_LIMITED or PLATFORM_ERROR
        """
        ...


class OCRProvider(ABC):
    """Abstract optical character recognition provider."""

    @abstractmethod
    async def get_ocr(self, url: str) -> OCRResult:
        """Read the text out of the image at ``url``."""
        ...


class Describer(ABC):
    """Abstract image captioning provider."""

    @abstractmethod
    async def describe(self, url: str, language: str) -> list[Caption]:
        """
        Caption the image at ``url`` in ``language``.

        Args:
            url: Image location
            language: Language tag of the reply

        Returns:
            Captions, best first

        Raises:
            CaptionsError: with kind UNSUPPORTED_LANGUAGE when the provider
                can't caption in ``language``
        """
        ...
