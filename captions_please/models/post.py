"""Post and media data models."""

from enum import Enum

from pydantic import BaseModel


class PostKind(str, Enum):
    """How a post relates to other posts."""
    SIMPLE = "simple"
    QUOTE = "quote"
    REPOST = "repost"


class MediaType(str, Enum):
    """Media type tags reported by the platform."""
    PHOTO = "photo"
    VIDEO = "video"
    ANIMATED_GIF = "animated_gif"
    OTHER = "other"


class Author(BaseModel):
    """The user who wrote a post."""

    id: str
    display_name: str = ""
    handle: str = ""

    model_config = {"frozen": True}


class Mention(BaseModel):
    """A user mentioned in a post, with offsets into the full text."""

    id: str
    handle: str = ""
    start: int = 0
    end: int = 0
    visible: bool = True

    model_config = {"frozen": True}


class Media(BaseModel):
    """A single media item attached to a post."""

    type: MediaType = MediaType.PHOTO
    url: str = ""
    alt_text: str | None = None

    model_config = {"frozen": True}

    @property
    def is_photo(self) -> bool:
        return self.type == MediaType.PHOTO


class Post(BaseModel):
    """A single post on the social platform."""

    id: str
    text: str = ""
    visible_text_offset: int = 0
    author: Author
    parent_id: str | None = None
    quoted_post: "Post | None" = None
    kind: PostKind = PostKind.SIMPLE
    mentions: tuple[Mention, ...] = ()

    # Extended media, and the possibly-incomplete media from a non-extended payload
    media: tuple[Media, ...] = ()
    fallback_media: tuple[Media, ...] = ()

    model_config = {"frozen": True}

    @property
    def photos(self) -> list[Media]:
        """Media items that are photos, in their original order."""
        return [m for m in self.media if m.is_photo]
