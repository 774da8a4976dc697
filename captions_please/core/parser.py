"""Parser for platform JSON payloads (v1.1 tweets and account activity)."""

from captions_please.exceptions import CaptionsError
from captions_please.models.activity import ActivityNotification
from captions_please.models.post import Author, Media, MediaType, Mention, Post, PostKind


class PayloadError(CaptionsError):
    """The activity payload could not be parsed."""


MEDIA_TYPES = {
    "photo": MediaType.PHOTO,
    "video": MediaType.VIDEO,
    "animated_gif": MediaType.ANIMATED_GIF,
}


def parse_media(raw: dict) -> Media:
    """Parse a single media entity."""
    return Media(
        type=MEDIA_TYPES.get(raw.get("type", ""), MediaType.OTHER),
        url=raw.get("media_url_https") or raw.get("media_url") or "",
        alt_text=raw.get("ext_alt_text") or None,
    )


def parse_author(raw: dict | None) -> Author:
    raw = raw or {}
    return Author(
        id=str(raw.get("id_str") or raw.get("id") or ""),
        display_name=raw.get("name", ""),
        handle=raw.get("screen_name", ""),
    )


def _visible_text(raw: dict) -> tuple[str, int]:
    """
    Return the visible text and where it starts in the full text.

    Truncated payloads carry the real text in ``extended_tweet``.
    """
    source = raw
    if raw.get("truncated") and raw.get("extended_tweet", {}).get("full_text"):
        source = raw["extended_tweet"]
    text = source.get("full_text") or source.get("text") or ""
    visible_range = source.get("display_text_range")
    if not visible_range or len(visible_range) != 2:
        return text, 0
    start = max(visible_range[0], 0)
    end = min(visible_range[1], len(text))
    return text[start:end], start


def parse_post(raw: dict) -> Post:
    """
    Convert a v1.1 tweet payload into a Post.

    Args:
        raw: Decoded tweet JSON

    Returns:
        Post with extended media in ``media`` and the plain entity media
        in ``fallback_media``
    """
    if not isinstance(raw, dict):
        raise PayloadError("tweet payload must be a JSON object")
    if not raw.get("id_str") and raw.get("id") is None:
        raise PayloadError("tweet payload is missing an id")

    text, offset = _visible_text(raw)

    if raw.get("is_quote_status"):
        kind = PostKind.QUOTE
    elif raw.get("retweeted_status"):
        kind = PostKind.REPOST
    else:
        kind = PostKind.SIMPLE

    entities = raw.get("entities") or {}
    extended_entities = raw.get("extended_entities") or {}
    if raw.get("truncated") and raw.get("extended_tweet"):
        entities = raw["extended_tweet"].get("entities") or entities
        extended_entities = raw["extended_tweet"].get("extended_entities") or extended_entities

    mentions = []
    for mention in entities.get("user_mentions") or []:
        start, end = (mention.get("indices") or [0, 0])[:2]
        mentions.append(Mention(
            id=str(mention.get("id_str") or mention.get("id") or ""),
            handle=mention.get("screen_name", ""),
            start=start,
            end=end,
            visible=start >= offset,
        ))

    quoted = raw.get("quoted_status")
    return Post(
        id=str(raw.get("id_str") or raw["id"]),
        text=text,
        visible_text_offset=offset,
        author=parse_author(raw.get("user")),
        parent_id=raw.get("in_reply_to_status_id_str") or None,
        quoted_post=parse_post(quoted) if quoted else None,
        kind=kind,
        mentions=tuple(mentions),
        media=tuple(parse_media(m) for m in extended_entities.get("media") or []),
        fallback_media=tuple(parse_media(m) for m in entities.get("media") or []),
    )


def parse_activity(raw: dict) -> ActivityNotification:
    """
    Convert an account activity payload into an ActivityNotification.

    Raises:
        PayloadError: the payload is not an object or a tweet can't be parsed
    """
    if not isinstance(raw, dict):
        raise PayloadError("activity payload must be a JSON object")
    return ActivityNotification(
        bot_id=str(raw.get("for_user_id") or ""),
        source_id=str(raw.get("source") or ""),
        user_has_blocked=bool(raw.get("user_has_blocked", False)),
        posts=[parse_post(t) for t in raw.get("tweet_create_events") or []],
    )


def find_visible_mention(bot_id: str, post: Post) -> Mention | None:
    """The first visible mention of the bot in ``post``, if any."""
    for mention in post.mentions:
        if mention.id == bot_id and mention.visible:
            return mention
    return None


def extract_command(post: Post, mention: Mention) -> str:
    """
    Return the visible text that follows ``mention``.

    Mention offsets index the full text, so they are shifted by the
    visible text offset first.

    Examples:
        "@captions_please alt text" -> "alt text"
    """
    end = mention.end - post.visible_text_offset
    if end + 1 < len(post.text):
        return post.text[end + 1:].strip()
    return ""
