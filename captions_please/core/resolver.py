"""Media resolver - finds the nearest post that carries photos."""

from captions_please.clients.base import PostClient
from captions_please.exceptions import (
    CaptionsError,
    ErrorKind,
    NoPhotosFoundError,
    WrongMediaTypeError,
    classify,
)
from captions_please.logging import get_logger
from captions_please.models.post import Post, PostKind

log = get_logger("resolver")

# Hops allowed above the mentioning post
MAX_DEPTH = 2

# Fetch failures that explain themselves better than "no photos"
KEPT_FETCH_ERRORS = {ErrorKind.USER_BLOCKED_BOT}


async def find_post_with_media(client: PostClient, post: Post) -> Post:
    """
    Walk from ``post`` towards its ancestors until a post with photos is found.

    Args:
        client: Platform client used for refreshes and parent lookups
        post: The post that mentioned the bot

    Returns:
        The post whose media list holds at least one photo

    Raises:
        NoPhotosFoundError: nothing found within MAX_DEPTH hops
        WrongMediaTypeError: the nearest media is not a photo
        CaptionsError: a classified error while fetching a parent
    """
    return await _find(client, post, tried_refresh=False, depth=MAX_DEPTH)


async def _find(client: PostClient, post: Post, tried_refresh: bool, depth: int) -> Post:
    if depth < 0:
        raise NoPhotosFoundError("maximum search depth reached")

    if not post.media and post.fallback_media and not tried_refresh:
        # The payload may have been truncated; fetch the extended post once
        tried_refresh = True
        try:
            post = await client.get_post(post.id)
            log.debug("post_refreshed", post_id=post.id, media_count=len(post.media))
        except Exception as e:
            log.info("post_refresh_failed", post_id=post.id, error=str(e))

    if post.photos:
        return post

    if post.media:
        raise WrongMediaTypeError(f"post {post.id} contains media but no photos")

    parent = await _get_parent(client, post)
    if post.kind == PostKind.QUOTE:
        # Timelines never expand a quote's own ancestry, so stop after this hop
        next_depth = 0
    else:
        next_depth = depth - 1
        tried_refresh = True
    return await _find(client, parent, tried_refresh, next_depth)


async def _get_parent(client: PostClient, post: Post) -> Post:
    if post.kind == PostKind.QUOTE and post.quoted_post is not None:
        log.debug("using_quoted_post", post_id=post.id, quoted_id=post.quoted_post.id)
        return post.quoted_post

    if not post.parent_id:
        log.debug("no_parent_post", post_id=post.id)
        raise NoPhotosFoundError(f"post {post.id} has no parent")

    log.debug("fetching_parent_post", post_id=post.id, parent_id=post.parent_id)
    try:
        return await client.get_post(post.parent_id)
    except CaptionsError as e:
        if e.kind in KEPT_FETCH_ERRORS:
            raise
        raise NoPhotosFoundError(f"could not fetch parent {post.parent_id}: {e}") from e
    except Exception as e:
        raise classify(e, ErrorKind.NO_PHOTOS_FOUND) from e
