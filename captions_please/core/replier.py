"""Replier - posts a reply as a threaded chain of posts."""

import asyncio

from captions_please.clients.base import PostClient
from captions_please.core.splitter import Validator, split_in_two, split_message
from captions_please.core.tweet_text import validate_post
from captions_please.exceptions import CaptionsError, ErrorKind, classify
from captions_please.logging import get_logger
from captions_please.models.activity import ReplyResult
from captions_please.models.post import Post


class Replier:
    """
    Splits a reply into valid chunks and posts them as a chain.

    Example:
        replier = Replier(client)
        result = await replier.reply(post, "a red ball")
        if result.error:
            ...
    """

    def __init__(
        self,
        client: PostClient,
        validate: Validator = validate_post,
        dry_run: bool = False,
        missing_post_retry_seconds: float = 30.0,
    ):
        self.client = client
        self.validate = validate
        self.dry_run = dry_run
        self.missing_post_retry_seconds = missing_post_retry_seconds
        self._log = get_logger("replier")

    async def reply(self, post: Post, message: str) -> ReplyResult:
        """
        Reply to ``post`` with ``message``, splitting it if needed.

        Args:
            post: The post to reply to
            message: Full reply text

        Returns:
            ReplyResult anchored at the last post successfully sent
        """
        self._log.debug("reply", post_id=post.id, message=message)
        try:
            chunks = split_message(message, self.validate)
        except CaptionsError as e:
            return ReplyResult(parent=post, error=e)

        if self.dry_run:
            self._log.info("dry_run_reply", post_id=post.id, chunks=chunks)
            return ReplyResult(parent=post)

        return await self._send_chain(post, chunks)

    async def _send_chain(self, parent: Post, remaining: list[str]) -> ReplyResult:
        remaining = list(remaining)
        while remaining:
            try:
                parent = await self._send_one(parent, remaining)
            except CaptionsError as e:
                self._log.info("reply_failed", post_id=parent.id, kind=e.kind.value, remaining=len(remaining))
                return ReplyResult(parent=parent, remaining=remaining, error=e)
            remaining.pop(0)
        return ReplyResult(parent=parent)

    async def _send_one(self, parent: Post, remaining: list[str]) -> Post:
        """
        Post ``remaining[0]`` under ``parent``.

        May rewrite ``remaining`` in place when a chunk had to be halved.
        """
        chunk = remaining[0]
        try:
            return await self._post(parent, chunk)
        except CaptionsError as e:
            if e.kind == ErrorKind.POST_TOO_LONG:
                # The local validator and the platform disagree; halve and retry once
                self._log.error("reply_too_long", post_id=parent.id, chunk=chunk)
                first, second = split_in_two(chunk)
                sent = await self._post(parent, first)
                remaining[0:1] = [first, second]
                return sent
            if e.kind == ErrorKind.MISSING_POST:
                # The platform sometimes lags behind a chain it just created
                self._log.info("reply_missing_post_retry", post_id=parent.id, delay=self.missing_post_retry_seconds)
                await asyncio.sleep(self.missing_post_retry_seconds)
                return await self._post(parent, chunk)
            raise

    async def _post(self, parent: Post, text: str) -> Post:
        try:
            return await self.client.reply_to_post(parent.id, text)
        except CaptionsError:
            raise
        except Exception as e:
            raise classify(e, ErrorKind.PLATFORM_ERROR) from e
