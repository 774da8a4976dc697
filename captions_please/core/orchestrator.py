"""Activity processor - runs the full pipeline for one mention."""

import asyncio

from captions_please.clients.base import Describer, OCRProvider, PostClient
from captions_please.config import ActivityConfig
from captions_please.core import messages
from captions_please.core.adapters import AltTextAdapter, DescriptionAdapter, OCRAdapter
from captions_please.core.command import parse_command
from captions_please.core.composer import compose_reply, first_error
from captions_please.core.merge import merge_responses
from captions_please.core.parser import extract_command, find_visible_mention
from captions_please.core.replier import Replier
from captions_please.core.resolver import find_post_with_media
from captions_please.exceptions import CaptionsError, ErrorKind
from captions_please.logging import get_logger
from captions_please.models.activity import ActivityJob, ActivityResult
from captions_please.models.directive import Directive
from captions_please.models.post import Post
from captions_please.models.response import MediaResponse


class ActivityProcessor:
    """
    Handles a single ActivityJob from mention to posted reply.

    Every job yields exactly one ActivityResult. Unexpected failures are
    turned into an UNKNOWN error and the user still gets an apology.

    Example:
        processor = ActivityProcessor(client, ocr_provider, describer)
        result = await processor.process(job)
    """

    def __init__(
        self,
        client: PostClient,
        ocr: OCRProvider,
        describer: Describer,
        config: ActivityConfig | None = None,
        replier: Replier | None = None,
    ):
        self.config = config or ActivityConfig()
        self.client = client
        self.replier = replier or Replier(
            client,
            dry_run=self.config.dry_run,
            missing_post_retry_seconds=self.config.missing_post_retry_seconds,
        )
        self.alt_text = AltTextAdapter()
        self.ocr = OCRAdapter(ocr)
        self.describe = DescriptionAdapter(describer)
        self._log = get_logger("processor")

    async def process(self, job: ActivityJob) -> ActivityResult:
        """
        Process one job.

        Args:
            job: The post that (maybe) mentioned the bot

        Returns:
            ActivityResult describing what was done
        """
        post = job.post
        directive: Directive | None = None

        try:
            mention = find_visible_mention(job.bot_id, post)
            if mention is None or post.author.id == job.bot_id:
                return ActivityResult(post=post, action="ignored, bot not mentioned")

            directive = parse_command(extract_command(post, mention))
            self._log.debug("directive_parsed", post_id=post.id, directive=directive.label, language=directive.language)
            return await self.handle(directive, post)
        except Exception as e:
            label = directive.label if directive else None
            self._log.exception("job_failed", post_id=post.id, directive=label)
            error = CaptionsError(f"unexpected failure: {e}", kind=ErrorKind.UNKNOWN)
            error.__cause__ = e
            language = directive.language if directive else messages.DEFAULT_LANGUAGE
            replied = await self.reply_with_error(post, error, language)
            action = f"reply with {label}" if label else "reply to mention"
            return ActivityResult(post=post, action=action, error=error, replied=replied)

    async def handle(self, directive: Directive, post: Post) -> ActivityResult:
        """Dispatch a parsed directive."""
        language = directive.language
        action = f"reply with {directive.label}"

        if directive.help:
            result = await self.replier.reply(post, messages.help_message(language))
            if result.error is not None:
                # Help replies are best effort and never reported upstream
                self._log.info("help_reply_failed", post_id=post.id, error=str(result.error))
            return ActivityResult(post=post, action=action, replied=result.error is None)

        try:
            media_post = await find_post_with_media(self.client, post)
        except CaptionsError as e:
            self._log.info("media_not_found", post_id=post.id, kind=e.kind.value)
            replied = await self.reply_with_error(post, e, language)
            return ActivityResult(post=post, action=action, error=e, replied=replied)

        merged = await self.respond(directive, media_post)
        reply = await self.replier.reply(post, compose_reply(merged, language))
        if reply.error is None:
            error = first_error(merged)
            self._log.info(
                "replied",
                post_id=post.id,
                media_post_id=media_post.id,
                directive=directive.label,
                error=error.kind.value if error else None,
            )
            return ActivityResult(post=post, action=action, error=error, replied=True)

        replied = await self.reply_with_error(reply.parent, reply.error, language)
        return ActivityResult(post=post, action=action, error=reply.error, replied=replied)

    async def respond(self, directive: Directive, media_post: Post) -> list[MediaResponse]:
        """Run the requested adapters concurrently and merge their output."""
        language = directive.language
        count = len(media_post.media)

        async def skipped() -> list[MediaResponse]:
            return [MediaResponse(index=i) for i in range(count)]

        alt_text, ocr, description = await asyncio.gather(
            self.alt_text.respond(media_post, language) if directive.auto or directive.alt_text else skipped(),
            self.ocr.respond(media_post, language) if directive.auto or directive.ocr else skipped(),
            self.describe.respond(media_post, language) if directive.auto or directive.describe else skipped(),
        )
        return merge_responses(directive, alt_text, ocr, description, media_post.author.display_name)

    async def reply_with_error(self, post: Post, error: CaptionsError, language: str) -> bool:
        """Best-effort apology. Send failures are logged and otherwise ignored."""
        text = messages.error_message(error, language)
        result = await self.replier.reply(post, text)
        if result.error is not None:
            self._log.info("error_reply_failed", post_id=post.id, message=text, error=str(result.error))
            return False
        return True
