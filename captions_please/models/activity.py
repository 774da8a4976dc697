"""Activity jobs, their results, and reply bookkeeping."""

import asyncio
from dataclasses import dataclass, field

from pydantic import BaseModel

from captions_please.exceptions import CaptionsError
from captions_please.models.post import Post


class ActivityResult(BaseModel):
    """
    Outcome of handling one post.

    ``replied`` tells whether a user-visible reply went out; ``error`` is for
    telemetry and may be set even when the user got an answer.
    """

    post: Post | None = None
    action: str
    error: CaptionsError | None = None
    replied: bool = False

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


class ReplyResult(BaseModel):
    """Outcome of posting a reply chain."""

    parent: Post
    remaining: list[str] = []
    error: CaptionsError | None = None

    model_config = {"arbitrary_types_allowed": True}


class ActivityNotification(BaseModel):
    """A batch of account activity delivered by the platform."""

    bot_id: str = ""
    source_id: str = ""
    user_has_blocked: bool = False
    posts: list[Post] = []


@dataclass(frozen=True)
class ActivityJob:
    """A post waiting for a worker, plus the future its result is delivered on."""

    bot_id: str
    post: Post
    out: asyncio.Future = field(default_factory=lambda: asyncio.get_running_loop().create_future())

    def resolve(self, result: ActivityResult) -> bool:
        """Deliver the result exactly once. Returns False if already resolved."""
        if self.out.done():
            return False
        self.out.set_result(result)
        return True
