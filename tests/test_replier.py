"""Unit tests for the reply chain sender - fake platform client."""

import pytest

from captions_please.core.replier import Replier
from captions_please.exceptions import CaptionsError, ErrorKind, PlatformError, PostTooLongError

from fakes import FakePostClient, make_post


def long_message() -> str:
    return " ".join(f"word{i}" for i in range(80))


class TestReply:
    """Test sending replies."""

    @pytest.mark.asyncio
    async def test_single_chunk(self):
        client = FakePostClient()
        post = make_post()
        result = await Replier(client).reply(post, "a cat")
        assert client.replies == [("1", "a cat")]
        assert result.error is None
        assert result.parent.text == "a cat"

    @pytest.mark.asyncio
    async def test_chain_addresses_previous_chunk(self):
        client = FakePostClient()
        result = await Replier(client).reply(make_post(), long_message())
        assert len(client.replies) == 2
        assert client.replies[0][0] == "1"
        assert client.replies[1][0] == "1001"
        assert result.parent.id == "1002"
        assert result.remaining == []

    @pytest.mark.asyncio
    async def test_dry_run_posts_nothing(self):
        client = FakePostClient()
        post = make_post()
        result = await Replier(client, dry_run=True).reply(post, long_message())
        assert client.replies == []
        assert result.error is None
        assert result.parent is post

    @pytest.mark.asyncio
    async def test_unsplittable_message(self):
        client = FakePostClient()
        result = await Replier(client).reply(make_post(), "bad \ufffe")
        assert result.error.kind == ErrorKind.CANNOT_SPLIT_MESSAGE
        assert client.replies == []


class TestReplyRetries:
    """Test recovery from platform rejections."""

    @pytest.mark.asyncio
    async def test_too_long_chunk_is_halved(self):
        client = FakePostClient()
        client.reply_errors = [PostTooLongError("platform says no")]
        result = await Replier(client).reply(make_post(), "abcdef")
        assert client.replies == [("1", "abc"), ("1001", "def")]
        assert result.error is None

    @pytest.mark.asyncio
    async def test_missing_post_is_retried_after_delay(self):
        client = FakePostClient()
        client.reply_errors = [CaptionsError("lagging", kind=ErrorKind.MISSING_POST)]
        replier = Replier(client, missing_post_retry_seconds=0)
        result = await replier.reply(make_post(), "a cat")
        assert client.replies == [("1", "a cat")]
        assert result.error is None

    @pytest.mark.asyncio
    async def test_missing_post_retried_only_once(self):
        missing = CaptionsError("lagging", kind=ErrorKind.MISSING_POST)
        client = FakePostClient()
        client.reply_errors = [missing, missing]
        result = await Replier(client, missing_post_retry_seconds=0).reply(make_post(), "a cat")
        assert result.error.kind == ErrorKind.MISSING_POST
        assert client.replies == []


class TestReplyFailures:
    """Test failures that end the chain."""

    @pytest.mark.asyncio
    async def test_failure_keeps_anchor_and_remaining(self):
        client = FakePostClient()
        client.reply_errors = [None, PlatformError("down")]
        result = await Replier(client).reply(make_post(), long_message())
        assert result.error.kind == ErrorKind.PLATFORM_ERROR
        assert result.parent.id == "1001"
        assert len(result.remaining) == 1

    @pytest.mark.asyncio
    async def test_raw_exception_is_classified(self):
        client = FakePostClient()
        client.always_fail = ConnectionError("reset")
        post = make_post()
        result = await Replier(client).reply(post, "a cat")
        assert result.error.kind == ErrorKind.PLATFORM_ERROR
        assert result.parent is post
        assert result.remaining == ["a cat"]
