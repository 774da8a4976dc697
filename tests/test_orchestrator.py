"""Unit tests for ActivityProcessor - fake platform and providers, no network."""

import pytest
from unittest.mock import AsyncMock, patch

from captions_please.clients.base import Caption
from captions_please.config import ActivityConfig
from captions_please.core import messages
from captions_please.core.orchestrator import ActivityProcessor
from captions_please.exceptions import ErrorKind, PlatformError
from captions_please.models.activity import ActivityJob

from fakes import BOT, BOT_ID, FakeDescriber, FakeOCR, FakePostClient, make_post, photo, video


def make_processor(client=None, ocr=None, describer=None, **config) -> ActivityProcessor:
    return ActivityProcessor(
        client or FakePostClient(),
        ocr or FakeOCR(),
        describer or FakeDescriber(),
        ActivityConfig(missing_post_retry_seconds=0, **config),
    )


async def run(processor: ActivityProcessor, post):
    return await processor.process(ActivityJob(bot_id=BOT_ID, post=post))


class TestIgnoredPosts:
    """Test posts that should not get a reply."""

    @pytest.mark.asyncio
    async def test_no_mention(self):
        client = FakePostClient()
        result = await run(make_processor(client), make_post("just a photo", media=(photo(),)))
        assert result.action.startswith("ignored")
        assert result.error is None
        assert client.replies == []

    @pytest.mark.asyncio
    async def test_own_post(self):
        client = FakePostClient()
        result = await run(make_processor(client), make_post(author=BOT, media=(photo(),)))
        assert result.action.startswith("ignored")
        assert client.replies == []


class TestHelp:
    """Test help replies."""

    @pytest.mark.asyncio
    async def test_help(self):
        client = FakePostClient()
        result = await run(make_processor(client), make_post("@captions_please help"))
        assert client.texts[0].startswith("Tag @captions_please in a tweet")
        assert client.replies[0][0] == "1"
        assert result.action == "reply with help"
        assert result.error is None
        assert result.replied is True

    @pytest.mark.asyncio
    async def test_german_help(self):
        client = FakePostClient()
        await run(make_processor(client), make_post("@captions_please hilfe"))
        assert client.texts[0].startswith("Markiere @captions_please")

    @pytest.mark.asyncio
    async def test_help_failure_is_not_reported(self):
        client = FakePostClient()
        client.always_fail = PlatformError("down")
        result = await run(make_processor(client), make_post("@captions_please help"))
        assert result.error is None
        assert result.replied is False


class TestAutoReplies:
    """Test the default describe-everything flow."""

    @pytest.mark.asyncio
    async def test_alt_text(self):
        client = FakePostClient()
        post = make_post(media=(photo(alt_text="A red ball"),))
        result = await run(make_processor(client), post)
        assert client.replies == [("1", "A red ball")]
        assert result.action == "reply with auto"
        assert result.error is None
        assert result.replied is True

    @pytest.mark.asyncio
    async def test_description_when_no_text(self):
        client = FakePostClient()
        describer = FakeDescriber(default=[Caption(text="a dog in a park", confidence=0.8)])
        await run(make_processor(client, describer=describer), make_post(media=(photo(),)))
        assert client.texts == ["a dog in a park"]

    @pytest.mark.asyncio
    async def test_description_with_short_text(self):
        client = FakePostClient()
        ocr = FakeOCR(default="STOP")
        describer = FakeDescriber(default=[Caption(text="a red sign", confidence=0.8)])
        await run(make_processor(client, ocr, describer), make_post(media=(photo(),)))
        assert client.texts == ["a red sign. It contains the text: STOP"]

    @pytest.mark.asyncio
    async def test_parent_media(self):
        parent = make_post("look", post_id="2", media=(photo(alt_text="A sunset"),))
        client = FakePostClient([parent])
        await run(make_processor(client), make_post(parent_id="2"))
        assert client.replies == [("1", "A sunset")]

    @pytest.mark.asyncio
    async def test_dry_run(self):
        client = FakePostClient()
        result = await run(make_processor(client, dry_run=True), make_post(media=(photo(alt_text="x"),)))
        assert client.replies == []
        assert result.replied is True


class TestExplicitReplies:
    """Test explicitly requested outputs."""

    @pytest.mark.asyncio
    async def test_missing_alt_text_with_ocr(self):
        client = FakePostClient()
        ocr = FakeOCR(default="hello")
        await run(make_processor(client, ocr), make_post("@captions_please alt text and ocr", media=(photo(),)))
        assert client.texts == [
            "Alice didn't provide any alt text when posting the image. It contains the text: hello"
        ]

    @pytest.mark.asyncio
    async def test_unrequested_providers_are_not_called(self):
        ocr = FakeOCR(default="hello")
        describer = FakeDescriber()
        await run(make_processor(ocr=ocr, describer=describer), make_post("@captions_please ocr", media=(photo(),)))
        assert ocr.calls == ["https://img.test/1.jpg"]
        assert describer.calls == []

    @pytest.mark.asyncio
    async def test_partial_failure_is_user_success(self):
        client = FakePostClient()
        describer = FakeDescriber({
            "u1": [Caption(text="a cat", confidence=0.9)],
            "u2": RuntimeError("model crashed"),
        })
        post = make_post("@captions_please describe", media=(photo("u1"), photo("u2")))
        result = await run(make_processor(client, describer=describer), post)
        assert client.texts == ["Image 1: a cat\nImage 2: I'm at a loss for words, sorry!"]
        assert result.replied is True
        assert result.error.kind == ErrorKind.DESCRIBE_ERROR

    @pytest.mark.asyncio
    async def test_describer_gets_reply_language(self):
        describer = FakeDescriber(default=[Caption(text="eine Katze", confidence=0.9)])
        post = make_post("@captions_please describe in german", media=(photo(),))
        await run(make_processor(describer=describer), post)
        assert describer.languages == ["de"]

    @pytest.mark.asyncio
    async def test_unsupported_describe_language(self):
        client = FakePostClient()
        describer = FakeDescriber(default=[Caption(text="a cat", confidence=0.9)], supported={"en"})
        post = make_post("@captions_please describe in french", media=(photo(),))
        result = await run(make_processor(client, describer=describer), post)
        assert client.texts == [messages.localize("unsupported_language")]
        assert result.error.kind == ErrorKind.UNSUPPORTED_LANGUAGE
        assert result.replied is True


class TestErrorReplies:
    """Test apologies for failed jobs."""

    @pytest.mark.asyncio
    async def test_no_photos(self):
        client = FakePostClient()
        result = await run(make_processor(client), make_post())
        assert client.texts == [messages.localize("no_photos")]
        assert result.error.kind == ErrorKind.NO_PHOTOS_FOUND
        assert result.replied is True

    @pytest.mark.asyncio
    async def test_wrong_media(self):
        client = FakePostClient()
        result = await run(make_processor(client), make_post(media=(video(),)))
        assert client.texts == [messages.localize("wrong_media")]
        assert result.error.kind == ErrorKind.WRONG_MEDIA_TYPE

    @pytest.mark.asyncio
    async def test_reply_failure(self):
        client = FakePostClient()
        client.always_fail = PlatformError("down")
        result = await run(make_processor(client), make_post(media=(photo(alt_text="x"),)))
        assert result.error.kind == ErrorKind.PLATFORM_ERROR
        assert result.replied is False

    @pytest.mark.asyncio
    async def test_unexpected_failure_becomes_unknown(self):
        client = FakePostClient()
        processor = make_processor(client)
        processor.respond = AsyncMock(side_effect=RuntimeError("bug"))
        result = await run(processor, make_post(media=(photo(),)))
        assert result.error.kind == ErrorKind.UNKNOWN
        assert isinstance(result.error.__cause__, RuntimeError)
        assert client.texts == [messages.localize("unknown_error")]
        assert result.replied is True

    @pytest.mark.asyncio
    async def test_command_parsing_failure_becomes_unknown(self):
        client = FakePostClient()
        with patch("captions_please.core.orchestrator.parse_command", side_effect=RuntimeError("bug")):
            result = await run(make_processor(client), make_post("@captions_please ocr", media=(photo(),)))
        assert result.error.kind == ErrorKind.UNKNOWN
        assert isinstance(result.error.__cause__, RuntimeError)
        assert client.texts == [messages.localize("unknown_error")]
        assert result.replied is True
