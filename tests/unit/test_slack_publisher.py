"""Unit tests for ``SlackReleasePublisher``."""

from __future__ import annotations

import typing as typ

import pytest

from herald.config import SlackChannels
from herald.events.models import ReleaseEvent
from herald.observability import RelayEventType
from herald.slack.client import SlackClient, SlackConfig
from herald.slack.errors import SlackAPIError
from herald.slack.models import ChatMessage, SectionBlock
from herald.slack.publisher import SlackReleasePublisher
from tests.helpers.log_capture import capture_logs
from tests.helpers.slack_transport import SlackRecorder

_CHANNELS = SlackChannels(all_releases="releases", breaking_changes="breaking-changes")


def _release(tag: str = "v2.0.0") -> ReleaseEvent:
    return ReleaseEvent(
        title=f"Widget {tag}",
        author="alice",
        tag=tag,
        body="Notes\n### SHA-1 Checksums\nabc",
        url="https://x/y",
    )


class _RecordingSender:
    """MessageSender double that records messages and can fail by channel."""

    def __init__(self, *, fail_channels: typ.Iterable[str] = ()) -> None:
        self.fail_channels = set(fail_channels)
        self.sent: list[ChatMessage] = []

    async def post_message(self, message: ChatMessage) -> dict[str, typ.Any]:
        if message.channel in self.fail_channels:
            raise SlackAPIError.api_error("channel_not_found", '{"ok":false}')
        self.sent.append(message)
        return {"ok": True}


class TestHandle:
    """Tests for routing releases to Slack channels."""

    @pytest.mark.asyncio
    async def test_breaking_release_goes_to_both_channels(self) -> None:
        """Breaking releases are posted to all-releases then breaking-changes."""
        sender = _RecordingSender()
        await SlackReleasePublisher(sender, _CHANNELS).handle(_release("v2.0.0"))

        assert [m.channel for m in sender.sent] == ["releases", "breaking-changes"]

    @pytest.mark.asyncio
    async def test_non_breaking_release_goes_to_all_releases_only(self) -> None:
        """Patch releases are posted once."""
        sender = _RecordingSender()
        await SlackReleasePublisher(sender, _CHANNELS).handle(_release("v2.0.1"))

        assert [m.channel for m in sender.sent] == ["releases"]

    @pytest.mark.asyncio
    async def test_destinations_get_distinct_equal_content(self) -> None:
        """Each destination gets its own message with identical blocks."""
        sender = _RecordingSender()
        await SlackReleasePublisher(sender, _CHANNELS).handle(_release())

        first, second = sender.sent
        assert first is not second, "messages must not be shared"
        assert first.blocks == second.blocks, "block content should match"
        section = first.blocks[1]
        assert isinstance(section, SectionBlock)
        assert section.text.text == "Notes\n\nLearn more: https://x/y"

    @pytest.mark.asyncio
    async def test_first_failure_skips_second_send(self) -> None:
        """When the all-releases post fails nothing else is attempted."""
        sender = _RecordingSender(fail_channels={"releases"})

        with pytest.raises(SlackAPIError):
            await SlackReleasePublisher(sender, _CHANNELS).handle(_release())

        assert sender.sent == [], "breaking-changes post should not be attempted"

    @pytest.mark.asyncio
    async def test_second_failure_keeps_first_send(self) -> None:
        """A failed breaking-changes post leaves the first post in place."""
        sender = _RecordingSender(fail_channels={"breaking-changes"})

        with pytest.raises(SlackAPIError):
            await SlackReleasePublisher(sender, _CHANNELS).handle(_release())

        assert [m.channel for m in sender.sent] == ["releases"]


class TestHandleLogging:
    """Tests for Slack delivery observability."""

    @pytest.mark.asyncio
    async def test_failure_is_logged_with_payload(self) -> None:
        """Failed sends log the channel, the error and the message JSON."""
        sender = _RecordingSender(fail_channels={"releases"})

        with capture_logs("herald.observability") as capture:
            with pytest.raises(SlackAPIError):
                await SlackReleasePublisher(sender, _CHANNELS).handle(_release())

        (record,) = capture.records
        assert record.level == "ERROR"
        assert RelayEventType.SLACK_MESSAGE_FAILED in record.message
        assert "channel=releases" in record.message
        assert '"channel":"releases"' in record.message, "payload should be logged"
        assert isinstance(record.exc_info, SlackAPIError)

    @pytest.mark.asyncio
    async def test_success_is_logged_per_channel(self) -> None:
        """Each accepted post emits a sent event."""
        sender = _RecordingSender()

        with capture_logs("herald.observability") as capture:
            await SlackReleasePublisher(sender, _CHANNELS).handle(_release())

        sent = [m for m in capture.messages if RelayEventType.SLACK_MESSAGE_SENT in m]
        assert len(sent) == 2, "expected one sent event per channel"
        assert "channel=breaking-changes" in sent[1]


@pytest.mark.asyncio
async def test_publisher_drives_real_client(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """The publisher posts through ``SlackClient`` to Slack's HTTP API."""
    monkeypatch.setenv("HERALD_UNIT_SLACK_TOKEN", "xoxb-unit")
    recorder = SlackRecorder()
    client = SlackClient(
        SlackConfig(token_ref="env:HERALD_UNIT_SLACK_TOKEN"),
        transport=recorder.transport(),
    )

    await SlackReleasePublisher(client, _CHANNELS).handle(_release("v0.3.0"))

    assert recorder.channels == ["releases", "breaking-changes"]
    header = recorder.messages[0]["blocks"][0]
    assert header["text"]["text"] == "Widget v0.3.0 has been released! :rocket:"
