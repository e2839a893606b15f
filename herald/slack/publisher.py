"""Turn release events into Slack announcements.

``SlackReleasePublisher`` is the channel subscriber that posts every
release to the all-releases channel and, when the tag marks a breaking
change, to the breaking-changes channel as well.

Usage
-----
>>> publisher = SlackReleasePublisher(client, SlackChannels())
>>> await publisher.handle(release)

"""

from __future__ import annotations

import re
import typing as typ

from herald.observability import RelayEventLogger

from .markdown import convert_markdown
from .models import (
    Block,
    ChatMessage,
    HeaderBlock,
    MarkdownText,
    PlainText,
    SectionBlock,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from herald.config import SlackChannels
    from herald.events.models import ReleaseEvent

CHECKSUMS_MARKER = "### SHA-1 Checksums"

# vMAJOR.0.0 for any MAJOR, or v0.MINOR.0 for any MINOR.
_BREAKING_TAG = re.compile(r"v[0-9]+\.0\.0|v0\.[0-9]+\.0")


def is_breaking_change(tag: str) -> bool:
    """Return True when *tag* is a major release or a pre-1.0 minor release.

    Only the exact ``vN.0.0`` and ``v0.N.0`` shapes qualify; tags without
    the ``v`` prefix or with pre-release suffixes (``v1.0.0-rc1``) do not.

    >>> is_breaking_change("v2.0.0"), is_breaking_change("v0.3.0")
    (True, True)
    >>> is_breaking_change("v1.1.0")
    False

    """
    return _BREAKING_TAG.fullmatch(tag) is not None


def truncate_release_body(body: str) -> str:
    """Drop the checksum table GitHub release tooling appends to notes."""
    return body.partition(CHECKSUMS_MARKER)[0]


def build_release_blocks(
    release: ReleaseEvent,
    *,
    convert: cabc.Callable[[str], str] = convert_markdown,
) -> tuple[Block, ...]:
    """Build the header and section blocks announcing *release*."""
    notes = convert(truncate_release_body(release.body))
    return (
        HeaderBlock(
            text=PlainText(text=f"{release.title} has been released! :rocket:")
        ),
        SectionBlock(
            text=MarkdownText(text=f"{notes}\n\nLearn more: {release.url}")
        ),
    )


class MessageSender(typ.Protocol):
    """Anything that can deliver a ``ChatMessage`` (see ``SlackClient``)."""

    async def post_message(self, message: ChatMessage) -> dict[str, typ.Any]:
        """Deliver *message*, raising on failure."""
        ...


class SlackReleasePublisher:
    """Release event subscriber posting announcements to Slack."""

    def __init__(
        self,
        client: MessageSender,
        channels: SlackChannels,
        *,
        convert: cabc.Callable[[str], str] = convert_markdown,
        event_logger: RelayEventLogger | None = None,
    ) -> None:
        """Initialise the publisher.

        Parameters
        ----------
        client
            Sender used for each ``chat.postMessage`` call.
        channels
            All-releases and breaking-changes destinations.
        convert
            Markdown to mrkdwn conversion applied to release notes.
        event_logger
            Structured event logger; a default instance is used when omitted.

        """
        self._client = client
        self._channels = channels
        self._convert = convert
        self._event_logger = event_logger or RelayEventLogger()

    def build_message(self, release: ReleaseEvent, channel: str) -> ChatMessage:
        """Build a new message for *release* addressed to *channel*."""
        return ChatMessage(
            channel=channel,
            blocks=build_release_blocks(release, convert=self._convert),
        )

    async def handle(self, release: ReleaseEvent) -> None:
        """Announce *release*, twice when it is a breaking change.

        Each destination gets its own freshly built message. A failed send
        is logged and re-raised; when the first send fails the second is
        not attempted, and a failed second send leaves the first in place.
        """
        await self._send(release, self._channels.all_releases)
        if is_breaking_change(release.tag):
            await self._send(release, self._channels.breaking_changes)

    async def _send(self, release: ReleaseEvent, channel: str) -> None:
        message = self.build_message(release, channel)
        try:
            await self._client.post_message(message)
        except Exception as exc:
            self._event_logger.log_slack_failed(
                channel=channel,
                payload=message.to_json().decode("utf-8"),
                error=exc,
            )
            raise
        self._event_logger.log_slack_sent(channel=channel, tag=release.tag)


__all__ = [
    "CHECKSUMS_MARKER",
    "MessageSender",
    "SlackReleasePublisher",
    "build_release_blocks",
    "is_breaking_change",
    "truncate_release_body",
]
