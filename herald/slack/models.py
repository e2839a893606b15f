"""Slack Block Kit structures for release announcements.

Only the two block types the relay emits are modelled. Each struct is
tagged so ``msgspec.json.encode`` writes Slack's ``"type"`` discriminator.

>>> msgspec.json.encode(HeaderBlock(text=PlainText(text="Hi")))
b'{"type":"header","text":{"type":"plain_text","text":"Hi","emoji":true}}'

"""

from __future__ import annotations

import msgspec


class PlainText(
    msgspec.Struct, kw_only=True, frozen=True, tag="plain_text", tag_field="type"
):
    """Plain-text composition object."""

    text: str
    emoji: bool = True


class MarkdownText(
    msgspec.Struct, kw_only=True, frozen=True, tag="mrkdwn", tag_field="type"
):
    """Slack mrkdwn composition object."""

    text: str


class HeaderBlock(
    msgspec.Struct, kw_only=True, frozen=True, tag="header", tag_field="type"
):
    """Large bold header line."""

    text: PlainText


class SectionBlock(
    msgspec.Struct, kw_only=True, frozen=True, tag="section", tag_field="type"
):
    """Body text rendered as Slack mrkdwn."""

    text: MarkdownText


Block = HeaderBlock | SectionBlock


class ChatMessage(msgspec.Struct, kw_only=True, frozen=True):
    """A ``chat.postMessage`` request body.

    Attributes
    ----------
    channel : str
        Destination channel name or ID.
    blocks : tuple[Block, ...]
        Ordered Block Kit blocks.
    text : str
        Plain-text fallback shown in notifications; empty by default.

    """

    channel: str
    blocks: tuple[Block, ...]
    text: str = ""

    def to_json(self) -> bytes:
        """Encode the message as the JSON body Slack expects."""
        return msgspec.json.encode(self)


__all__ = [
    "Block",
    "ChatMessage",
    "HeaderBlock",
    "MarkdownText",
    "PlainText",
    "SectionBlock",
]
