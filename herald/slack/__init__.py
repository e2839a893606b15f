"""Slack delivery: Block Kit models, mrkdwn conversion and the publisher."""

from __future__ import annotations

from .client import SlackClient, SlackConfig
from .errors import SlackAPIError, SlackError, SlackResponseShapeError
from .markdown import convert_markdown
from .models import ChatMessage, HeaderBlock, MarkdownText, PlainText, SectionBlock
from .publisher import (
    SlackReleasePublisher,
    build_release_blocks,
    is_breaking_change,
    truncate_release_body,
)

__all__ = [
    "ChatMessage",
    "HeaderBlock",
    "MarkdownText",
    "PlainText",
    "SectionBlock",
    "SlackAPIError",
    "SlackClient",
    "SlackConfig",
    "SlackError",
    "SlackReleasePublisher",
    "SlackResponseShapeError",
    "build_release_blocks",
    "convert_markdown",
    "is_breaking_change",
    "truncate_release_body",
]
