"""Unit tests for release announcement formatting in herald.slack.publisher."""

from __future__ import annotations

import pytest

from herald.events.models import ReleaseEvent
from herald.slack.models import HeaderBlock, SectionBlock
from herald.slack.publisher import (
    build_release_blocks,
    is_breaking_change,
    truncate_release_body,
)


def _release(**overrides: str) -> ReleaseEvent:
    fields = {
        "title": "Widget 2.0.0",
        "author": "alice",
        "tag": "v2.0.0",
        "body": "Notes\n### SHA-1 Checksums\nabc",
        "url": "https://x/y",
    }
    fields.update(overrides)
    return ReleaseEvent(**fields)


class TestIsBreakingChange:
    """Tests for the breaking-change tag rule."""

    @pytest.mark.parametrize(
        "tag",
        ["v1.0.0", "v2.0.0", "v11.0.0", "v0.1.0", "v0.11.0"],
    )
    def test_major_and_pre_one_minor_tags_are_breaking(self, tag: str) -> None:
        """Major releases and pre-1.0 minor releases are breaking."""
        assert is_breaking_change(tag), f"expected {tag} to be breaking"

    @pytest.mark.parametrize(
        "tag",
        [
            "v0.0.1",
            "v0.1.1",
            "v1.1.0",
            "v1.1.1",
            "v1.0.0-rc1",
            "1.0.0",
            "v1.0",
            "release-v1.0.0",
            "",
        ],
    )
    def test_other_tags_are_not_breaking(self, tag: str) -> None:
        """Patches, post-1.0 minors and non-exact shapes are not breaking."""
        assert not is_breaking_change(tag), f"expected {tag!r} not to be breaking"


class TestTruncateReleaseBody:
    """Tests for checksum stripping."""

    def test_drops_marker_and_everything_after(self) -> None:
        """Text from the checksum marker onwards is removed."""
        body = "Notes\n### SHA-1 Checksums\nabc"
        assert truncate_release_body(body) == "Notes\n"

    def test_body_without_marker_is_unchanged(self) -> None:
        """Bodies without the marker are returned as-is."""
        assert truncate_release_body("Just notes") == "Just notes"

    def test_only_first_marker_is_used(self) -> None:
        """Truncation happens at the first occurrence of the marker."""
        body = "A### SHA-1 ChecksumsB### SHA-1 ChecksumsC"
        assert truncate_release_body(body) == "A"

    def test_empty_body(self) -> None:
        """An empty body stays empty."""
        assert truncate_release_body("") == ""


class TestBuildReleaseBlocks:
    """Tests for the header and section blocks."""

    def test_header_and_section_text(self) -> None:
        """Header announces the title; section holds notes and the link."""
        header, section = build_release_blocks(_release())

        assert isinstance(header, HeaderBlock), "first block should be a header"
        assert isinstance(section, SectionBlock), "second block should be a section"
        assert header.text.text == "Widget 2.0.0 has been released! :rocket:"
        assert section.text.text == "Notes\n\nLearn more: https://x/y"

    def test_empty_body_still_links_release(self) -> None:
        """A release without notes still gets the learn-more line."""
        _, section = build_release_blocks(_release(body=""))
        assert isinstance(section, SectionBlock)
        assert section.text.text == "\n\nLearn more: https://x/y"

    def test_conversion_receives_truncated_body(self) -> None:
        """The converter sees the body with checksums removed."""
        seen: list[str] = []

        def convert(text: str) -> str:
            seen.append(text)
            return "converted"

        _, section = build_release_blocks(_release(), convert=convert)

        assert seen == ["Notes\n"], "converter should get the truncated body"
        assert isinstance(section, SectionBlock)
        assert section.text.text == "converted\n\nLearn more: https://x/y"

    def test_markdown_is_converted_to_mrkdwn(self) -> None:
        """Release notes are rendered in Slack's dialect."""
        _, section = build_release_blocks(
            _release(body="## Fixes\n\n- **core** [docs](https://d)")
        )
        assert isinstance(section, SectionBlock)
        assert section.text.text == (
            "*Fixes*\n\n• *core* <https://d|docs>\n\nLearn more: https://x/y"
        )
