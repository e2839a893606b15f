"""Typed views over GitHub release webhook payloads.

GitHub deliveries are decoded with msgspec into the narrow structs below,
so a missing or mistyped field fails immediately with a message naming
its JSON path instead of surfacing later as ``None``.

Usage
-----
Decode a serialized delivery into a release event:

>>> event = decode_release_event(raw_body)
>>> event.tag
'v2.0.0'

"""

from __future__ import annotations

import typing as typ

import msgspec

from .errors import ReleaseDecodeError, WebhookPayloadError


class ReleaseEvent(msgspec.Struct, kw_only=True, frozen=True):
    """Normalized release announcement consumed by channel subscribers.

    Attributes
    ----------
    title : str
        Release name as shown on GitHub.
    author : str
        Login of the user who published the release.
    tag : str
        Git tag the release points at, e.g. ``v1.2.0``.
    body : str
        Release notes in GitHub-flavoured Markdown.
    url : str
        Link to the release page.

    """

    title: str
    author: str
    tag: str
    body: str
    url: str


class _GitHubUser(msgspec.Struct, kw_only=True):
    login: str


class _GitHubRelease(msgspec.Struct, kw_only=True):
    name: str
    author: _GitHubUser
    tag_name: str
    # GitHub sends null for releases published without notes.
    body: str | None
    html_url: str


class _GitHubRepository(msgspec.Struct, kw_only=True):
    full_name: str


class _ReleasePayload(msgspec.Struct, kw_only=True):
    release: _GitHubRelease


class _ActionEnvelope(msgspec.Struct, kw_only=True):
    # Non-release events (push, ping) may carry no action or a non-string one.
    action: typ.Any = None


class _RepositoryEnvelope(msgspec.Struct, kw_only=True):
    repository: _GitHubRepository


def decode_release_event(serialized: str | bytes) -> ReleaseEvent:
    """Decode a serialized GitHub release delivery into a ``ReleaseEvent``.

    Raises
    ------
    ReleaseDecodeError
        If the payload is not JSON or any consumed ``release`` field is
        absent or not a string.

    """
    try:
        payload = msgspec.json.decode(serialized, type=_ReleasePayload)
    except msgspec.DecodeError as exc:
        raise ReleaseDecodeError.from_decode_error(exc) from exc

    release = payload.release
    return ReleaseEvent(
        title=release.name,
        author=release.author.login,
        tag=release.tag_name,
        body=release.body or "",
        url=release.html_url,
    )


def decode_action(body: bytes | str) -> str | None:
    """Return the top-level ``action`` of a webhook delivery.

    ``None`` is returned when the delivery has no ``action``; a non-string
    action is returned as its JSON text so it can still be reported.

    Raises
    ------
    WebhookPayloadError
        If *body* is not a JSON object.

    """
    try:
        action = msgspec.json.decode(body, type=_ActionEnvelope).action
    except msgspec.DecodeError as exc:
        raise WebhookPayloadError.from_decode_error(exc) from exc

    if action is None or isinstance(action, str):
        return action
    return msgspec.json.encode(action).decode("utf-8")


def decode_repository_full_name(body: bytes | str) -> str:
    """Return ``repository.full_name`` of a webhook delivery.

    Raises
    ------
    WebhookPayloadError
        If the repository object or its ``full_name`` is missing.

    """
    try:
        return msgspec.json.decode(body, type=_RepositoryEnvelope).repository.full_name
    except msgspec.DecodeError as exc:
        raise WebhookPayloadError.from_decode_error(exc) from exc


__all__ = [
    "ReleaseEvent",
    "decode_action",
    "decode_release_event",
    "decode_repository_full_name",
]
