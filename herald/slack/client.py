"""Async client for Slack's ``chat.postMessage`` Web API method."""

from __future__ import annotations

import dataclasses
import typing as typ

import httpx

from herald.secrets import resolve_secret

from .errors import SlackAPIError, SlackResponseShapeError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import ChatMessage

_DEFAULT_ENDPOINT = "https://slack.com/api/chat.postMessage"
_HTTP_ERROR_STATUS_THRESHOLD = 400


@dataclasses.dataclass(frozen=True, slots=True)
class SlackConfig:
    """Configuration for the Slack Web API client.

    Attributes
    ----------
    token_ref
        Secret reference for the bot token, resolved on every request so a
        rotated secret takes effect without a restart.
    endpoint
        ``chat.postMessage`` URL.
    timeout_s
        Request timeout in seconds.
    user_agent
        ``User-Agent`` header sent with each request.

    """

    token_ref: str
    endpoint: str = _DEFAULT_ENDPOINT
    timeout_s: float = 10.0
    user_agent: str = "herald/0.1"


def _parse_slack_response(response: httpx.Response) -> dict[str, typ.Any]:
    """Validate a ``chat.postMessage`` response and return its JSON body."""
    if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
        raise SlackAPIError.http_error(response.status_code, response.text)

    try:
        data = response.json()
    except ValueError as exc:
        raise SlackResponseShapeError.invalid_json(response.text) from exc

    if not isinstance(data, dict):
        raise SlackResponseShapeError.invalid_json(response.text)

    if data.get("ok") is not True:
        raise SlackAPIError.api_error(
            str(data.get("error", "unknown_error")), response.text
        )
    return typ.cast("dict[str, typ.Any]", data)


class SlackClient:
    """Post Block Kit messages with a bearer token from a secret reference.

    A fresh ``httpx.AsyncClient`` is opened per request: Dramatiq runs each
    delivery in its own event loop, so connections cannot be pooled across
    calls.
    """

    def __init__(
        self,
        config: SlackConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        secret_resolver: cabc.Callable[[str], str] = resolve_secret,
    ) -> None:
        """Initialise the client.

        Parameters
        ----------
        config
            Endpoint, timeout and token reference.
        transport
            Optional httpx transport, used by tests to stub Slack.
        secret_resolver
            Callable turning ``config.token_ref`` into the bearer token.

        """
        self._config = config
        self._transport = transport
        self._resolve_secret = secret_resolver

    async def post_message(self, message: ChatMessage) -> dict[str, typ.Any]:
        """Send *message* and return Slack's response body.

        Raises
        ------
        SecretResolutionError
            If the token cannot be resolved; no request is made.
        SlackAPIError
            On transport failures, non-2xx responses or ``ok: false``.
        SlackResponseShapeError
            If Slack answers with something other than a JSON object.

        """
        token = self._resolve_secret(self._config.token_ref)
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "User-Agent": self._config.user_agent,
        }
        async with httpx.AsyncClient(
            timeout=self._config.timeout_s, transport=self._transport
        ) as client:
            try:
                response = await client.post(
                    self._config.endpoint,
                    content=message.to_json(),
                    headers=headers,
                )
            except httpx.HTTPError as exc:
                raise SlackAPIError.transport_error(exc) from exc
        return _parse_slack_response(response)


__all__ = ["SlackClient", "SlackConfig"]
