"""Errors raised while delivering messages to Slack."""

from __future__ import annotations

# Response preview length for error messages
_CONTENT_PREVIEW_LIMIT = 200


def _preview(content: str) -> str:
    if len(content) <= _CONTENT_PREVIEW_LIMIT:
        return content
    return f"{content[:_CONTENT_PREVIEW_LIMIT]}..."


class SlackError(Exception):
    """Base exception for Slack delivery failures.

    Attributes
    ----------
    response_text
        Raw Slack response body, when one was received.

    """

    def __init__(self, message: str, *, response_text: str | None = None) -> None:
        """Initialise with a message and the optional raw response body."""
        self.response_text = response_text
        super().__init__(message)


class SlackAPIError(SlackError):
    """Raised when Slack rejects a request or cannot be reached.

    Attributes
    ----------
    status_code
        HTTP status code of the response, if one was received.
    error_code
        Slack's ``error`` field for ``{"ok": false}`` responses.

    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: str | None = None,
        response_text: str | None = None,
    ) -> None:
        """Initialise the error with HTTP and Slack error context."""
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message, response_text=response_text)

    @classmethod
    def http_error(cls, status_code: int, response_text: str) -> SlackAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(
            f"Slack API HTTP {status_code}: {_preview(response_text)}",
            status_code=status_code,
            response_text=response_text,
        )

    @classmethod
    def api_error(cls, error_code: str, response_text: str) -> SlackAPIError:
        """Return an error for responses whose body reports ``ok: false``."""
        return cls(
            f"Slack API error: {error_code}",
            error_code=error_code,
            response_text=response_text,
        )

    @classmethod
    def transport_error(cls, exc: Exception) -> SlackAPIError:
        """Return an error for requests that never produced a response."""
        return cls(f"Slack API request failed: {type(exc).__name__}: {exc}")


class SlackResponseShapeError(SlackError):
    """Raised when a Slack response body is not the expected JSON object."""

    @classmethod
    def invalid_json(cls, response_text: str) -> SlackResponseShapeError:
        """Return an error for a body that is not a JSON object."""
        return cls(
            f"Slack API returned non-JSON body: {_preview(response_text)}",
            response_text=response_text,
        )
