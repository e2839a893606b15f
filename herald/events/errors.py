"""Errors raised while decoding GitHub release payloads."""

from __future__ import annotations


class ReleaseDecodeError(ValueError):
    """Raised when a serialized payload cannot be decoded into a release.

    The message carries msgspec's description of the problem, which names
    the offending JSON path (for example ``$.release.author``).
    """

    @classmethod
    def from_decode_error(cls, exc: Exception) -> ReleaseDecodeError:
        """Wrap a msgspec decode or validation failure."""
        return cls(f"invalid release payload: {exc}")


class WebhookPayloadError(ValueError):
    """Raised when a webhook delivery body is not a usable GitHub payload."""

    @classmethod
    def from_decode_error(cls, exc: Exception) -> WebhookPayloadError:
        """Wrap a msgspec decode or validation failure."""
        return cls(f"malformed webhook payload: {exc}")

    @classmethod
    def invalid_encoding(cls, exc: UnicodeDecodeError) -> WebhookPayloadError:
        """Wrap a body that is not valid UTF-8."""
        return cls(f"malformed webhook payload: {exc}")
