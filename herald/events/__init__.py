"""Release event decoding and publish/subscribe fan-out."""

from __future__ import annotations

from .broker import BrokerConfigError, build_broker, ensure_broker_configured
from .channel import ReleaseEventChannel, ReleaseHandler
from .errors import ReleaseDecodeError, WebhookPayloadError
from .models import (
    ReleaseEvent,
    decode_action,
    decode_release_event,
    decode_repository_full_name,
)

__all__ = [
    "BrokerConfigError",
    "ReleaseDecodeError",
    "ReleaseEvent",
    "ReleaseEventChannel",
    "ReleaseHandler",
    "WebhookPayloadError",
    "build_broker",
    "decode_action",
    "decode_release_event",
    "decode_repository_full_name",
    "ensure_broker_configured",
]
