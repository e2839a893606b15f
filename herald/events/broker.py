"""Dramatiq broker selection for the release channel.

The web process and the worker process must agree on a broker before any
actor is declared. ``ensure_broker_configured`` picks one from the
environment exactly once per process:

- ``HERALD_BROKER_URL`` set to a ``redis://`` or ``rediss://`` URL selects
  a ``RedisBroker``.
- Otherwise a ``StubBroker`` is installed when
  ``HERALD_ALLOW_STUB_BROKER`` is truthy or the process is running under
  pytest.
"""

from __future__ import annotations

import os
import sys
import threading

import dramatiq
from dramatiq.brokers.stub import StubBroker

_BROKER_LOCK = threading.Lock()
_REDIS_SCHEMES = ("redis://", "rediss://")
_configured_broker: dramatiq.Broker | None = None


class BrokerConfigError(RuntimeError):
    """Raised when no usable Dramatiq broker can be configured."""

    @classmethod
    def missing(cls) -> BrokerConfigError:
        """Return an error for a production process with no broker URL."""
        return cls(
            "No Dramatiq broker configured. Set HERALD_BROKER_URL to a Redis "
            "URL, or HERALD_ALLOW_STUB_BROKER=1 for local runs."
        )

    @classmethod
    def unsupported_url(cls, url: str) -> BrokerConfigError:
        """Return an error for a broker URL with an unsupported scheme."""
        scheme = url.partition("://")[0]
        return cls(f"HERALD_BROKER_URL scheme {scheme!r} is not supported")


def _is_running_tests() -> bool:
    """Return True when the process is running under pytest."""
    return "pytest" in sys.modules or any(
        key in os.environ
        for key in ["PYTEST_CURRENT_TEST", "PYTEST_XDIST_WORKER", "PYTEST_ADDOPTS"]
    )


def _should_use_stub_broker() -> bool:
    allow_stub = os.environ.get("HERALD_ALLOW_STUB_BROKER", "")
    return allow_stub.lower() in {"1", "true", "yes"} or _is_running_tests()


def build_broker() -> dramatiq.Broker:
    """Build the broker described by the environment.

    Raises
    ------
    BrokerConfigError
        If a broker URL is unsupported, or none is set outside stub-allowed
        contexts.

    """
    url = os.environ.get("HERALD_BROKER_URL", "").strip()
    if url:
        if not url.startswith(_REDIS_SCHEMES):
            raise BrokerConfigError.unsupported_url(url)
        from dramatiq.brokers.redis import RedisBroker

        return RedisBroker(url=url)

    if _should_use_stub_broker():
        return StubBroker()

    raise BrokerConfigError.missing()


def ensure_broker_configured() -> dramatiq.Broker:
    """Return the process-wide broker, building and installing it once.

    Thread-safe: uses a lock and sentinel so concurrent callers (web
    handlers, worker threads) share one broker. The broker is also
    installed with ``dramatiq.set_broker`` so the ``dramatiq`` CLI picks
    it up when it imports :mod:`herald.worker`.

    Raises
    ------
    BrokerConfigError
        If the environment does not describe a usable broker.

    """
    global _configured_broker

    if _configured_broker is not None:
        return _configured_broker

    with _BROKER_LOCK:
        # Double-check after acquiring the lock
        if _configured_broker is None:
            broker = build_broker()
            dramatiq.set_broker(broker)
            _configured_broker = broker
        return _configured_broker


__all__ = ["BrokerConfigError", "build_broker", "ensure_broker_configured"]
