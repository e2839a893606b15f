"""Shared fixtures for BDD feature tests."""

from __future__ import annotations

import typing as typ

import falcon.testing
import pytest

from herald.api.app import AppDependencies, create_app
from herald.factory import build_channel
from tests.helpers.workers import running_worker

if typ.TYPE_CHECKING:
    from dramatiq import Worker
    from dramatiq.brokers.stub import StubBroker

    from herald.config import RelayConfig
    from herald.events.channel import ReleaseEventChannel
    from tests.helpers.slack_transport import SlackRecorder


@pytest.fixture
def release_channel(
    stub_broker: StubBroker,
    relay_config: RelayConfig,
    slack_recorder: SlackRecorder,
) -> ReleaseEventChannel:
    """Build the release channel posting to the recording Slack transport."""
    return build_channel(
        relay_config, broker=stub_broker, transport=slack_recorder.transport()
    )


@pytest.fixture
def relay_client(
    relay_config: RelayConfig,
    release_channel: ReleaseEventChannel,
) -> falcon.testing.TestClient:
    """Return a Falcon test client for the full relay."""
    deps = AppDependencies(
        repo_filter=relay_config.repo_filter, publisher=release_channel
    )
    return falcon.testing.TestClient(create_app(deps))


@pytest.fixture
def relay_worker(
    stub_broker: StubBroker,
    release_channel: ReleaseEventChannel,
) -> typ.Iterator[Worker]:
    """Run a worker over the channel's subscriber queues."""
    assert release_channel.subscribers, "channel should have subscribers"
    with running_worker(stub_broker) as worker:
        yield worker


__all__ = ["relay_client", "relay_worker", "release_channel"]
