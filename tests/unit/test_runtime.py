"""Unit tests for the herald.runtime module."""

from __future__ import annotations

from http import HTTPStatus

import falcon.asgi
import falcon.testing
import pytest

from herald.config import ConfigError
from herald.events import broker as broker_module
from tests.helpers.github_payloads import encode_payload, release_payload

_RELAY_ENV_VARS = (
    "HERALD_GITHUB_OWNER",
    "HERALD_GITHUB_REPO",
    "HERALD_ALL_RELEASES_CHANNEL",
    "HERALD_BREAKING_CHANGES_CHANNEL",
    "HERALD_SLACK_TOKEN_REF",
    "HERALD_SLACK_TIMEOUT_S",
    "HERALD_BROKER_URL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start each test without relay configuration or a cached broker."""
    for name in _RELAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(broker_module, "_configured_broker", None)


@pytest.fixture
def client() -> falcon.testing.TestClient:
    """Create a test client for the health-only runtime app."""
    from herald.runtime import create_app

    return falcon.testing.TestClient(create_app())


class TestHealthEndpoint:
    """Tests for the /health endpoint."""

    def test_health_returns_200(self, client: falcon.testing.TestClient) -> None:
        """GET /health returns HTTP 200."""
        result = client.simulate_get("/health")
        assert result.status_code == HTTPStatus.OK

    def test_health_returns_json_status_ok(
        self, client: falcon.testing.TestClient
    ) -> None:
        """GET /health returns JSON with status ok."""
        result = client.simulate_get("/health")
        assert result.json == {"status": "ok"}

    def test_health_content_type_is_json(
        self, client: falcon.testing.TestClient
    ) -> None:
        """GET /health has application/json content type."""
        result = client.simulate_get("/health")
        content_type = result.headers.get("content-type", "")
        assert content_type.startswith("application/json")


class TestHealthOnlyMode:
    """Tests for the runtime without ``HERALD_GITHUB_OWNER``."""

    def test_create_app_returns_falcon_app(self) -> None:
        """create_app returns a Falcon ASGI App instance."""
        from herald.runtime import create_app

        assert isinstance(create_app(), falcon.asgi.App)

    def test_ready_has_no_repository(self, client: falcon.testing.TestClient) -> None:
        """GET /ready reports readiness without a repository."""
        result = client.simulate_get("/ready")
        assert result.json == {"status": "ready"}

    def test_payload_not_served(self, client: falcon.testing.TestClient) -> None:
        """The webhook ingress is absent in health-only mode."""
        result = client.simulate_post("/payload", body="{}")
        assert result.status_code == HTTPStatus.NOT_FOUND


class TestRelayMode:
    """Tests for the runtime with relay configuration."""

    @pytest.fixture
    def relay_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Configure the relay for acme/widget."""
        monkeypatch.setenv("HERALD_GITHUB_OWNER", "acme")
        monkeypatch.setenv("HERALD_GITHUB_REPO", "widget")

    @pytest.mark.usefixtures("relay_env")
    def test_ready_reports_repository(self) -> None:
        """GET /ready names the relayed repository."""
        from herald.runtime import create_app

        client = falcon.testing.TestClient(create_app())
        result = client.simulate_get("/ready")
        assert result.json == {"status": "ready", "repository": "acme/widget"}

    @pytest.mark.usefixtures("relay_env")
    def test_payload_publishes_to_broker(self) -> None:
        """Accepted deliveries are enqueued for the Slack subscriber."""
        from herald.runtime import create_app

        client = falcon.testing.TestClient(create_app())
        result = client.simulate_post(
            "/payload",
            body=encode_payload(release_payload()),
            headers={"X-GitHub-Event": "release"},
        )

        assert result.text == "published release event"
        broker = broker_module.ensure_broker_configured()
        assert broker.queues["releases.slack"].qsize() == 1

    def test_owner_without_repo_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A partial repository configuration is rejected at startup."""
        from herald.runtime import create_app

        monkeypatch.setenv("HERALD_GITHUB_OWNER", "acme")
        with pytest.raises(ConfigError, match="HERALD_GITHUB_REPO"):
            create_app()


class TestParsePort:
    """Tests for ``HERALD_PORT`` validation."""

    @pytest.mark.parametrize("value", ["1", "8080", "65535"])
    def test_valid_ports(self, value: str) -> None:
        """Ports in range parse to integers."""
        from herald.runtime import _parse_port

        assert _parse_port(value) == int(value)

    @pytest.mark.parametrize("value", ["0", "65536", "http", ""])
    def test_invalid_ports_exit(self, value: str) -> None:
        """Out-of-range or non-numeric ports stop the process."""
        from herald.runtime import _parse_port

        with pytest.raises(SystemExit) as exc_info:
            _parse_port(value)
        assert exc_info.value.code == 1
