"""Tests for health check endpoints."""

from unittest.mock import MagicMock

import pytest
from aiohttp.test_utils import TestClient, TestServer

from imbu_faucet.observability.health import (
    CheckResult,
    HealthCheck,
    HealthResult,
    HealthServer,
    HealthStatus,
    LedgerHealthCheck,
)


class TestHealthResult:
    """Tests for HealthResult dataclass."""

    def test_health_result_ok(self):
        assert HealthResult(status=HealthStatus.OK).to_dict() == {"status": "ok"}

    def test_health_result_with_checks(self):
        result = HealthResult(status=HealthStatus.NOT_READY, checks={"ledger": "ledger node unreachable"})

        assert result.to_dict() == {
            "status": "not_ready",
            "checks": {"ledger": "ledger node unreachable"},
        }


class StaticHealthCheck(HealthCheck):
    """Health check with a fixed outcome."""

    def __init__(self, name: str, status: HealthStatus, message: str | None = None):
        self._name = name
        self._status = status
        self._message = message

    @property
    def name(self) -> str:
        return self._name

    async def check(self) -> CheckResult:
        return CheckResult(name=self._name, status=self._status, message=self._message)


class FailingHealthCheck(HealthCheck):
    """Health check that raises an exception."""

    @property
    def name(self) -> str:
        return "failing"

    async def check(self) -> CheckResult:
        raise RuntimeError("Check failed")


class TestLedgerHealthCheck:
    """Tests for the ledger readiness check."""

    @pytest.mark.asyncio
    async def test_reachable(self):
        gateway = MagicMock()
        gateway.ping.return_value = True

        result = await LedgerHealthCheck(gateway).check()

        assert result.name == "ledger"
        assert result.status == HealthStatus.OK
        gateway.ping.assert_called_once()

    @pytest.mark.asyncio
    async def test_unreachable(self):
        gateway = MagicMock()
        gateway.ping.return_value = False

        result = await LedgerHealthCheck(gateway).check()

        assert result.status == HealthStatus.NOT_READY
        assert result.message == "ledger node unreachable"


class TestCheckReadiness:
    """Tests for aggregating readiness checks."""

    @pytest.mark.asyncio
    async def test_no_checks(self):
        result = await HealthServer().check_readiness()

        assert result.status == HealthStatus.OK
        assert result.checks == {}

    @pytest.mark.asyncio
    async def test_mixed_checks(self):
        server = HealthServer()
        server.add_check(StaticHealthCheck("slack", HealthStatus.OK))
        server.add_check(StaticHealthCheck("ledger", HealthStatus.NOT_READY, "down"))

        result = await server.check_readiness()

        assert result.status == HealthStatus.NOT_READY
        assert result.checks == {"slack": "ok", "ledger": "down"}

    @pytest.mark.asyncio
    async def test_raising_check(self):
        server = HealthServer()
        server.add_check(FailingHealthCheck())

        result = await server.check_readiness()

        assert result.status == HealthStatus.NOT_READY
        assert result.checks == {"failing": "error: RuntimeError: Check failed"}


class TestHealthServer:
    """Tests for HealthServer endpoints."""

    @pytest.fixture
    def health_server(self):
        return HealthServer()

    @pytest.fixture
    async def client(self, health_server):
        """Create test client with the HealthServer app."""
        client = TestClient(TestServer(health_server.create_app()))
        await client.start_server()
        yield client
        await client.close()

    @pytest.mark.asyncio
    async def test_health_endpoint_returns_ok(self, client):
        response = await client.get("/health")

        assert response.status == 200
        assert await response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_ready_endpoint_ok(self, client, health_server):
        health_server.add_check(StaticHealthCheck("ledger", HealthStatus.OK))

        response = await client.get("/ready")

        assert response.status == 200
        assert await response.json() == {"status": "ok", "checks": {"ledger": "ok"}}

    @pytest.mark.asyncio
    async def test_ready_endpoint_not_ready(self, client, health_server):
        gateway = MagicMock()
        gateway.ping.return_value = False
        health_server.add_check(LedgerHealthCheck(gateway))

        response = await client.get("/ready")

        assert response.status == 503
        body = await response.json()
        assert body["checks"] == {"ledger": "ledger node unreachable"}

    @pytest.mark.asyncio
    async def test_metrics_endpoint(self, client):
        response = await client.get("/metrics")

        assert response.status == 200
        assert "imbu_faucet_requests_total" in await response.text()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, health_server):
        await health_server.stop()
