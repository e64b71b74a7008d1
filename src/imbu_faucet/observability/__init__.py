"""Observability module for the faucet."""

from .health import HealthCheck, HealthServer, HealthStatus, LedgerHealthCheck
from .logging import clear_request_id, configure_logging, set_request_id
from .metrics import (
    LEDGER_CALL_DURATION,
    REQUEST_DURATION,
    REQUESTS,
    SUBMISSIONS,
    TOKENS_DISTRIBUTED,
)

__all__ = [
    # Health
    "HealthCheck",
    "HealthServer",
    "HealthStatus",
    "LedgerHealthCheck",
    # Logging
    "clear_request_id",
    "configure_logging",
    "set_request_id",
    # Metrics
    "LEDGER_CALL_DURATION",
    "REQUEST_DURATION",
    "REQUESTS",
    "SUBMISSIONS",
    "TOKENS_DISTRIBUTED",
]
