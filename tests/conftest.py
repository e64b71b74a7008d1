"""Pytest configuration and fixtures for faucet tests."""

import os
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from helpers import ALICE, DEV_PHRASE, make_project

from imbu_faucet.faucet.messages import FaucetMessages

CONFIG_ENV_KEYS = (
    "NODE_WS_URL",
    "AMOUNT",
    "TOKEN_NAME",
    "ADDRESS_TYPE",
    "TIME_LIMIT_HOURS",
    "DECIMALS",
    "MNEMONIC",
    "FAUCET_NAME",
    "TYPES_FILE",
    "ROUND_START_OFFSET",
    "ROUND_LENGTH",
    "METRICS_PORT",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Clear faucet-related environment variables before each test."""
    for key in list(os.environ.keys()):
        if key in CONFIG_ENV_KEYS or key.startswith("SLACK_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def required_env(monkeypatch):
    """Set every required configuration variable."""
    values = {
        "NODE_WS_URL": "ws://127.0.0.1:9944",
        "AMOUNT": "100",
        "TOKEN_NAME": "IMBU",
        "ADDRESS_TYPE": "42",
        "TIME_LIMIT_HOURS": "1",
        "DECIMALS": "12",
        "MNEMONIC": DEV_PHRASE,
        "FAUCET_NAME": "Imbue Faucet",
        "SLACK_BOT_TOKEN": "xoxb-test",
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    return values


@pytest.fixture
def messages():
    """Reply texts for a 1 hour cooldown IMBU faucet."""
    return FaucetMessages(
        faucet_name="Imbue Faucet",
        token_name="IMBU",
        address_type=42,
        cooldown_hours=1.0,
    )


@pytest.fixture
def mock_connection():
    """Create a mock ledger connection."""
    connection = MagicMock()
    connection.latest_block_number.return_value = 1000
    connection.transfer.return_value = "0xtransfer"
    connection.schedule_round.return_value = "0xschedule"
    connection.approve_funding.return_value = "0xapprove"
    connection.find_project_by_initiator.return_value = make_project()
    return connection


@pytest.fixture
def mock_gateway(mock_connection):
    """Create a mock gateway whose sessions yield ``mock_connection``."""
    gateway = MagicMock()
    gateway.session.return_value.__enter__.return_value = mock_connection
    gateway.session.return_value.__exit__.return_value = False
    return gateway


@pytest.fixture
def mock_wallet():
    """Create a mock wallet."""
    wallet = MagicMock()
    wallet.get_keypair.return_value = MagicMock(name="keypair")
    wallet.address = ALICE
    return wallet


@pytest.fixture
def amount():
    return Decimal("100")
