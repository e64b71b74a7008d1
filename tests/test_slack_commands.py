"""Tests for Slack command handlers."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from helpers import ALICE

from imbu_faucet.faucet.service import FaucetResult, RequestStatus
from imbu_faucet.faucet.workflow import WorkflowCommand
from imbu_faucet.observability.logging import request_id_var
from imbu_faucet.slack.commands import SLASH_COMMANDS, register_commands


def _result(message="Sending 100 IMBU", status=RequestStatus.SUBMITTED):
    return FaucetResult(success=True, status=status, message=message, address=ALICE)


class TestRegisterCommands:
    """Tests for register_commands and command handlers."""

    @pytest.fixture
    def mock_app(self):
        """Create a mock Slack app."""
        app = MagicMock()
        app.command = MagicMock(return_value=lambda f: f)
        return app

    @pytest.fixture
    def mock_faucet(self):
        """Create a mock FaucetService."""
        faucet = MagicMock()
        faucet.handle_request = AsyncMock(return_value=_result())
        faucet.handle_workflow_command = AsyncMock(return_value=_result("scheduled"))
        faucet.help_message.return_value = "Welcome to the Imbue Faucet!"
        faucet.choose_token.return_value = "Please use the /imbu /kusd /ksm command"
        return faucet

    @pytest.fixture
    def handler(self, mock_app, mock_faucet):
        """Register commands and capture the shared handler."""
        captured = {}

        def capture_handler(cmd):
            def decorator(f):
                captured[cmd] = f
                return f

            return decorator

        mock_app.command = capture_handler
        register_commands(mock_app, mock_faucet)
        return captured["/request"]

    def test_registers_every_command(self, mock_app, mock_faucet):
        register_commands(mock_app, mock_faucet)

        registered = [c.args[0] for c in mock_app.command.call_args_list]
        assert registered == list(SLASH_COMMANDS)
        assert set(registered) == {
            "/request",
            "/schedule",
            "/approve",
            "/milestone",
            "/help",
            "/start",
            "/type",
        }

    @pytest.mark.asyncio
    async def test_request_command(self, handler, mock_faucet):
        """/request passes the user and text to the faucet."""
        ack = AsyncMock()
        respond = AsyncMock()
        command = {"command": "/request", "user_id": "U123", "text": ALICE}

        await handler(ack, command, respond)

        ack.assert_called_once()
        mock_faucet.handle_request.assert_called_once_with("U123", ALICE)
        reply = respond.call_args[0][0]
        assert reply["text"] == "Sending 100 IMBU"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("/schedule", WorkflowCommand.SCHEDULE),
            ("/approve", WorkflowCommand.APPROVE),
            ("/milestone", WorkflowCommand.MILESTONE),
        ],
    )
    async def test_workflow_commands(self, handler, mock_faucet, name, expected):
        respond = AsyncMock()
        command = {"command": name, "user_id": "U123", "text": ALICE}

        await handler(AsyncMock(), command, respond)

        mock_faucet.handle_workflow_command.assert_called_once_with(expected, ALICE, "U123")
        assert respond.call_args[0][0]["text"] == "scheduled"

    @pytest.mark.asyncio
    async def test_silent_result_sends_nothing(self, handler, mock_faucet):
        """A result without a message produces no reply."""
        mock_faucet.handle_workflow_command.return_value = FaucetResult(
            success=False, status=RequestStatus.PROJECT_NOT_FOUND, message=None
        )
        ack = AsyncMock()
        respond = AsyncMock()

        await handler(ack, {"command": "/approve", "user_id": "U1", "text": ALICE}, respond)

        ack.assert_called_once()
        respond.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["/help", "/start"])
    async def test_help_commands(self, handler, mock_faucet, name):
        respond = AsyncMock()

        await handler(AsyncMock(), {"command": name, "user_id": "U1", "text": ""}, respond)

        assert respond.call_args[0][0]["text"] == "Welcome to the Imbue Faucet!"
        mock_faucet.handle_request.assert_not_called()

    @pytest.mark.asyncio
    async def test_type_command(self, handler, mock_faucet):
        respond = AsyncMock()

        await handler(AsyncMock(), {"command": "/type", "user_id": "U1", "text": ""}, respond)

        mock_faucet.choose_token.assert_called_once()
        assert "/imbu /kusd /ksm" in respond.call_args[0][0]["text"]

    @pytest.mark.asyncio
    async def test_unknown_command(self, handler):
        respond = AsyncMock()

        await handler(AsyncMock(), {"command": "/bogus", "user_id": "U1", "text": ""}, respond)

        text = respond.call_args[0][0]["text"]
        assert text.startswith(":x: Unknown command: `/bogus`")

    @pytest.mark.asyncio
    async def test_exception_handling(self, handler, mock_faucet):
        """Unexpected errors produce a generic reply."""
        mock_faucet.handle_request.side_effect = RuntimeError("boom")
        respond = AsyncMock()

        await handler(AsyncMock(), {"command": "/request", "user_id": "U1", "text": ALICE}, respond)

        text = respond.call_args[0][0]["text"]
        assert "An unexpected error occurred" in text
        assert "boom" not in text

    @pytest.mark.asyncio
    async def test_request_id_cleared(self, handler):
        await handler(
            AsyncMock(), {"command": "/request", "user_id": "U1", "text": ALICE}, AsyncMock()
        )

        assert request_id_var.get() is None
