"""Slack command handlers for the faucet.

Commands:
- /request <address> - Request tokens
- /schedule <address> - Open a funding round for the address's project
- /approve <address> - Approve the project's funding
- /milestone <address> - Approve the project's first milestone
- /help, /start - Show help message
- /type - Token selection (not implemented yet)
"""

import logging
import uuid

from slack_bolt.async_app import AsyncApp

from imbu_faucet.faucet.service import FaucetService
from imbu_faucet.faucet.workflow import WorkflowCommand
from imbu_faucet.observability.logging import clear_request_id, set_request_id

from .formatter import MessageFormatter

logger = logging.getLogger(__name__)

REQUEST_COMMAND = "/request"
HELP_COMMANDS = ("/help", "/start")
TYPE_COMMAND = "/type"

WORKFLOW_COMMANDS = {
    "/schedule": WorkflowCommand.SCHEDULE,
    "/approve": WorkflowCommand.APPROVE,
    "/milestone": WorkflowCommand.MILESTONE,
}

SLASH_COMMANDS = (REQUEST_COMMAND, *WORKFLOW_COMMANDS, *HELP_COMMANDS, TYPE_COMMAND)


async def _dispatch(
    faucet: FaucetService,
    formatter: MessageFormatter,
    name: str,
    user_id: str,
    text: str,
) -> dict | None:
    """Run one command and build its reply, or None for no reply."""
    if name == REQUEST_COMMAND:
        result = await faucet.handle_request(user_id, text)
        return formatter.format_result(result)

    if name in WORKFLOW_COMMANDS:
        result = await faucet.handle_workflow_command(WORKFLOW_COMMANDS[name], text, user_id)
        return formatter.format_result(result)

    if name in HELP_COMMANDS:
        return formatter.format_text(faucet.help_message())

    if name == TYPE_COMMAND:
        return formatter.format_text(faucet.choose_token())

    return formatter.format_error(f"Unknown command: `{name}`. Use `/help` for available commands.")


def register_commands(
    app: AsyncApp,
    faucet: FaucetService,
    formatter: MessageFormatter | None = None,
) -> None:
    """Register all faucet slash commands with the Slack app.

    Parameters
    ----------
    app : AsyncApp
        Slack Bolt async app instance.
    faucet : FaucetService
        Faucet service for handling requests.
    formatter : MessageFormatter | None
        Reply formatter.
    """
    formatter = formatter or MessageFormatter()

    async def handle_command(ack, command, respond):
        """Handle any faucet slash command."""
        await ack()

        name = command.get("command", "")
        set_request_id(str(uuid.uuid4()))
        try:
            user_id = command["user_id"]
            text = command.get("text", "")

            logger.info(
                "Received command",
                extra={"command": name, "user_id": user_id, "command_args": text},
            )

            reply = await _dispatch(faucet, formatter, name, user_id, text)
            if reply is not None:
                await respond(reply)
        except Exception:
            logger.exception("Error handling command", extra={"command": name})
            await respond(formatter.format_error("An unexpected error occurred. Please try again."))
        finally:
            clear_request_id()

    for name in SLASH_COMMANDS:
        app.command(name)(handle_command)
