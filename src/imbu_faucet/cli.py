"""CLI subcommands for faucet operations.

Provides command-line interface for:
- Wallet operations (address)
- Chain diagnostics (info)
- Project inspection (show)
- Faucet operations (send)
- Workflow operations (schedule, approve, milestone)
"""

import argparse
import asyncio
import json
import sys
from decimal import Decimal

from imbu_faucet.chain.errors import LedgerError
from imbu_faucet.config import FaucetConfig
from imbu_faucet.faucet.messages import format_amount
from imbu_faucet.faucet.service import FaucetService, scale_amount
from imbu_faucet.faucet.workflow import WorkflowCommand, state_of


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="imbu-faucet",
        description="Token faucet and project funding workflow bot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--json", action="store_true", help="Output in JSON format")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would happen without submitting anything",
    )
    parser.add_argument(
        "--generate-mnemonic",
        metavar="FILE",
        help="Generate a new signing mnemonic and save it to FILE, then exit",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    wallet_parser = subparsers.add_parser("wallet", help="Wallet operations")
    wallet_sub = wallet_parser.add_subparsers(dest="wallet_command")
    wallet_sub.add_parser("address", help="Show the signing account address")

    chain_parser = subparsers.add_parser("chain", help="Chain diagnostics")
    chain_sub = chain_parser.add_subparsers(dest="chain_command")
    chain_sub.add_parser("info", help="Show chain, node and head block")

    project_parser = subparsers.add_parser("project", help="Project inspection")
    project_sub = project_parser.add_subparsers(dest="project_command")
    show_parser = project_sub.add_parser("show", help="Show the project of an initiator")
    show_parser.add_argument("address", type=str, help="Initiator address")

    faucet_parser = subparsers.add_parser("faucet", help="Faucet operations")
    faucet_sub = faucet_parser.add_subparsers(dest="faucet_command")
    send_parser = faucet_sub.add_parser("send", help="Send the configured amount to an address")
    send_parser.add_argument("address", type=str, help="Recipient address")

    workflow_parser = subparsers.add_parser("workflow", help="Project workflow operations")
    workflow_parser.add_argument(
        "workflow_command",
        choices=[c.value for c in WorkflowCommand],
        help="Transition to run",
    )
    workflow_parser.add_argument("address", type=str, help="Initiator address")

    subparsers.add_parser("run", help="Start the faucet bot")

    return parser


class CLIContext:
    """Shared context for CLI commands."""

    def __init__(self, config: FaucetConfig, dry_run: bool = False, json_output: bool = False):
        self.config = config
        self.dry_run = dry_run
        self.json_output = json_output
        self._service: FaucetService | None = None

    @property
    def service(self) -> FaucetService:
        """Get the faucet service (lazy loaded)."""
        if self._service is None:
            self._service = FaucetService.from_config(self.config)
        return self._service

    def output(self, data: dict) -> None:
        """Output data in the appropriate format."""
        if self.json_output:

            def decimal_default(obj):
                if isinstance(obj, Decimal):
                    return str(obj)
                raise TypeError(f"Object of type {type(obj)} is not JSON serializable")

            print(json.dumps(data, default=decimal_default, indent=2))
        else:
            self._print_formatted(data)

    def _print_formatted(self, data: dict, indent: int = 0) -> None:
        prefix = "  " * indent
        for key, value in data.items():
            if isinstance(value, dict):
                print(f"{prefix}{key}:")
                self._print_formatted(value, indent + 1)
            else:
                print(f"{prefix}{key}: {value}")


def cmd_wallet_address(ctx: CLIContext) -> int:
    """Show the signing account address."""
    try:
        ctx.output({"address": ctx.service.wallet.address})
        return 0
    except Exception as e:
        ctx.output({"error": str(e)})
        return 1


def cmd_chain_info(ctx: CLIContext) -> int:
    """Show chain identity and the current head."""
    try:
        with ctx.service.gateway.session() as connection:
            info = connection.chain_info
            head = connection.latest_block_number()
        ctx.output(
            {
                "chain": info.chain,
                "node": info.node_name,
                "version": info.node_version,
                "head": head,
                "url": ctx.config.node_ws_url,
            }
        )
        return 0
    except LedgerError as e:
        ctx.output({"error": str(e)})
        return 1


def cmd_project_show(ctx: CLIContext, address: str) -> int:
    """Show the newest project created by an initiator."""
    if ctx.service.extractor.extract(address) is None:
        ctx.output({"error": f"Invalid address: {address}"})
        return 1

    try:
        with ctx.service.gateway.session() as connection:
            project = connection.find_project_by_initiator(address)
    except LedgerError as e:
        ctx.output({"error": str(e)})
        return 1

    if project is None:
        ctx.output({"error": f"No project found for {address}"})
        return 1

    milestone = project.first_milestone
    ctx.output(
        {
            "key": project.key,
            "name": project.name,
            "initiator": project.initiator,
            "state": state_of(project).value,
            "contributions": len(project.contributions),
            "milestones": len(project.milestones),
            "first_milestone": {
                "name": milestone.name,
                "approved": milestone.is_approved,
                "percentage_to_unlock": milestone.percentage_to_unlock,
            }
            if milestone
            else None,
        }
    )
    return 0


def cmd_faucet_send(ctx: CLIContext, address: str) -> int:
    """Send the configured amount, bypassing the chat rate limit."""
    if ctx.service.extractor.extract(address) is None:
        ctx.output({"error": f"Invalid address: {address}"})
        return 1

    amount = ctx.config.amount
    if ctx.dry_run:
        ctx.output(
            {
                "dry_run": True,
                "action": "transfer",
                "to": address,
                "amount": amount,
                "base_units": scale_amount(amount, ctx.config.decimals),
                "message": f"Would send {format_amount(amount)} {ctx.config.token_name}",
            }
        )
        return 0

    try:
        tx_hash = ctx.service.send_tokens(address)
    except LedgerError as e:
        ctx.output({"error": str(e)})
        return 1

    ctx.output({"success": True, "action": "transfer", "to": address, "tx_hash": tx_hash})
    return 0


def cmd_workflow(ctx: CLIContext, command: WorkflowCommand, address: str) -> int:
    """Run a workflow transition, or show the project state with --dry-run."""
    if ctx.dry_run:
        return cmd_project_show(ctx, address)

    result = asyncio.run(ctx.service.handle_workflow_command(command, address))
    ctx.output(
        {
            "success": result.success,
            "status": result.status.value,
            "message": result.message or f"No project found for {address}",
            "tx_hash": result.tx_hash,
        }
    )
    return 0 if result.success else 1


def run_cli(args: argparse.Namespace) -> int:
    """Execute CLI command based on parsed arguments.

    Returns
    -------
    int
        Exit code: 0 for success, positive for error, -1 signals caller
        to show help (no CLI command specified).
    """
    try:
        config = FaucetConfig()
    except Exception as e:
        if args.json:
            print(json.dumps({"error": f"Configuration error: {e}"}))
        else:
            print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    ctx = CLIContext(config, dry_run=args.dry_run, json_output=args.json)

    if args.command == "wallet":
        if args.wallet_command == "address":
            return cmd_wallet_address(ctx)
        print("Usage: imbu-faucet wallet address", file=sys.stderr)
        return 1

    elif args.command == "chain":
        if args.chain_command == "info":
            return cmd_chain_info(ctx)
        print("Usage: imbu-faucet chain info", file=sys.stderr)
        return 1

    elif args.command == "project":
        if args.project_command == "show":
            return cmd_project_show(ctx, args.address)
        print("Usage: imbu-faucet project show <address>", file=sys.stderr)
        return 1

    elif args.command == "faucet":
        if args.faucet_command == "send":
            return cmd_faucet_send(ctx, args.address)
        print("Usage: imbu-faucet faucet send <address>", file=sys.stderr)
        return 1

    elif args.command == "workflow":
        return cmd_workflow(ctx, WorkflowCommand(args.workflow_command), args.address)

    return -1
