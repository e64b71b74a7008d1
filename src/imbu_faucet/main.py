#!/usr/bin/env python3
"""Faucet and project funding workflow bot.

Entry point for the service.
"""

import asyncio
import logging
import os
import signal
import sys
import tempfile
from pathlib import Path

from substrateinterface import Keypair

from imbu_faucet.chain.keys import init_credential
from imbu_faucet.cli import create_parser, run_cli
from imbu_faucet.config import FaucetConfig
from imbu_faucet.faucet import FaucetService
from imbu_faucet.observability.health import HealthServer, LedgerHealthCheck
from imbu_faucet.observability.logging import configure_logging
from imbu_faucet.slack.adapter import SlackAdapter
from imbu_faucet.slack.commands import register_commands


def generate_mnemonic(output_path: str, ss58_format: int = 42) -> str:
    """Generate a new signing mnemonic and save it to a file.

    Parameters
    ----------
    output_path : str
        Path to save the mnemonic file.
    ss58_format : int
        Address type used to display the derived address.

    Returns
    -------
    str
        SS58 address of the new account.
    """
    mnemonic = Keypair.generate_mnemonic()
    keypair = init_credential(mnemonic, ss58_format)

    # Write atomically with restrictive permissions: temp file in the same
    # directory, then rename.
    key_path = Path(output_path)
    key_path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(dir=key_path.parent, prefix=".faucet-mnemonic-")
    fd_closed = False
    try:
        os.fchmod(fd, 0o600)
        os.write(fd, mnemonic.encode())
        os.close(fd)
        fd_closed = True
        os.rename(temp_path, key_path)
    except Exception:
        if not fd_closed:
            os.close(fd)
        Path(temp_path).unlink(missing_ok=True)
        raise

    print(f"""
Signing account generated successfully!

  Address:  {keypair.ss58_address}
  Mnemonic: {key_path.absolute()}

Next steps:

  1. Fund this address and give it sudo rights on your target network

  2. Launch the faucet with this account:

     export MNEMONIC="$(cat {key_path.absolute()})"
     imbu-faucet run

IMPORTANT: Keep this mnemonic secure. Anyone with access can control the account.
""")
    return keypair.ss58_address


def parse_args():
    """Parse command line arguments."""
    return create_parser().parse_args()


async def run_service() -> None:
    """Run the faucet bot (long-running mode).

    Wires up and starts all service components:
    - HealthServer for probes and metrics
    - FaucetService with its ledger gateway, wallet and rate limiter
    - SlackAdapter for Slack Socket Mode
    """
    # Missing required settings raise here, before anything connects.
    config = FaucetConfig()
    configure_logging(level=config.log_level, log_format=config.log_format)

    logger = logging.getLogger(__name__)
    logger.info("Faucet starting")
    logger.info("Node endpoint: %s", config.node_ws_url)
    logger.info(
        "Disbursement: %s %s every %s hours",
        config.amount,
        config.token_name,
        config.time_limit_hours,
    )

    if not config.slack_app_token:
        logger.error("Missing Slack app token. Set SLACK_APP_TOKEN for Socket Mode")
        sys.exit(1)

    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def on_shutdown_signal(sig_name: str) -> None:
        logger.info("Received signal %s, initiating shutdown", sig_name)
        shutdown_event.set()

    loop.add_signal_handler(signal.SIGTERM, lambda: on_shutdown_signal("SIGTERM"))
    loop.add_signal_handler(signal.SIGINT, lambda: on_shutdown_signal("SIGINT"))

    faucet = FaucetService.from_config(config)
    logger.info("Signing account: %s", faucet.wallet.address)

    health_server = HealthServer(port=config.metrics_port)
    health_server.add_check(LedgerHealthCheck(faucet.gateway))
    await health_server.start()
    logger.info("Health server started on port %d", config.metrics_port)

    await faucet.start()

    slack_adapter = SlackAdapter(
        bot_token=config.slack_bot_token,
        app_token=config.slack_app_token,
    )
    register_commands(slack_adapter.app, faucet)
    logger.info("Slack commands registered")

    await slack_adapter.start()
    logger.info("Faucet ready")

    await shutdown_event.wait()

    logger.info("Faucet shutting down...")
    await slack_adapter.stop()
    await faucet.stop()
    await health_server.stop()
    logger.info("Faucet shutdown complete")


async def main() -> None:
    """Main entry point."""
    args = parse_args()

    if args.generate_mnemonic:
        generate_mnemonic(args.generate_mnemonic)
        return

    if args.command and args.command != "run":
        exit_code = run_cli(args)
        if exit_code >= 0:
            sys.exit(exit_code)
        create_parser().print_help()
        sys.exit(0)

    await run_service()


def entrypoint() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    entrypoint()
