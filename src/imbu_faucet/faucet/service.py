"""Faucet Service.

Coordinates all faucet components:
- Address extraction
- Rate limiter
- Ledger gateway and signing wallet
- Project workflow

Ledger calls block on network round trips, so they run in worker threads
and never while the rate limiter lock is held. Replies to successful writes
mean "submitted", not "finalised".
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from imbu_faucet.chain.errors import LedgerError
from imbu_faucet.chain.gateway import LedgerGateway
from imbu_faucet.chain.keys import MnemonicWallet, WalletProvider
from imbu_faucet.config import FaucetConfig
from imbu_faucet.observability.metrics import REQUEST_DURATION, REQUESTS, TOKENS_DISTRIBUTED

from .address import AddressExtractor
from .messages import FaucetMessages
from .rate_limiter import RateLimiter
from .workflow import ProjectWorkflow, WorkflowCommand, WorkflowOutcome

logger = logging.getLogger(__name__)

REQUEST_COMMAND = "request"


class RequestStatus(str, Enum):
    """Outcome of a chat command."""

    SUBMITTED = "submitted"
    INVALID_ADDRESS = "invalid_address"
    COOLDOWN_ACTIVE = "cooldown_active"
    PROJECT_NOT_FOUND = "project_not_found"
    NO_CONTRIBUTIONS = "no_contributions"
    NO_MILESTONES = "no_milestones"
    ALREADY_APPROVED = "already_approved"
    LEDGER_FAILURE = "ledger_failure"


@dataclass
class FaucetResult:
    """Result of a faucet or workflow command.

    ``message`` is None when nothing should be sent back to the user.
    """

    success: bool
    status: RequestStatus
    message: str | None
    address: str | None = None
    tx_hash: str | None = None


def scale_amount(amount: Decimal, decimals: int) -> int:
    """Convert a token amount into base units."""
    return int(amount * (Decimal(10) ** decimals))


class FaucetService:
    """Main faucet service orchestrating all components.

    Parameters
    ----------
    gateway : LedgerGateway
        Source of node sessions.
    wallet : WalletProvider
        Signing credential provider.
    rate_limiter : RateLimiter
        Per-user disbursement gate.
    extractor : AddressExtractor
        Parses addresses out of command text.
    workflow : ProjectWorkflow
        Project lifecycle rules.
    messages : FaucetMessages
        Reply texts.
    amount : Decimal
        Tokens sent per request.
    decimals : int
        Decimal exponent of the token.
    """

    def __init__(
        self,
        gateway: LedgerGateway,
        wallet: WalletProvider,
        rate_limiter: RateLimiter,
        extractor: AddressExtractor,
        workflow: ProjectWorkflow,
        messages: FaucetMessages,
        amount: Decimal,
        decimals: int,
    ):
        self._gateway = gateway
        self._wallet = wallet
        self._rate_limiter = rate_limiter
        self._extractor = extractor
        self._workflow = workflow
        self._messages = messages
        self._amount = amount
        self._decimals = decimals
        self._running = False

    @classmethod
    def from_config(
        cls,
        config: FaucetConfig,
        gateway: LedgerGateway | None = None,
    ) -> "FaucetService":
        """Wire a service and its collaborators from configuration.

        Parameters
        ----------
        config : FaucetConfig
            Loaded configuration.
        gateway : LedgerGateway | None
            Existing gateway to share, or None to create one.

        Returns
        -------
        FaucetService
            Service ready to start.
        """
        messages = FaucetMessages(
            faucet_name=config.faucet_name,
            token_name=config.token_name,
            address_type=config.address_type,
            cooldown_hours=config.time_limit_hours,
        )
        return cls(
            gateway=gateway
            or LedgerGateway(
                config.node_ws_url,
                ss58_format=config.address_type,
                type_registry=config.load_type_registry(),
            ),
            wallet=MnemonicWallet(config.mnemonic, config.address_type),
            rate_limiter=RateLimiter(
                cooldown_hours=config.time_limit_hours,
                cooldown_message=messages.cooldown,
            ),
            extractor=AddressExtractor(config.address_type),
            workflow=ProjectWorkflow(
                round_start_offset=config.round_start_offset,
                round_length=config.round_length,
            ),
            messages=messages,
            amount=config.amount,
            decimals=config.decimals,
        )

    @property
    def is_running(self) -> bool:
        """Check if the faucet service is running."""
        return self._running

    @property
    def gateway(self) -> LedgerGateway:
        return self._gateway

    @property
    def wallet(self) -> WalletProvider:
        return self._wallet

    @property
    def workflow(self) -> ProjectWorkflow:
        return self._workflow

    @property
    def extractor(self) -> AddressExtractor:
        return self._extractor

    @property
    def messages(self) -> FaucetMessages:
        return self._messages

    async def start(self) -> None:
        """Start the faucet service."""
        if self._running:
            logger.warning("Faucet service already running")
            return
        self._running = True
        logger.info("Faucet service started")

    async def stop(self) -> None:
        """Stop the faucet service."""
        if not self._running:
            return
        self._running = False
        logger.info("Faucet service stopped")

    def help_message(self) -> str:
        return self._messages.help

    def choose_token(self) -> str:
        # Multi-token selection is not implemented; reply with the options only.
        return self._messages.token_choice

    async def handle_request(
        self,
        user_id: str,
        raw_text: str,
        now: float | None = None,
    ) -> FaucetResult:
        """Handle a token request.

        Parameters
        ----------
        user_id : str
            User identifier for rate limiting.
        raw_text : str
            Command text containing the recipient address.
        now : float | None
            Request time in seconds since the epoch. Defaults to the clock.

        Returns
        -------
        FaucetResult
            Result of the request.
        """
        with REQUEST_DURATION.labels(command=REQUEST_COMMAND).time():
            result = await self._handle_request(user_id, raw_text, now)
        REQUESTS.labels(command=REQUEST_COMMAND, status=result.status.value).inc()
        return result

    async def _handle_request(self, user_id: str, raw_text: str, now: float | None) -> FaucetResult:
        address = self._extractor.extract(raw_text)
        if address is None:
            return FaucetResult(
                success=False,
                status=RequestStatus.INVALID_ADDRESS,
                message=self._messages.invalid_address,
            )

        now = time.time() if now is None else now
        grant = await self._rate_limiter.try_grant(user_id, now)
        if not grant.allowed:
            return FaucetResult(
                success=False,
                status=RequestStatus.COOLDOWN_ACTIVE,
                message=grant.reason,
                address=address,
            )

        try:
            tx_hash = await asyncio.to_thread(self.send_tokens, address)
        except LedgerError as e:
            logger.error(
                "Token transfer failed",
                extra={"user_id": user_id, "recipient": address, "error": str(e)},
                exc_info=True,
            )
            await self._rate_limiter.release(user_id, grant.granted_at)
            return FaucetResult(
                success=False,
                status=RequestStatus.LEDGER_FAILURE,
                message=self._messages.ledger_failure,
                address=address,
            )

        TOKENS_DISTRIBUTED.labels(token=self._messages.token_name).inc(float(self._amount))
        logger.info(
            "Tokens sent",
            extra={
                "user_id": user_id,
                "recipient": address,
                "amount": str(self._amount),
                "tx_hash": tx_hash,
            },
        )
        return FaucetResult(
            success=True,
            status=RequestStatus.SUBMITTED,
            message=self._messages.sending(self._amount, address),
            address=address,
            tx_hash=tx_hash,
        )

    def send_tokens(self, address: str) -> str:
        """Transfer the configured amount, bypassing the rate limiter (blocking)."""
        with self._gateway.session() as connection:
            keypair = self._wallet.get_keypair()
            amount = scale_amount(self._amount, self._decimals)
            logger.info(
                "Sending %s %s to %s",
                self._amount,
                self._messages.token_name,
                address,
            )
            return connection.transfer(keypair, address, amount)

    async def handle_workflow_command(
        self,
        command: WorkflowCommand,
        raw_text: str,
        user_id: str | None = None,
    ) -> FaucetResult:
        """Handle a project workflow command.

        Parameters
        ----------
        command : WorkflowCommand
            Which transition to attempt.
        raw_text : str
            Command text containing the project initiator's address.
        user_id : str | None
            Issuing user, for logging only.

        Returns
        -------
        FaucetResult
            Result of the command. When no project matches the address the
            result carries no message and nothing is sent back.
        """
        with REQUEST_DURATION.labels(command=command.value).time():
            result = await self._handle_workflow_command(command, raw_text, user_id)
        REQUESTS.labels(command=command.value, status=result.status.value).inc()
        return result

    async def _handle_workflow_command(
        self, command: WorkflowCommand, raw_text: str, user_id: str | None
    ) -> FaucetResult:
        address = self._extractor.extract(raw_text)
        if address is None:
            return FaucetResult(
                success=False,
                status=RequestStatus.INVALID_ADDRESS,
                message=self._messages.invalid_address,
            )

        try:
            outcome = await asyncio.to_thread(self._run_workflow, command, address)
        except LedgerError as e:
            logger.error(
                "Workflow command failed",
                extra={
                    "command": command.value,
                    "user_id": user_id,
                    "initiator": address,
                    "error": str(e),
                },
                exc_info=True,
            )
            return FaucetResult(
                success=False,
                status=RequestStatus.LEDGER_FAILURE,
                message=self._messages.ledger_failure,
                address=address,
            )

        if outcome is None:
            logger.warning(
                "No project found for initiator",
                extra={"command": command.value, "initiator": address},
            )
            return FaucetResult(
                success=False,
                status=RequestStatus.PROJECT_NOT_FOUND,
                message=None,
                address=address,
            )

        return FaucetResult(
            success=outcome.submitted,
            status=RequestStatus(outcome.status.value),
            message=outcome.message,
            address=address,
            tx_hash=outcome.tx_hash,
        )

    def _run_workflow(self, command: WorkflowCommand, address: str) -> WorkflowOutcome | None:
        with self._gateway.session() as connection:
            keypair = self._wallet.get_keypair()
            project = connection.find_project_by_initiator(address)
            if project is None:
                return None
            return self._workflow.run(command, connection, keypair, project)
