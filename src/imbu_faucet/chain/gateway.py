"""Substrate node gateway for faucet and project workflow operations.

Each logical operation runs inside ``LedgerGateway.session()``, which opens a
node connection and closes it on every exit path. Writes are submitted
without waiting for inclusion: the returned hash only means the node accepted
the extrinsic into its pending pool.

Every node fault leaves this module as a ``LedgerError``, so callers can
handle an outage without knowing the RPC client's exception types.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from substrateinterface import Keypair, SubstrateInterface
from substrateinterface.exceptions import SubstrateRequestException
from websocket import WebSocketException

from imbu_faucet.observability.metrics import LEDGER_CALL_DURATION, SUBMISSIONS

from .errors import NodeConnectionError, SubmissionError
from .models import ChainInfo, Project

logger = logging.getLogger(__name__)

PROJECTS_MODULE = "ImbueProposals"


class LedgerConnection:
    """An open session with the ledger node.

    Parameters
    ----------
    substrate : SubstrateInterface
        Connected substrate-interface client.
    chain_info : ChainInfo
        Identity reported by the node during the handshake.
    """

    def __init__(self, substrate: SubstrateInterface, chain_info: ChainInfo):
        self._substrate = substrate
        self._chain_info = chain_info
        self._closed = False

    @property
    def chain_info(self) -> ChainInfo:
        return self._chain_info

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close the underlying websocket. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        try:
            self._substrate.close()
        except Exception as e:
            logger.warning("Error closing node connection", extra={"error": str(e)})

    def list_projects(self) -> list[Project]:
        """Enumerate every project in storage, newest first.

        Returns
        -------
        list[Project]
            Projects ordered by descending project key.
        """
        with self._node_call("list_projects"):
            entries = self._substrate.query_map(module=PROJECTS_MODULE, storage_function="Projects")
            projects = [Project.from_chain(key.value, value.value) for key, value in entries]
        projects.sort(key=lambda p: p.key, reverse=True)
        return projects

    def find_project_by_initiator(self, address: str) -> Project | None:
        """Find the most recently created project of an initiator.

        There is no storage index by initiator, so every project is read and
        scanned linearly.

        Parameters
        ----------
        address : str
            SS58 address of the project creator.

        Returns
        -------
        Project | None
            The newest matching project, or None.
        """
        for project in self.list_projects():
            if project.initiator == address:
                return project
        return None

    def latest_block_number(self) -> int:
        """Get the block number of the current chain head."""
        with self._node_call("get_header"):
            header = self._substrate.get_block_header()
        return int(header["header"]["number"])

    def transfer(self, keypair: Keypair, to: str, amount: int) -> str:
        """Submit a balance transfer from the signing account.

        Parameters
        ----------
        keypair : Keypair
            Initialised signing credential.
        to : str
            Recipient SS58 address.
        amount : int
            Amount in base units (already scaled by the token decimals).

        Returns
        -------
        str
            Extrinsic hash of the submission.
        """
        return self._submit(
            "transfer",
            keypair,
            call_module="Balances",
            call_function="transfer",
            call_params={"dest": to, "value": amount},
        )

    def schedule_round(
        self,
        keypair: Keypair,
        project_keys: list[int],
        start_block: int,
        end_block: int,
    ) -> str:
        """Submit a privileged call opening a funding round.

        Parameters
        ----------
        keypair : Keypair
            Initialised signing credential with sudo rights.
        project_keys : list[int]
            Projects included in the round.
        start_block : int
            First block of the funding window.
        end_block : int
            Last block of the funding window.

        Returns
        -------
        str
            Extrinsic hash of the submission.
        """
        return self._submit(
            "schedule_round",
            keypair,
            call_module=PROJECTS_MODULE,
            call_function="schedule_round",
            call_params={
                "start": start_block,
                "end": end_block,
                "project_keys": list(project_keys),
            },
            sudo=True,
        )

    def approve_funding(
        self,
        keypair: Keypair,
        project_key: int,
        milestone_index: int | None = None,
    ) -> str:
        """Submit a privileged funding or milestone approval.

        Parameters
        ----------
        keypair : Keypair
            Initialised signing credential with sudo rights.
        project_key : int
            Project to approve.
        milestone_index : int | None
            Milestone to approve, or None to approve project funding.

        Returns
        -------
        str
            Extrinsic hash of the submission.
        """
        milestone_keys = None if milestone_index is None else [milestone_index]
        operation = "approve_funding" if milestone_index is None else "approve_milestone"
        return self._submit(
            operation,
            keypair,
            call_module=PROJECTS_MODULE,
            call_function="approve",
            call_params={"project_key": project_key, "milestone_keys": milestone_keys},
            sudo=True,
        )

    @contextmanager
    def _node_call(self, operation: str, write: bool = False) -> Iterator[None]:
        """Time a node round trip and map node faults onto ``LedgerError``.

        A request the node answers with an error is a ``SubmissionError``
        for writes and a ``NodeConnectionError`` for reads. A dropped or
        failing socket is always a ``NodeConnectionError``.
        """
        try:
            with LEDGER_CALL_DURATION.labels(operation=operation).time():
                yield
        except SubstrateRequestException as e:
            if write:
                logger.error(
                    "Extrinsic rejected by node",
                    extra={"operation": operation, "error": str(e)},
                )
                raise SubmissionError(f"{operation} rejected by node: {e}") from e
            logger.error("Node request failed", extra={"operation": operation, "error": str(e)})
            raise NodeConnectionError(f"{operation} failed: {e}") from e
        except (WebSocketException, OSError) as e:
            logger.error(
                "Node connection lost",
                extra={"operation": operation, "error": str(e)},
            )
            raise NodeConnectionError(f"{operation} lost the node connection: {e}") from e

    def _submit(
        self,
        operation: str,
        keypair: Keypair,
        call_module: str,
        call_function: str,
        call_params: dict,
        sudo: bool = False,
    ) -> str:
        with self._node_call(operation, write=True):
            call = self._substrate.compose_call(
                call_module=call_module,
                call_function=call_function,
                call_params=call_params,
            )
            if sudo:
                call = self._substrate.compose_call(
                    call_module="Sudo",
                    call_function="sudo",
                    call_params={"call": call.value},
                )
            extrinsic = self._substrate.create_signed_extrinsic(call=call, keypair=keypair)
            receipt = self._substrate.submit_extrinsic(extrinsic, wait_for_inclusion=False)

        SUBMISSIONS.labels(operation=operation).inc()
        logger.info(
            "Extrinsic submitted",
            extra={"operation": operation, "tx_hash": receipt.extrinsic_hash},
        )
        return receipt.extrinsic_hash


class LedgerGateway:
    """Factory of scoped sessions with a Substrate node.

    Parameters
    ----------
    url : str
        WebSocket endpoint of the node.
    ss58_format : int
        Address type of the network.
    type_registry : dict | None
        Optional custom type definitions for older runtimes.
    """

    def __init__(self, url: str, ss58_format: int, type_registry: dict | None = None):
        self._url = url
        self._ss58_format = ss58_format
        self._type_registry = type_registry

    @property
    def url(self) -> str:
        return self._url

    def connect(self) -> LedgerConnection:
        """Open a session and read the node's identity.

        Returns
        -------
        LedgerConnection
            The open session. The caller must close it.

        Raises
        ------
        NodeConnectionError
            If the node is unreachable or the handshake fails.
        """
        substrate = None
        try:
            with LEDGER_CALL_DURATION.labels(operation="connect").time():
                substrate = SubstrateInterface(
                    url=self._url,
                    ss58_format=self._ss58_format,
                    type_registry=self._type_registry,
                )
                chain_info = ChainInfo(
                    chain=str(substrate.chain),
                    node_name=str(substrate.name),
                    node_version=str(substrate.version),
                )
        except Exception as e:
            if substrate is not None:
                substrate.close()
            logger.error(
                "Failed to connect to ledger node",
                extra={"url": self._url, "error": str(e)},
            )
            raise NodeConnectionError(f"Cannot connect to {self._url}: {e}") from e

        logger.info(
            "Connected to chain %s using %s v%s",
            chain_info.chain,
            chain_info.node_name,
            chain_info.node_version,
        )
        return LedgerConnection(substrate, chain_info)

    @contextmanager
    def session(self) -> Iterator[LedgerConnection]:
        """Open a connection for one logical operation and always close it."""
        connection = self.connect()
        try:
            yield connection
        finally:
            connection.close()

    def ping(self) -> bool:
        """Check the node accepts a handshake."""
        try:
            with self.session():
                return True
        except NodeConnectionError:
            return False
