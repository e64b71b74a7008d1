"""Exceptions raised at the ledger boundary."""


class LedgerError(Exception):
    """Base class for faults talking to the ledger node."""


class NodeConnectionError(LedgerError):
    """The node is unreachable or rejected the handshake."""


class SubmissionError(LedgerError):
    """The node rejected an extrinsic before it entered the pending pool."""


class CredentialError(LedgerError):
    """The signing mnemonic could not be turned into a keypair."""
