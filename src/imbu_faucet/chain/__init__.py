"""Ledger integration for the faucet."""

from .errors import CredentialError, LedgerError, NodeConnectionError, SubmissionError
from .gateway import LedgerConnection, LedgerGateway
from .keys import MnemonicWallet, WalletProvider, init_credential
from .models import ChainInfo, Milestone, Project

__all__ = [
    "ChainInfo",
    "CredentialError",
    "LedgerConnection",
    "LedgerError",
    "LedgerGateway",
    "Milestone",
    "MnemonicWallet",
    "NodeConnectionError",
    "Project",
    "SubmissionError",
    "WalletProvider",
    "init_credential",
]
