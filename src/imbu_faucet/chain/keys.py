"""Signing credential derivation for ledger writes."""

from abc import ABC, abstractmethod

from pydantic import SecretStr
from substrateinterface import Keypair, KeypairType

from .errors import CredentialError


def init_credential(mnemonic: str, ss58_format: int) -> Keypair:
    """Derive the sr25519 signing keypair for a secret phrase.

    Parameters
    ----------
    mnemonic : str
        BIP39 secret phrase of the signing account.
    ss58_format : int
        Address type of the target network.

    Returns
    -------
    Keypair
        Keypair able to sign extrinsics.

    Raises
    ------
    CredentialError
        If the mnemonic is malformed.
    """
    try:
        return Keypair.create_from_mnemonic(
            mnemonic,
            ss58_format=ss58_format,
            crypto_type=KeypairType.SR25519,
        )
    except ValueError as e:
        raise CredentialError(f"Invalid signing mnemonic: {e}") from e


class WalletProvider(ABC):
    """Abstract provider of the faucet's signing keypair."""

    @abstractmethod
    def get_keypair(self) -> Keypair:
        """Get the keypair used to sign extrinsics.

        Returns
        -------
        Keypair
            The signing keypair.
        """
        ...

    @property
    def address(self) -> str:
        """Get the SS58 address of the signing account."""
        return self.get_keypair().ss58_address


class MnemonicWallet(WalletProvider):
    """Derive the signing keypair from a mnemonic held in memory.

    The keypair is derived again on every call, so each logical ledger
    operation initialises its own credential before writing.

    Parameters
    ----------
    mnemonic : SecretStr
        The secret phrase.
    ss58_format : int
        Address type of the target network.
    """

    def __init__(self, mnemonic: SecretStr, ss58_format: int):
        self._mnemonic = mnemonic
        self._ss58_format = ss58_format

    def get_keypair(self) -> Keypair:
        return init_credential(self._mnemonic.get_secret_value(), self._ss58_format)
