"""Address extraction from free-text chat commands."""

import logging
from collections.abc import Callable, Iterable

from scalecodec.utils.ss58 import is_valid_ss58_address

logger = logging.getLogger(__name__)

COMMAND_TOKENS = ("/request", "/schedule", "/approve", "/milestone")

AddressValidator = Callable[[str, int], bool]


def is_valid_address(candidate: str, address_type: int) -> bool:
    """Check an SS58 address against a network address type.

    Parameters
    ----------
    candidate : str
        Address string to check.
    address_type : int
        SS58 format of the network.

    Returns
    -------
    bool
        True if the address decodes and carries the expected type.
    """
    return is_valid_ss58_address(candidate, valid_ss58_format=address_type)


class AddressExtractor:
    """Pull a ledger address out of a command message.

    Parameters
    ----------
    address_type : int
        SS58 format the address must carry.
    command_tokens : Iterable[str]
        Literal substrings removed from the message before validation.
    validator : AddressValidator
        Callable ``(candidate, address_type) -> bool``.
    """

    def __init__(
        self,
        address_type: int,
        command_tokens: Iterable[str] = COMMAND_TOKENS,
        validator: AddressValidator = is_valid_address,
    ):
        self._address_type = address_type
        self._command_tokens = tuple(command_tokens)
        self._validator = validator

    @property
    def address_type(self) -> int:
        return self._address_type

    def extract(self, raw_text: str | None) -> str | None:
        """Return the address in ``raw_text`` if it is valid, else None.

        Never raises: an unparsable message is an ordinary outcome.
        """
        if not raw_text:
            return None

        candidate = raw_text
        for token in self._command_tokens:
            candidate = candidate.replace(token, "")
        candidate = candidate.strip()
        if not candidate:
            return None

        try:
            valid = self._validator(candidate, self._address_type)
        except (ValueError, TypeError) as e:
            logger.debug("Address validation failed", extra={"candidate": candidate, "error": str(e)})
            return None

        return candidate if valid else None
