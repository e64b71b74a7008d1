"""User-facing reply texts."""

from dataclasses import dataclass
from decimal import Decimal

from .rate_limiter import default_cooldown_message


def format_amount(amount: Decimal) -> str:
    """Render an amount without exponent or trailing zeros."""
    return format(amount.normalize(), "f")


@dataclass(frozen=True)
class FaucetMessages:
    """Reply texts derived from the faucet configuration."""

    faucet_name: str
    token_name: str
    address_type: int
    cooldown_hours: float

    @property
    def help(self) -> str:
        return (
            f"Welcome to the {self.faucet_name}!\n"
            "To request for tokens send the message:\n\n"
            '"/request ADDRESS"\n\n'
            "To open your project for funding send the message:\n"
            '"/schedule ADDRESS"\n\n'
            "To approve your project's funding send the message:\n"
            '"/approve ADDRESS"\n\n'
            "To approve your project's first milestone send the message:\n"
            '"/milestone ADDRESS"\n\n'
            f"with your correct {self.token_name} address."
        )

    @property
    def cooldown(self) -> str:
        return default_cooldown_message(self.cooldown_hours)

    @property
    def invalid_address(self) -> str:
        return (
            "Invalid address! Please use the generic substrate format "
            f"with address type {self.address_type}!"
        )

    @property
    def ledger_failure(self) -> str:
        return "Sorry, the request could not be submitted to the network. Please try again later."

    @property
    def token_choice(self) -> str:
        return "Please use the /imbu /kusd /ksm command to choose a token"

    def sending(self, amount: Decimal, address: str) -> str:
        return f"Sending {format_amount(amount)} {self.token_name} to {address}!"
