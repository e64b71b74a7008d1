"""Token faucet and project funding workflow bot for Substrate chains."""

__version__ = "0.1.0"
