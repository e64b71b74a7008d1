"""Configuration management for the faucet using Pydantic Settings."""

import json
from decimal import Decimal
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class FaucetConfig(BaseSettings):
    """Faucet service configuration loaded from environment variables.

    Every value without a default is required; a missing one raises
    ``pydantic.ValidationError`` when the config is constructed at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # Node
    node_ws_url: str = Field(alias="NODE_WS_URL")
    address_type: int = Field(alias="ADDRESS_TYPE", ge=0)
    types_file: str | None = Field(default=None, alias="TYPES_FILE")

    # Disbursement
    amount: Decimal = Field(alias="AMOUNT", gt=0)
    token_name: str = Field(alias="TOKEN_NAME")
    decimals: int = Field(alias="DECIMALS", ge=0)
    time_limit_hours: float = Field(alias="TIME_LIMIT_HOURS", ge=0)

    # Signing account
    mnemonic: SecretStr = Field(alias="MNEMONIC")

    # Funding rounds
    round_start_offset: int = Field(default=1, alias="ROUND_START_OFFSET", ge=0)
    round_length: int = Field(default=100, alias="ROUND_LENGTH", gt=0)

    # Chat
    faucet_name: str = Field(alias="FAUCET_NAME")
    slack_bot_token: SecretStr = Field(alias="SLACK_BOT_TOKEN")
    slack_app_token: SecretStr | None = Field(default=None, alias="SLACK_APP_TOKEN")

    # Observability
    metrics_port: int = Field(default=8080, alias="METRICS_PORT", ge=1, le=65535)
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    def load_type_registry(self) -> dict | None:
        """Load the custom type registry referenced by ``TYPES_FILE``.

        Returns
        -------
        dict | None
            Parsed registry, or None when no file is configured.

        Raises
        ------
        FileNotFoundError
            If the configured file does not exist.
        """
        if not self.types_file:
            return None
        path = Path(self.types_file).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Type registry file not found: {self.types_file}")
        return json.loads(path.read_text())
