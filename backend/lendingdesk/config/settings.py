from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lendingdesk.config.assets import DEFAULT_ASSETS
from lendingdesk.schemas.asset import Asset

MAINNET_CHAIN_ID = 1


class ContractSettings(BaseModel):
    # Aave V3 Ethereum mainnet deployment
    pool: str = "0x87870Bca3F3fD6335C3F4ce8392D69350B4fA4E2"
    data_provider: str = "0x7B4EB56E7CD4b454BA8ff71E4518426369a138a3"


class CacheTTLSettings(BaseModel):
    user_data: int = 30
    reserve_data: int = 60
    balances: int = 30
    allowances: int = 30


class AnalyticsSettings(BaseModel):
    tvl_window_days: int = 7
    tvl_jitter: float = 0.1
    medium_risk_utilization: float = 75.0
    liquidation_threshold: float = 80.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LENDINGDESK_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    rpc_url: str = Field(
        default="https://eth-mainnet.g.alchemy.com/v2/demo",
        validation_alias=AliasChoices("RPC_URL", "LENDINGDESK_RPC_URL"),
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("REDIS_URL", "LENDINGDESK_REDIS_URL"),
    )
    redis_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("REDIS_TOKEN", "LENDINGDESK_REDIS_TOKEN"),
    )
    chain_id: int = MAINNET_CHAIN_ID
    request_timeout: float = 30.0
    environment: str = "production"
    log_level: str = "INFO"

    contracts: ContractSettings = Field(default_factory=ContractSettings)
    cache_ttl: CacheTTLSettings = Field(default_factory=CacheTTLSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    assets: list[Asset] = Field(default_factory=lambda: list(DEFAULT_ASSETS))

    @field_validator("chain_id")
    @classmethod
    def _mainnet_only(cls, value: int) -> int:
        if value != MAINNET_CHAIN_ID:
            raise ValueError(f"Only Ethereum mainnet (chain id {MAINNET_CHAIN_ID}) is supported.")
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"


settings = Settings()
