from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lendingdesk.schemas.asset import Asset


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ReserveFields(CamelModel):
    available_liquidity: str
    total_variable_debt: str
    total_stable_debt: str
    # percentages
    liquidity_rate: float
    variable_borrow_rate: float
    stable_borrow_rate: float
    liquidity_index: str
    variable_borrow_index: str
    last_update_timestamp: int


class ReserveSnapshot(ReserveFields):
    asset: str


class ReserveView(ReserveFields):
    """Reserve snapshot merged with the registry metadata of its asset."""

    asset: Asset

    @classmethod
    def merge(cls, asset: Asset, snapshot: ReserveSnapshot) -> "ReserveView":
        return cls(asset=asset, **snapshot.model_dump(exclude={"asset"}))


class UserAccountSnapshot(CamelModel):
    total_collateral: str
    total_debt: str
    available_borrows: str
    liquidation_threshold: float
    ltv: float
    # None when the account carries no debt
    health_factor: str | None = None


class BalanceSnapshot(CamelModel):
    user_address: str
    token_address: str
    balance: str


class AllowanceSnapshot(CamelModel):
    user_address: str
    token_address: str
    spender: str
    allowance: str


class UnsignedTransaction(CamelModel):
    from_address: str = Field(alias="from")
    to: str
    data: str
    value: str = "0"
