from __future__ import annotations

import logging

from web3 import Web3

from lendingdesk.chain.client import ChainClient
from lendingdesk.chain.units import (
    BASE_CURRENCY_DECIMALS,
    HEALTH_FACTOR_DECIMALS,
    MAX_UINT256,
    bps_to_percent,
    format_units,
    ray_to_percent,
)
from lendingdesk.config.assets import AssetRegistry
from lendingdesk.errors import ValidationError
from lendingdesk.schemas.chain import (
    AllowanceSnapshot,
    BalanceSnapshot,
    ReserveSnapshot,
    UserAccountSnapshot,
)

logger = logging.getLogger(__name__)

_RAY_DECIMALS = 27


class OnChainReader:
    """Decode raw pool reads into normalized snapshots. No caching, no retries."""

    def __init__(self, client: ChainClient, registry: AssetRegistry) -> None:
        self.client = client
        self.registry = registry

    async def reserve(self, asset_address: str) -> ReserveSnapshot:
        asset = self.registry.get(asset_address)
        if asset is None:
            raise ValidationError(f"Asset {asset_address} is not a supported reserve.")

        (
            _unbacked,
            _accrued_to_treasury,
            total_a_token,
            total_stable_debt,
            total_variable_debt,
            liquidity_rate,
            variable_borrow_rate,
            stable_borrow_rate,
            _average_stable_borrow_rate,
            liquidity_index,
            variable_borrow_index,
            last_update_timestamp,
        ) = await self.client.get_reserve_data(asset.address)

        # supplied minus borrowed is what the pool can still lend out
        available = max(total_a_token - total_stable_debt - total_variable_debt, 0)

        return ReserveSnapshot(
            asset=Web3.to_checksum_address(asset.address),
            available_liquidity=format_units(available, asset.decimals),
            total_variable_debt=format_units(total_variable_debt, asset.decimals),
            total_stable_debt=format_units(total_stable_debt, asset.decimals),
            liquidity_rate=ray_to_percent(liquidity_rate),
            variable_borrow_rate=ray_to_percent(variable_borrow_rate),
            stable_borrow_rate=ray_to_percent(stable_borrow_rate),
            liquidity_index=format_units(liquidity_index, _RAY_DECIMALS),
            variable_borrow_index=format_units(variable_borrow_index, _RAY_DECIMALS),
            last_update_timestamp=int(last_update_timestamp),
        )

    async def user_account(self, address: str) -> UserAccountSnapshot:
        (
            total_collateral,
            total_debt,
            available_borrows,
            liquidation_threshold,
            ltv,
            health_factor,
        ) = await self.client.get_user_account_data(address)

        health = None
        if health_factor != MAX_UINT256:
            health = format_units(health_factor, HEALTH_FACTOR_DECIMALS)

        return UserAccountSnapshot(
            total_collateral=format_units(total_collateral, BASE_CURRENCY_DECIMALS),
            total_debt=format_units(total_debt, BASE_CURRENCY_DECIMALS),
            available_borrows=format_units(available_borrows, BASE_CURRENCY_DECIMALS),
            liquidation_threshold=bps_to_percent(liquidation_threshold),
            ltv=bps_to_percent(ltv),
            health_factor=health,
        )

    async def balance(self, user_address: str, token_address: str) -> BalanceSnapshot:
        raw = await self.client.balance_of(token_address, user_address)
        decimals = await self._decimals(token_address)
        logger.debug("balanceOf %s for %s = %s (decimals=%s)", token_address, user_address, raw, decimals)
        return BalanceSnapshot(
            user_address=user_address,
            token_address=token_address,
            balance=format_units(raw, decimals),
        )

    async def allowance(
        self, user_address: str, token_address: str, spender: str
    ) -> AllowanceSnapshot:
        raw = await self.client.allowance(token_address, user_address, spender)
        decimals = await self._decimals(token_address)
        return AllowanceSnapshot(
            user_address=user_address,
            token_address=token_address,
            spender=Web3.to_checksum_address(spender),
            allowance=format_units(raw, decimals),
        )

    async def _decimals(self, token_address: str) -> int:
        asset = self.registry.get(token_address)
        if asset is not None:
            return asset.decimals
        return await self.client.decimals(token_address)
