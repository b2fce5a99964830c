from __future__ import annotations

import asyncio
import logging
import random

from lendingdesk.cache import SnapshotCache, cache_key, read_through
from lendingdesk.chain.reader import OnChainReader
from lendingdesk.config.assets import AssetRegistry
from lendingdesk.config.settings import Settings
from lendingdesk.schemas.analytics import AnalyticsResponse
from lendingdesk.schemas.asset import Asset
from lendingdesk.schemas.chain import (
    AllowanceSnapshot,
    BalanceSnapshot,
    ReserveSnapshot,
    ReserveView,
    UserAccountSnapshot,
)
from lendingdesk.scoring.analytics import build_analytics

logger = logging.getLogger(__name__)


class ReserveAggregator:
    """Cached fan-out over the on-chain reader.

    Registry-wide reads isolate failures per asset; single-entity reads let
    errors propagate to the caller.
    """

    def __init__(
        self,
        reader: OnChainReader,
        cache: SnapshotCache,
        registry: AssetRegistry,
        settings: Settings,
    ) -> None:
        self.reader = reader
        self.cache = cache
        self.registry = registry
        self.settings = settings

    async def reserve(self, asset: Asset) -> tuple[ReserveSnapshot, bool]:
        return await read_through(
            self.cache,
            cache_key("reserve", asset.address),
            self.settings.cache_ttl.reserve_data,
            lambda: self.reader.reserve(asset.address),
            ReserveSnapshot,
        )

    async def reserves(self) -> list[ReserveView]:
        assets = list(self.registry)
        results = await asyncio.gather(
            *(self.reserve(asset) for asset in assets), return_exceptions=True
        )

        views: list[ReserveView] = []
        for asset, result in zip(assets, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    "Dropping reserve %s (%s) from aggregation: %s",
                    asset.symbol,
                    asset.address,
                    result,
                )
                continue
            snapshot, _hit = result
            views.append(ReserveView.merge(asset, snapshot))

        logger.info("Aggregated %d of %d reserves", len(views), len(assets))
        return views

    async def user_account(self, address: str) -> tuple[UserAccountSnapshot, bool]:
        return await read_through(
            self.cache,
            cache_key("user", address),
            self.settings.cache_ttl.user_data,
            lambda: self.reader.user_account(address),
            UserAccountSnapshot,
        )

    async def balance(self, user_address: str, token_address: str) -> tuple[BalanceSnapshot, bool]:
        return await read_through(
            self.cache,
            cache_key("balance", user_address, token_address),
            self.settings.cache_ttl.balances,
            lambda: self.reader.balance(user_address, token_address),
            BalanceSnapshot,
        )

    async def allowance(
        self, user_address: str, token_address: str
    ) -> tuple[AllowanceSnapshot, bool]:
        """Cached ERC-20 allowance granted by ``user_address`` to the pool."""
        return await read_through(
            self.cache,
            cache_key("allowance", user_address, token_address),
            self.settings.cache_ttl.allowances,
            lambda: self.reader.allowance(
                user_address, token_address, self.settings.contracts.pool
            ),
            AllowanceSnapshot,
        )

    async def analytics(self, rng: random.Random | None = None) -> AnalyticsResponse:
        reserves = await self.reserves()
        return build_analytics(reserves, self.settings.analytics, rng=rng)
