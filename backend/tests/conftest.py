"""Shared fakes and fixtures: an in-memory Redis with a manual clock and a scripted chain client."""
from __future__ import annotations

import pytest

from lendingdesk.aggregation.aggregator import ReserveAggregator
from lendingdesk.cache import SnapshotCache
from lendingdesk.chain.reader import OnChainReader
from lendingdesk.config.assets import DEFAULT_ASSETS, AssetRegistry
from lendingdesk.config.settings import Settings

RAY = 10**27

USDC = DEFAULT_ASSETS[0]
USDT = DEFAULT_ASSETS[1]
DAI = DEFAULT_ASSETS[2]
WETH = DEFAULT_ASSETS[3]
WBTC = DEFAULT_ASSETS[4]

USER = "0x" + "a" * 40
TOKEN = "0x" + "b" * 40
POOL = "0x87870Bca3F3fD6335C3F4ce8392D69350B4fA4E2"


class FakeRedis:
    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.expirations: dict[str, int] = {}
        self.expires_at: dict[str, float] = {}
        self.now = 0.0
        self.closed = False

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def get(self, key: str) -> str | None:
        if key in self.expires_at and self.now >= self.expires_at[key]:
            self._drop(key)
        return self.store.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.store[key] = value
        self.expirations[key] = ttl
        self.expires_at[key] = self.now + ttl

    async def delete(self, key: str) -> None:
        self._drop(key)

    async def aclose(self) -> None:
        self.closed = True

    def _drop(self, key: str) -> None:
        self.store.pop(key, None)
        self.expirations.pop(key, None)
        self.expires_at.pop(key, None)


class BrokenRedis:
    async def get(self, key: str) -> str | None:
        raise ConnectionError("redis down")

    async def setex(self, key: str, ttl: int, value: str) -> None:
        raise ConnectionError("redis down")

    async def delete(self, key: str) -> None:
        raise ConnectionError("redis down")


def reserve_tuple(
    available: int,
    variable_debt: int,
    stable_debt: int = 0,
    liquidity_rate: int = 0,
    variable_borrow_rate: int = 0,
    stable_borrow_rate: int = 0,
    timestamp: int = 1_700_000_000,
) -> tuple[int, ...]:
    """Data-provider getReserveData output for a reserve with ``available`` idle liquidity."""
    total_a_token = available + variable_debt + stable_debt
    return (
        0,
        0,
        total_a_token,
        stable_debt,
        variable_debt,
        liquidity_rate,
        variable_borrow_rate,
        stable_borrow_rate,
        0,
        RAY,
        RAY,
        timestamp,
    )


class FakeChainClient:
    """Scripted ChainClient; an Exception stored as a value is raised on read."""

    def __init__(
        self,
        reserves: dict[str, object] | None = None,
        accounts: dict[str, object] | None = None,
        balances: dict[tuple[str, str], object] | None = None,
        decimals: dict[str, int] | None = None,
        allowances: dict[tuple[str, str, str], object] | None = None,
    ) -> None:
        self.reserves = {k.lower(): v for k, v in (reserves or {}).items()}
        self.accounts = {k.lower(): v for k, v in (accounts or {}).items()}
        self.balances = {(t.lower(), u.lower()): v for (t, u), v in (balances or {}).items()}
        self.decimals_by_token = {k.lower(): v for k, v in (decimals or {}).items()}
        self.allowances = {
            (t.lower(), o.lower(), s.lower()): v for (t, o, s), v in (allowances or {}).items()
        }
        self.calls: list[tuple[str, ...]] = []

    @staticmethod
    def _resolve(value: object) -> object:
        if isinstance(value, Exception):
            raise value
        return value

    async def get_reserve_data(self, asset: str) -> tuple[int, ...]:
        self.calls.append(("reserve", asset.lower()))
        if asset.lower() not in self.reserves:
            raise RuntimeError(f"no reserve scripted for {asset}")
        return self._resolve(self.reserves[asset.lower()])  # type: ignore[return-value]

    async def get_user_account_data(self, user: str) -> tuple[int, ...]:
        self.calls.append(("account", user.lower()))
        return self._resolve(self.accounts[user.lower()])  # type: ignore[return-value]

    async def balance_of(self, token: str, user: str) -> int:
        self.calls.append(("balance", token.lower(), user.lower()))
        return self._resolve(self.balances[(token.lower(), user.lower())])  # type: ignore[return-value]

    async def allowance(self, token: str, owner: str, spender: str) -> int:
        self.calls.append(("allowance", token.lower(), owner.lower(), spender.lower()))
        return self._resolve(self.allowances[(token.lower(), owner.lower(), spender.lower())])  # type: ignore[return-value]

    async def decimals(self, token: str) -> int:
        self.calls.append(("decimals", token.lower()))
        return self.decimals_by_token[token.lower()]


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(_env_file=None, environment="production")


@pytest.fixture()
def registry() -> AssetRegistry:
    return AssetRegistry(DEFAULT_ASSETS)


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def cache(fake_redis: FakeRedis) -> SnapshotCache:
    return SnapshotCache(fake_redis)  # type: ignore[arg-type]


@pytest.fixture()
def all_reserves() -> dict[str, object]:
    return {
        USDC.address: reserve_tuple(800 * 10**6, 200 * 10**6, liquidity_rate=3 * RAY // 100),
        USDT.address: reserve_tuple(500 * 10**6, 500 * 10**6),
        DAI.address: reserve_tuple(100 * 10**18, 900 * 10**18),
        WETH.address: reserve_tuple(10 * 10**18, 0),
        WBTC.address: reserve_tuple(0, 0),
    }


@pytest.fixture()
def chain_client(all_reserves: dict[str, object]) -> FakeChainClient:
    return FakeChainClient(reserves=all_reserves)


@pytest.fixture()
def aggregator(
    chain_client: FakeChainClient,
    cache: SnapshotCache,
    registry: AssetRegistry,
    test_settings: Settings,
) -> ReserveAggregator:
    return ReserveAggregator(
        reader=OnChainReader(chain_client, registry),
        cache=cache,
        registry=registry,
        settings=test_settings,
    )
