import asyncio

import pytest
from conftest import POOL, RAY, TOKEN, USDC, USER, WETH, FakeChainClient, reserve_tuple

from lendingdesk.chain.reader import OnChainReader
from lendingdesk.chain.units import MAX_UINT256
from lendingdesk.config.assets import AssetRegistry
from lendingdesk.errors import NetworkError, ValidationError


def test_reserve_snapshot_is_normalized(registry: AssetRegistry) -> None:
    client = FakeChainClient(
        reserves={
            USDC.address: reserve_tuple(
                800 * 10**6,
                200 * 10**6,
                liquidity_rate=RAY // 20,
                variable_borrow_rate=RAY // 10,
                stable_borrow_rate=RAY // 8,
                timestamp=1_712_345_678,
            )
        }
    )
    reader = OnChainReader(client, registry)

    snapshot = asyncio.run(reader.reserve(USDC.address.lower()))

    assert snapshot.asset == USDC.address
    assert snapshot.available_liquidity == "800.0"
    assert snapshot.total_variable_debt == "200.0"
    assert snapshot.total_stable_debt == "0.0"
    assert snapshot.liquidity_rate == pytest.approx(5.0)
    assert snapshot.variable_borrow_rate == pytest.approx(10.0)
    assert snapshot.stable_borrow_rate == pytest.approx(12.5)
    assert snapshot.liquidity_index == "1.0"
    assert snapshot.last_update_timestamp == 1_712_345_678


def test_reserve_outside_registry_is_rejected_before_any_read(registry: AssetRegistry) -> None:
    client = FakeChainClient()
    reader = OnChainReader(client, registry)

    with pytest.raises(ValidationError):
        asyncio.run(reader.reserve(TOKEN))
    assert client.calls == []


def test_user_account_uses_base_currency_units(registry: AssetRegistry) -> None:
    client = FakeChainClient(
        accounts={
            USER: (
                150_000 * 10**8,
                50_000 * 10**8,
                62_500 * 10**8,
                8250,
                8000,
                2_475_000_000_000_000_000,
            )
        }
    )
    reader = OnChainReader(client, registry)

    snapshot = asyncio.run(reader.user_account(USER))

    assert snapshot.total_collateral == "150000.0"
    assert snapshot.total_debt == "50000.0"
    assert snapshot.available_borrows == "62500.0"
    assert snapshot.liquidation_threshold == 82.5
    assert snapshot.ltv == 80.0
    assert snapshot.health_factor == "2.475"


def test_user_account_without_debt_has_no_health_factor(registry: AssetRegistry) -> None:
    client = FakeChainClient(accounts={USER: (10**8, 0, 0, 0, 0, MAX_UINT256)})
    snapshot = asyncio.run(OnChainReader(client, registry).user_account(USER))
    assert snapshot.health_factor is None


def test_balance_reads_decimals_for_unknown_tokens(registry: AssetRegistry) -> None:
    client = FakeChainClient(balances={(TOKEN, USER): 1_000_000}, decimals={TOKEN: 6})

    snapshot = asyncio.run(OnChainReader(client, registry).balance(USER, TOKEN))

    assert snapshot.balance == "1.0"
    assert ("decimals", TOKEN) in client.calls


def test_balance_uses_registry_decimals_for_known_tokens(registry: AssetRegistry) -> None:
    client = FakeChainClient(balances={(WETH.address, USER): 15 * 10**17})

    snapshot = asyncio.run(OnChainReader(client, registry).balance(USER, WETH.address))

    assert snapshot.balance == "1.5"
    assert not any(call[0] == "decimals" for call in client.calls)


def test_read_errors_propagate(registry: AssetRegistry) -> None:
    client = FakeChainClient(accounts={USER: NetworkError("node unreachable")})

    with pytest.raises(NetworkError):
        asyncio.run(OnChainReader(client, registry).user_account(USER))


def test_allowance_is_scaled_by_token_decimals(registry: AssetRegistry) -> None:
    client = FakeChainClient(allowances={(USDC.address, USER, POOL): 250 * 10**6})

    snapshot = asyncio.run(OnChainReader(client, registry).allowance(USER, USDC.address, POOL.lower()))

    assert snapshot.allowance == "250.0"
    assert snapshot.spender == POOL
    assert ("allowance", USDC.address.lower(), USER, POOL.lower()) in client.calls


def test_allowance_for_unknown_token_reads_decimals(registry: AssetRegistry) -> None:
    client = FakeChainClient(allowances={(TOKEN, USER, POOL): 5 * 10**17}, decimals={TOKEN: 18})

    snapshot = asyncio.run(OnChainReader(client, registry).allowance(USER, TOKEN, POOL))

    assert snapshot.allowance == "0.5"
