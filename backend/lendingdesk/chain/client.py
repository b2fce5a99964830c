"""Raw read access to the lending pool over JSON-RPC."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, Protocol, TypeVar

import aiohttp
from web3 import AsyncWeb3
from web3.exceptions import Web3Exception
from web3.providers import AsyncHTTPProvider

from lendingdesk.chain.abi import DATA_PROVIDER_ABI, ERC20_ABI, POOL_ABI
from lendingdesk.config.settings import Settings
from lendingdesk.errors import NetworkError, classify_chain_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChainClient(Protocol):
    """Read-only calls against the pool, its data provider and ERC-20 tokens."""

    async def get_reserve_data(self, asset: str) -> tuple[int, ...]: ...

    async def get_user_account_data(self, user: str) -> tuple[int, ...]: ...

    async def balance_of(self, token: str, user: str) -> int: ...

    async def allowance(self, token: str, owner: str, spender: str) -> int: ...

    async def decimals(self, token: str) -> int: ...


class Web3ChainClient:
    """ChainClient backed by web3's async HTTP provider. Every call is a single attempt."""

    def __init__(
        self,
        rpc_url: str,
        pool_address: str,
        data_provider_address: str,
        request_timeout: float = 30.0,
    ) -> None:
        provider = AsyncHTTPProvider(
            rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=request_timeout)},
            exception_retry_configuration=None,
        )
        self.w3 = AsyncWeb3(provider)
        self.pool = self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(pool_address), abi=POOL_ABI
        )
        self.data_provider = self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(data_provider_address),
            abi=DATA_PROVIDER_ABI,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Web3ChainClient":
        return cls(
            rpc_url=settings.rpc_url,
            pool_address=settings.contracts.pool,
            data_provider_address=settings.contracts.data_provider,
            request_timeout=settings.request_timeout,
        )

    async def _call(self, description: str, call: Awaitable[T]) -> T:
        try:
            return await call
        except (aiohttp.ClientError, asyncio.TimeoutError, ConnectionError) as exc:
            logger.warning("Node unreachable during %s: %s", description, exc)
            raise NetworkError(f"Network error during {description}: {exc}") from exc
        except (Web3Exception, ValueError) as exc:
            logger.warning("On-chain call %s failed: %s", description, exc)
            raise classify_chain_error(exc) from exc

    def _token(self, token: str) -> Any:
        return self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(token), abi=ERC20_ABI
        )

    async def get_reserve_data(self, asset: str) -> tuple[int, ...]:
        checksummed = AsyncWeb3.to_checksum_address(asset)
        result = await self._call(
            f"getReserveData({checksummed})",
            self.data_provider.functions.getReserveData(checksummed).call(),
        )
        return tuple(result)

    async def get_user_account_data(self, user: str) -> tuple[int, ...]:
        checksummed = AsyncWeb3.to_checksum_address(user)
        result = await self._call(
            f"getUserAccountData({checksummed})",
            self.pool.functions.getUserAccountData(checksummed).call(),
        )
        return tuple(result)

    async def balance_of(self, token: str, user: str) -> int:
        checksummed = AsyncWeb3.to_checksum_address(user)
        return int(
            await self._call(
                f"balanceOf({token}, {checksummed})",
                self._token(token).functions.balanceOf(checksummed).call(),
            )
        )

    async def allowance(self, token: str, owner: str, spender: str) -> int:
        owner = AsyncWeb3.to_checksum_address(owner)
        spender = AsyncWeb3.to_checksum_address(spender)
        return int(
            await self._call(
                f"allowance({token}, {owner}, {spender})",
                self._token(token).functions.allowance(owner, spender).call(),
            )
        )

    async def decimals(self, token: str) -> int:
        return int(
            await self._call(
                f"decimals({token})",
                self._token(token).functions.decimals().call(),
            )
        )

    async def close(self) -> None:
        await self.w3.provider.disconnect()
