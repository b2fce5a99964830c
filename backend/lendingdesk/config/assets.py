from __future__ import annotations

from collections.abc import Iterable, Iterator

from lendingdesk.schemas.asset import Asset

DEFAULT_ASSETS: tuple[Asset, ...] = (
    Asset(
        address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
        decimals=6,
        symbol="USDC",
        name="USD Coin",
    ),
    Asset(
        address="0xdAC17F958D2ee523a2206206994597C13D831ec7",
        decimals=6,
        symbol="USDT",
        name="Tether USD",
    ),
    Asset(
        address="0x6B175474E89094C44Da98b954EedeAC495271d0F",
        decimals=18,
        symbol="DAI",
        name="Dai Stablecoin",
    ),
    Asset(
        address="0xC02aaA39b223FE8D0A0e8e4F27ead9083C756Cc2",
        decimals=18,
        symbol="WETH",
        name="Wrapped Ether",
    ),
    Asset(
        address="0x2260FAC5E5542a773Aa44fBCfeDd86a3D015fC31",
        decimals=8,
        symbol="WBTC",
        name="Wrapped Bitcoin",
    ),
)


class AssetRegistry:
    """Immutable set of supported reserves, keyed by lower-cased address."""

    def __init__(self, assets: Iterable[Asset]) -> None:
        self._assets: tuple[Asset, ...] = tuple(assets)
        self._by_address: dict[str, Asset] = {
            asset.address.lower(): asset for asset in self._assets
        }
        if len(self._by_address) != len(self._assets):
            raise ValueError("Asset registry contains duplicate addresses.")

    def __iter__(self) -> Iterator[Asset]:
        return iter(self._assets)

    def __len__(self) -> int:
        return len(self._assets)

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and address.lower() in self._by_address

    def get(self, address: str) -> Asset | None:
        return self._by_address.get(address.lower())
