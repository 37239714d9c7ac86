"""Collateral asset registry"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Sequence, Tuple

from ..errors import NotAllowedToken, TokenAddressesAndPriceFeedAddressesMustBeSameLength
from ..interfaces import AssetLedger, PriceFeed


@dataclass(frozen=True)
class CollateralAsset:
    """A registered collateral type and the one feed that prices it"""
    token: AssetLedger
    price_feed: PriceFeed

    @property
    def address(self) -> str:
        return self.token.address


class CollateralRegistry:
    """Immutable token address -> CollateralAsset map, fixed at construction"""

    def __init__(self, tokens: Sequence[AssetLedger], price_feeds: Sequence[PriceFeed]):
        if len(tokens) != len(price_feeds):
            raise TokenAddressesAndPriceFeedAddressesMustBeSameLength(
                f"{len(tokens)} tokens but {len(price_feeds)} price feeds"
            )

        assets = {}
        for token, feed in zip(tokens, price_feeds):
            if token.address in assets:
                raise ValueError(f"Collateral token {token.address} registered twice")
            assets[token.address] = CollateralAsset(token=token, price_feed=feed)

        self._assets: Mapping[str, CollateralAsset] = MappingProxyType(assets)

    def get(self, token: str) -> CollateralAsset:
        try:
            return self._assets[token]
        except KeyError:
            raise NotAllowedToken(token) from None

    @property
    def addresses(self) -> Tuple[str, ...]:
        """Registered token addresses in registration order"""
        return tuple(self._assets)

    def __contains__(self, token: object) -> bool:
        return token in self._assets

    def __iter__(self) -> Iterator[CollateralAsset]:
        return iter(self._assets.values())

    def __len__(self) -> int:
        return len(self._assets)
