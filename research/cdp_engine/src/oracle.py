"""Price oracle adapter: the one place where feed readings are trusted or rejected"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .constants import PRECISION_DECIMALS, STALENESS_WINDOW
from .errors import InvalidPriceError, StaleOracleData, UnknownAsset
from .state.collateral import CollateralRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Price:
    """A fresh USD price normalized to 18 decimals"""
    value: int
    timestamp: int
    round_id: int


def normalize_answer(answer: int, decimals: int) -> int:
    """Scale a feed answer with `decimals` fractional digits to 18 decimals"""
    if decimals <= PRECISION_DECIMALS:
        return answer * 10 ** (PRECISION_DECIMALS - decimals)
    return answer // 10 ** (decimals - PRECISION_DECIMALS)


class OracleAdapter:
    """Read-only pass-through to the registered feeds plus a freshness check"""

    def __init__(
        self,
        registry: CollateralRegistry,
        staleness_window: int = STALENESS_WINDOW,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.registry = registry
        self.staleness_window = staleness_window
        self.clock = clock if clock is not None else (lambda: int(time.time()))

    def get_price(self, token: str) -> Price:
        if token not in self.registry:
            raise UnknownAsset(token)
        feed = self.registry.get(token).price_feed

        round_id, answer, _, updated_at, answered_in_round = feed.latest_round_data()
        age = self.clock() - updated_at

        # A round that never completed carries no usable timestamp
        if updated_at == 0 or answered_in_round < round_id:
            logger.warning("Incomplete round %d for %s", round_id, token)
            raise StaleOracleData(token, age)
        if age > self.staleness_window:
            logger.warning("Stale price for %s: %ds old (window %ds)", token, age, self.staleness_window)
            raise StaleOracleData(token, age)
        if answer <= 0:
            raise InvalidPriceError(f"Non-positive price {answer} for {token}")

        return Price(
            value=normalize_answer(answer, feed.decimals()),
            timestamp=updated_at,
            round_id=round_id,
        )
