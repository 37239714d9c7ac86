"""In-memory aggregator price feed"""
import time
from typing import Callable, Optional, Tuple

from .constants import FEED_DECIMALS


class MockPriceFeed:
    """Answers latest_round_data like an aggregator; prices are set by hand.

    Each update opens and completes a new round stamped with the clock.
    """

    def __init__(
        self,
        address: str,
        initial_answer: int,
        decimals: int = FEED_DECIMALS,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.address = address
        self._decimals = decimals
        self.clock = clock if clock is not None else (lambda: int(time.time()))
        self.round_id = 0
        self.answer = 0
        self.started_at = 0
        self.updated_at = 0
        self.answered_in_round = 0
        self.update_answer(initial_answer)

    def decimals(self) -> int:
        return self._decimals

    def update_answer(self, answer: int) -> None:
        now = self.clock()
        self.update_round_data(self.round_id + 1, answer, now, now)

    def update_round_data(self, round_id: int, answer: int, updated_at: int, started_at: int,
                          answered_in_round: Optional[int] = None) -> None:
        self.round_id = round_id
        self.answer = answer
        self.updated_at = updated_at
        self.started_at = started_at
        self.answered_in_round = round_id if answered_in_round is None else answered_in_round

    def latest_round_data(self) -> Tuple[int, int, int, int, int]:
        return self.round_id, self.answer, self.started_at, self.updated_at, self.answered_in_round
