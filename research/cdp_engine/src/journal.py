"""All-or-nothing bookkeeping for a single engine operation"""
import logging
from typing import Callable, List, Tuple

from .state.position import PositionLedger

logger = logging.getLogger(__name__)


class Journal:
    """Ledger snapshot plus compensating actions for completed external effects.

    Only effects the engine can undo from its own custody are journaled:
    funds pulled into the engine and stable units burned from its balance.
    Operations order outbound transfers and mints last so nothing after them
    can fail.
    """

    def __init__(self, ledger: PositionLedger):
        self._ledger = ledger
        self._snapshot = ledger.snapshot()
        self._compensations: List[Tuple[str, Callable[[], None]]] = []

    def on_rollback(self, description: str, action: Callable[[], None]) -> None:
        self._compensations.append((description, action))

    def rollback(self) -> None:
        self._ledger.restore(self._snapshot)
        for description, action in reversed(self._compensations):
            try:
                action()
            except Exception:
                logger.critical("Compensation failed during rollback: %s", description, exc_info=True)
        self._compensations.clear()
