"""Mint/burn controller: debt bookkeeping driving the stable unit ledger"""
import logging
from typing import TYPE_CHECKING

from ..journal import Journal
from .checks import require_more_than_zero

if TYPE_CHECKING:
    from ..engine import StableUnitEngine

logger = logging.getLogger(__name__)


def mint(engine: "StableUnitEngine", journal: Journal, caller: str, amount: int) -> None:
    """Increase caller's debt and mint the stable units to them.

    The health factor gate runs on the final ledger state before the mint
    call, which is the last step and needs no compensation.
    """
    require_more_than_zero(amount)

    engine.ledger.increase_debt(caller, amount)
    engine.health.revert_if_broken(caller)

    engine.transfers.mint(engine.stable, caller, amount)
    logger.info("StableUnitMinted: %s minted %d", caller, amount)


def burn(engine: "StableUnitEngine", journal: Journal, caller: str, amount: int) -> None:
    """Repay caller's own debt with caller's stable units"""
    require_more_than_zero(amount)
    engine.ledger.decrease_debt(caller, amount)
    settle_burn(engine, journal, caller, amount)
    logger.info("StableUnitBurned: %s repaid %d", caller, amount)


def settle_burn(engine: "StableUnitEngine", journal: Journal, payer: str, amount: int) -> None:
    """Pull amount stable units from payer into custody and destroy them"""
    transfers = engine.transfers

    transfers.pull(engine.stable, payer, amount)
    journal.on_rollback(
        f"return {amount} stable units to {payer}",
        lambda: transfers.push(engine.stable, payer, amount),
    )

    transfers.burn(engine.stable, amount)
    # the engine owns the stable ledger, so a burn is undone by minting into custody
    journal.on_rollback(
        f"re-mint {amount} burned stable units",
        lambda: transfers.mint(engine.stable, engine.address, amount),
    )
