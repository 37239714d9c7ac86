"""Deposit/redeem controller: collateral bookkeeping and custody transfers"""
import logging
from typing import TYPE_CHECKING

from ..interfaces import AssetLedger
from ..journal import Journal
from .checks import require_more_than_zero
from .mint_burn import settle_burn

if TYPE_CHECKING:
    from ..engine import StableUnitEngine

logger = logging.getLogger(__name__)


def deposit(engine: "StableUnitEngine", journal: Journal, caller: str, token: str, amount: int) -> None:
    """Pull collateral into custody, then credit the caller.

    The transfer runs first so a failed pull never credits the ledger.
    Deposits only raise the health factor, so there is no gate.
    """
    require_more_than_zero(amount)
    asset = engine.registry.get(token)

    engine.transfers.pull(asset.token, caller, amount)
    journal.on_rollback(
        f"return {amount} of {token} to {caller}",
        lambda: engine.transfers.push(asset.token, caller, amount),
    )

    engine.ledger.add_collateral(caller, token, amount)
    logger.info("CollateralDeposited: %s deposited %d of %s", caller, amount, token)


def redeem(engine: "StableUnitEngine", journal: Journal, caller: str, token: str, amount: int) -> None:
    require_more_than_zero(amount)
    asset = engine.registry.get(token)

    engine.ledger.remove_collateral(caller, token, amount)
    engine.health.revert_if_broken(caller)

    release_collateral(engine, asset.token, caller, caller, amount)


def redeem_and_burn(
    engine: "StableUnitEngine",
    journal: Journal,
    caller: str,
    token: str,
    collateral_amount: int,
    burn_amount: int,
) -> None:
    """Repay debt and withdraw collateral under a single health factor gate"""
    require_more_than_zero(collateral_amount)
    require_more_than_zero(burn_amount)
    asset = engine.registry.get(token)

    engine.ledger.decrease_debt(caller, burn_amount)
    engine.ledger.remove_collateral(caller, token, collateral_amount)
    engine.health.revert_if_broken(caller)

    settle_burn(engine, journal, caller, burn_amount)
    release_collateral(engine, asset.token, caller, caller, collateral_amount)


def release_collateral(engine: "StableUnitEngine", token: AssetLedger, owner: str, to: str, amount: int) -> None:
    """Push collateral already removed from owner's ledger entry out of custody to `to`.

    Liquidation calls this with the liquidator as `to`.
    """
    engine.transfers.push(token, to, amount)
    logger.info("CollateralRedeemed: %d of %s from %s to %s", amount, token.address, owner, to)
