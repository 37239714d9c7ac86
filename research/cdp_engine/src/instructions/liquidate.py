"""Liquidation: a third party repays an undercollateralized account's debt for its collateral"""
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import HealthFactorNotImproved, HealthFactorOk
from ..fixed_point import checked_add, mul_div
from ..journal import Journal
from .checks import require_more_than_zero
from .deposit_redeem import release_collateral
from .mint_burn import settle_burn

if TYPE_CHECKING:
    from ..engine import StableUnitEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiquidationResult:
    debt_covered: int
    collateral_seized: int  # includes the bonus
    bonus: int
    starting_health_factor: int
    ending_health_factor: int


def liquidate(
    engine: "StableUnitEngine",
    journal: Journal,
    caller: str,
    token: str,
    user: str,
    debt_to_cover: int,
) -> LiquidationResult:
    """Burn debt_to_cover of the liquidator's stable units against user's debt
    and hand the liquidator the equivalent collateral plus the bonus.

    Seizing more than the user holds reverts; nothing is capped. When caller
    and user are the same account this is a self-deleverage.
    """
    require_more_than_zero(debt_to_cover)
    asset = engine.registry.get(token)
    params = engine.params

    starting = engine.health.health_factor(user)
    if starting >= params.min_health_factor:
        raise HealthFactorOk(starting)

    token_amount = engine.valuator.amount_from_usd(token, debt_to_cover)
    bonus = mul_div(token_amount, params.liquidation_bonus, params.liquidation_precision)
    total_seized = checked_add(token_amount, bonus)

    engine.ledger.remove_collateral(user, token, total_seized)
    engine.ledger.decrease_debt(user, debt_to_cover)

    ending = engine.health.health_factor(user)
    if ending <= starting:
        logger.warning("Liquidation of %s would not improve health factor (%d -> %d)", user, starting, ending)
        raise HealthFactorNotImproved(starting, ending)
    engine.health.revert_if_broken(caller)

    settle_burn(engine, journal, caller, debt_to_cover)
    release_collateral(engine, asset.token, user, caller, total_seized)

    logger.warning(
        "Liquidation: %s covered %d of %s's debt, seized %d of %s (bonus %d), health factor %d -> %d",
        caller, debt_to_cover, user, total_seized, token, bonus, starting, ending,
    )
    return LiquidationResult(
        debt_covered=debt_to_cover,
        collateral_seized=total_seized,
        bonus=bonus,
        starting_health_factor=starting,
        ending_health_factor=ending,
    )
