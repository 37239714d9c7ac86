"""Health factor engine: the solvency gate for every mutating operation"""
import logging

from .constants import PRECISION, U256_MAX
from .errors import BreakHealthFactor
from .fixed_point import checked_add, mul_div
from .state.collateral import CollateralRegistry
from .state.position import PositionLedger
from .state.protocol_config import EngineParams
from .valuation import Valuator

logger = logging.getLogger(__name__)


def calculate_health_factor(debt: int, collateral_usd: int, params: EngineParams) -> int:
    """Risk-adjusted collateral over debt, 18 decimals.

    An account without debt can never be liquidated, so it reports U256_MAX.
    """
    if debt == 0:
        return U256_MAX
    adjusted_collateral = mul_div(collateral_usd, params.liquidation_threshold, params.liquidation_precision)
    return mul_div(adjusted_collateral, PRECISION, debt)


class HealthFactorEngine:
    def __init__(
        self,
        ledger: PositionLedger,
        registry: CollateralRegistry,
        valuator: Valuator,
        params: EngineParams,
    ):
        self.ledger = ledger
        self.registry = registry
        self.valuator = valuator
        self.params = params

    def collateral_value_usd(self, account: str) -> int:
        """Sum of the USD value of every registered asset the account holds"""
        total = 0
        for token in self.registry.addresses:
            amount = self.ledger.collateral_balance(account, token)
            if amount:
                total = checked_add(total, self.valuator.usd_value(token, amount))
        return total

    def health_factor(self, account: str) -> int:
        debt = self.ledger.debt(account)
        if debt == 0:
            return U256_MAX
        return calculate_health_factor(debt, self.collateral_value_usd(account), self.params)

    def revert_if_broken(self, account: str) -> None:
        health_factor = self.health_factor(account)
        if health_factor < self.params.min_health_factor:
            logger.warning("Health factor of %s would drop to %d", account, health_factor)
            raise BreakHealthFactor(health_factor)
