"""Stable unit engine: collateral custody, debt issuance and liquidation.

Users lock registered collateral and mint the stable unit against it. Every
account with debt must keep a health factor of at least 1.0 after each
successful call, i.e. risk-adjusted collateral value (collateral value times
LIQUIDATION_THRESHOLD / LIQUIDATION_PRECISION) covering its debt. Accounts that
fall below can be liquidated by anyone holding stable units.

Each public mutating call is atomic: it either fully applies or raises and
leaves the ledger and custody exactly as they were. External calls cannot
re-enter the engine while a call is in progress.
"""
import functools
import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .constants import ADDITIONAL_FEED_PRECISION, PRECISION
from .errors import ReentrantCall
from .health import HealthFactorEngine, calculate_health_factor
from .instructions import deposit_redeem, liquidate as liquidation, mint_burn
from .instructions.liquidate import LiquidationResult
from .interfaces import AssetLedger, PriceFeed, StableUnitLedger
from .journal import Journal
from .oracle import OracleAdapter
from .state.collateral import CollateralRegistry
from .state.position import PositionLedger
from .state.protocol_config import EngineParams
from .transfers import Transfers
from .valuation import Valuator

logger = logging.getLogger(__name__)


def atomic(method):
    """Run a mutating entry point under the re-entrancy guard and a rollback journal"""

    @functools.wraps(method)
    def wrapper(self: "StableUnitEngine", *args, **kwargs):
        if self._journal is not None:
            raise ReentrantCall(f"{method.__name__} called while another operation is in progress")
        self._journal = Journal(self.ledger)
        try:
            return method(self, *args, **kwargs)
        except Exception as e:
            logger.warning("%s reverted: %s: %s", method.__name__, type(e).__name__, e)
            self._journal.rollback()
            raise
        finally:
            self._journal = None

    return wrapper


def view(method):
    """Read entry points refuse to observe a ledger that is mid-update"""

    @functools.wraps(method)
    def wrapper(self: "StableUnitEngine", *args, **kwargs):
        if self._journal is not None:
            raise ReentrantCall(f"{method.__name__} called while another operation is in progress")
        return method(self, *args, **kwargs)

    return wrapper


class StableUnitEngine:
    def __init__(
        self,
        tokens: Sequence[AssetLedger],
        price_feeds: Sequence[PriceFeed],
        stable: StableUnitLedger,
        params: Optional[EngineParams] = None,
        clock: Optional[Callable[[], int]] = None,
        address: str = "stable-unit-engine",
    ):
        self.address = address
        self.params = params if params is not None else EngineParams()
        self.stable = stable

        self.registry = CollateralRegistry(tokens, price_feeds)
        self.ledger = PositionLedger()
        self.oracle = OracleAdapter(self.registry, self.params.staleness_window, clock)
        self.valuator = Valuator(self.oracle)
        self.health = HealthFactorEngine(self.ledger, self.registry, self.valuator, self.params)
        self.transfers = Transfers(address)

        self._journal: Optional[Journal] = None

        logger.info(
            "Engine %s created with %d collateral assets: %s",
            address, len(self.registry), ", ".join(self.registry.addresses),
        )

    # ---------------------------------------------------------------------
    # Mutating operations
    # ---------------------------------------------------------------------

    @atomic
    def deposit(self, caller: str, token: str, amount: int) -> None:
        deposit_redeem.deposit(self, self._journal, caller, token, amount)

    @atomic
    def redeem(self, caller: str, token: str, amount: int) -> None:
        deposit_redeem.redeem(self, self._journal, caller, token, amount)

    @atomic
    def mint(self, caller: str, amount: int) -> None:
        mint_burn.mint(self, self._journal, caller, amount)

    @atomic
    def burn(self, caller: str, amount: int) -> None:
        mint_burn.burn(self, self._journal, caller, amount)

    @atomic
    def deposit_and_mint(self, caller: str, token: str, collateral_amount: int, mint_amount: int) -> None:
        deposit_redeem.deposit(self, self._journal, caller, token, collateral_amount)
        mint_burn.mint(self, self._journal, caller, mint_amount)

    @atomic
    def redeem_and_burn(self, caller: str, token: str, collateral_amount: int, burn_amount: int) -> None:
        deposit_redeem.redeem_and_burn(self, self._journal, caller, token, collateral_amount, burn_amount)

    @atomic
    def liquidate(self, caller: str, token: str, user: str, debt_to_cover: int) -> LiquidationResult:
        return liquidation.liquidate(self, self._journal, caller, token, user, debt_to_cover)

    # ---------------------------------------------------------------------
    # Read API
    # ---------------------------------------------------------------------

    @view
    def get_account_information(self, user: str) -> Tuple[int, int]:
        """(debt minted, collateral value in USD)"""
        return self.ledger.debt(user), self.health.collateral_value_usd(user)

    @view
    def get_account_collateral_value(self, user: str) -> int:
        return self.health.collateral_value_usd(user)

    @view
    def get_debt(self, user: str) -> int:
        return self.ledger.debt(user)

    @view
    def get_collateral_balance_of_user(self, user: str, token: str) -> int:
        return self.ledger.collateral_balance(user, token)

    @view
    def get_usd_value(self, token: str, amount: int) -> int:
        self.registry.get(token)
        return self.valuator.usd_value(token, amount)

    @view
    def get_token_amount_from_usd(self, token: str, usd_amount: int) -> int:
        self.registry.get(token)
        return self.valuator.amount_from_usd(token, usd_amount)

    @view
    def get_health_factor(self, user: str) -> int:
        return self.health.health_factor(user)

    def calculate_health_factor(self, debt: int, collateral_usd: int) -> int:
        return calculate_health_factor(debt, collateral_usd, self.params)

    def get_collateral_tokens(self) -> List[str]:
        return list(self.registry.addresses)

    def get_collateral_token_price_feed(self, token: str) -> str:
        return self.registry.get(token).price_feed.address

    @view
    def get_accounts(self) -> List[str]:
        """Accounts with any collateral or debt"""
        return self.ledger.accounts()

    @property
    def stable_address(self) -> str:
        return self.stable.address

    @property
    def precision(self) -> int:
        return PRECISION

    @property
    def additional_feed_precision(self) -> int:
        return ADDITIONAL_FEED_PRECISION

    @property
    def liquidation_threshold(self) -> int:
        return self.params.liquidation_threshold

    @property
    def liquidation_bonus(self) -> int:
        return self.params.liquidation_bonus

    @property
    def min_health_factor(self) -> int:
        return self.params.min_health_factor
