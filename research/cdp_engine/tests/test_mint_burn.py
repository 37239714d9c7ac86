"""Mint/burn controller, rollback of external effects and the re-entrancy guard"""
import pytest

from cdp_engine.src.constants import PRECISION
from cdp_engine.src.errors import (
    BreakHealthFactor,
    BurnFailed,
    InsufficientDebt,
    MintFailed,
    NeedsMoreThanZero,
    ReentrantCall,
)
from cdp_engine.src.tokens import ERC20Token, InsufficientAllowance
from cdp_engine.src.engine import StableUnitEngine
from conftest import AMOUNT_COLLATERAL, AMOUNT_TO_MINT, DEPLOYER, USER, fund


# ------------------------------------------------------------------
#                           MINT
# ------------------------------------------------------------------
def test_reverts_if_mint_amount_is_zero(engine, deposited_user):
    with pytest.raises(NeedsMoreThanZero):
        engine.mint(deposited_user, 0)

def test_can_mint(engine, stable, deposited_user):
    engine.mint(deposited_user, AMOUNT_TO_MINT)

    assert engine.get_debt(deposited_user) == AMOUNT_TO_MINT
    assert stable.balance_of(deposited_user) == AMOUNT_TO_MINT
    assert stable.total_supply == AMOUNT_TO_MINT

def test_reverts_if_mint_breaks_health_factor(engine, weth, stable, deposited_user):
    """Minting the full collateral value leaves a health factor of 0.5"""
    amount_to_mint = engine.get_usd_value(weth.address, AMOUNT_COLLATERAL)
    expected_health_factor = engine.calculate_health_factor(amount_to_mint, amount_to_mint)

    with pytest.raises(BreakHealthFactor) as exc:
        engine.mint(deposited_user, amount_to_mint)

    assert exc.value.health_factor == expected_health_factor == PRECISION // 2
    assert engine.get_debt(deposited_user) == 0
    assert stable.total_supply == 0

def test_can_mint_exactly_half_of_collateral_value(engine, weth, deposited_user):
    half = engine.get_usd_value(weth.address, AMOUNT_COLLATERAL) // 2

    engine.mint(deposited_user, half)

    assert engine.get_health_factor(deposited_user) == PRECISION
    with pytest.raises(BreakHealthFactor) as exc:
        engine.mint(deposited_user, 1)
    assert exc.value.health_factor == PRECISION - 1
    assert engine.get_debt(deposited_user) == half

def test_mint_reverts_when_ledger_reports_failure(flaky_engine, flaky_weth, flaky_stable):
    flaky_engine.deposit(USER, flaky_weth.address, AMOUNT_COLLATERAL)
    flaky_stable.fail_mint = True

    with pytest.raises(MintFailed):
        flaky_engine.mint(USER, AMOUNT_TO_MINT)
    assert flaky_engine.get_debt(USER) == 0

# ------------------------------------------------------------------
#                           BURN
# ------------------------------------------------------------------
def test_reverts_if_burn_amount_is_zero(engine, minted_user):
    with pytest.raises(NeedsMoreThanZero):
        engine.burn(minted_user, 0)

def test_cant_burn_more_than_debt(engine, stable, minted_user):
    with pytest.raises(InsufficientDebt):
        engine.burn(minted_user, AMOUNT_TO_MINT + 1)
    assert stable.balance_of(minted_user) == AMOUNT_TO_MINT

def test_can_burn(engine, stable, minted_user):
    engine.burn(minted_user, AMOUNT_TO_MINT)

    assert engine.get_debt(minted_user) == 0
    assert stable.balance_of(minted_user) == 0
    assert stable.balance_of(engine.address) == 0
    assert stable.total_supply == 0

def test_burn_needs_allowance(engine, stable, minted_user):
    stable.approve(minted_user, engine.address, 0)

    with pytest.raises(InsufficientAllowance):
        engine.burn(minted_user, AMOUNT_TO_MINT)
    assert engine.get_debt(minted_user) == AMOUNT_TO_MINT

def test_burn_works_while_account_is_unhealthy(engine, minted_user, eth_usd):
    eth_usd.update_answer(18 * 10**8)

    engine.burn(minted_user, AMOUNT_TO_MINT // 2)

    assert engine.get_debt(minted_user) == AMOUNT_TO_MINT // 2

def test_failed_burn_returns_pulled_units(flaky_engine, flaky_weth, flaky_stable):
    flaky_engine.deposit_and_mint(USER, flaky_weth.address, AMOUNT_COLLATERAL, AMOUNT_TO_MINT)
    flaky_stable.approve(USER, flaky_engine.address, AMOUNT_TO_MINT)
    flaky_stable.fail_burn = True

    with pytest.raises(BurnFailed):
        flaky_engine.burn(USER, AMOUNT_TO_MINT)

    assert flaky_engine.get_debt(USER) == AMOUNT_TO_MINT
    assert flaky_stable.balance_of(USER) == AMOUNT_TO_MINT
    assert flaky_stable.balance_of(flaky_engine.address) == 0

# ------------------------------------------------------------------
#                           RE-ENTRANCY
# ------------------------------------------------------------------
class ReentrantToken(ERC20Token):
    """Calls back into the engine from inside transfer_from"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.engine = None
        self.callback = None

    def transfer_from(self, caller, owner, to, amount):
        if self.callback is not None:
            self.callback(self.engine)
        return super().transfer_from(caller, owner, to, amount)

@pytest.fixture()
def reentrant_setup(stable, eth_usd, clock):
    token = ReentrantToken("Evil", "EVIL", address="token:EVIL")
    engine = StableUnitEngine([token], [eth_usd], stable, clock=clock)
    stable.transfer_ownership(DEPLOYER, engine.address)
    token.engine = engine
    fund(token, engine, USER, 2 * AMOUNT_COLLATERAL)
    return engine, token

def test_external_call_cannot_reenter_mutating_entry_point(reentrant_setup):
    engine, token = reentrant_setup
    token.callback = lambda engine: engine.mint(USER, AMOUNT_TO_MINT)

    with pytest.raises(ReentrantCall):
        engine.deposit(USER, token.address, AMOUNT_COLLATERAL)
    assert engine.get_debt(USER) == 0
    assert engine.get_collateral_balance_of_user(USER, token.address) == 0

def test_external_call_cannot_read_partial_state(reentrant_setup):
    engine, token = reentrant_setup
    token.callback = lambda engine: engine.get_health_factor(USER)

    with pytest.raises(ReentrantCall):
        engine.deposit(USER, token.address, AMOUNT_COLLATERAL)

def test_external_call_cannot_list_accounts(reentrant_setup):
    engine, token = reentrant_setup
    token.callback = lambda engine: engine.get_accounts()

    with pytest.raises(ReentrantCall):
        engine.deposit(USER, token.address, AMOUNT_COLLATERAL)
    assert engine.get_accounts() == []

def test_guard_is_released_after_a_revert(reentrant_setup):
    engine, token = reentrant_setup
    token.callback = lambda engine: engine.get_debt(USER)
    with pytest.raises(ReentrantCall):
        engine.deposit(USER, token.address, AMOUNT_COLLATERAL)

    token.callback = None
    engine.deposit(USER, token.address, AMOUNT_COLLATERAL)
    assert engine.get_collateral_balance_of_user(USER, token.address) == AMOUNT_COLLATERAL
