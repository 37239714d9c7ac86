"""Health factor engine"""
import pytest

from cdp_engine.src.constants import MIN_HEALTH_FACTOR, PRECISION, U256_MAX
from cdp_engine.src.errors import BreakHealthFactor
from conftest import AMOUNT_COLLATERAL, AMOUNT_TO_MINT


@pytest.mark.parametrize(
    "debt, collateral_usd, expected",
    [
        (0, 0, U256_MAX),
        (0, 1000 * PRECISION, U256_MAX),
        (100 * PRECISION, 1000 * PRECISION, 5 * PRECISION),
        (100 * PRECISION, 200 * PRECISION, PRECISION),
        (100 * PRECISION, 180 * PRECISION, 9 * PRECISION // 10),
        (100 * PRECISION, 0, 0),
        (3, 10, 1666666666666666666),  # rounds down
    ],
)
def test_calculate_health_factor(engine, debt, collateral_usd, expected):
    assert engine.calculate_health_factor(debt, collateral_usd) == expected

def test_account_without_debt_is_maximally_healthy(engine, deposited_user):
    assert engine.get_health_factor(deposited_user) == U256_MAX
    assert engine.get_health_factor("nobody") == U256_MAX

def test_health_factor_of_minted_position(engine, minted_user):
    # $20,000 of collateral, halved, against $100 of debt
    assert engine.get_health_factor(minted_user) == 100 * PRECISION

def test_health_factor_can_go_below_one(engine, minted_user, eth_usd):
    eth_usd.update_answer(18 * 10**8)

    assert engine.get_health_factor(minted_user) == 9 * PRECISION // 10

def test_account_information(engine, weth, minted_user):
    debt, collateral_usd = engine.get_account_information(minted_user)

    assert debt == AMOUNT_TO_MINT
    assert collateral_usd == engine.get_usd_value(weth.address, AMOUNT_COLLATERAL)
    assert engine.get_token_amount_from_usd(weth.address, collateral_usd) == AMOUNT_COLLATERAL

def test_collateral_value_sums_every_asset(engine, weth, wbtc, user):
    engine.deposit(user, weth.address, AMOUNT_COLLATERAL)
    engine.deposit(user, wbtc.address, AMOUNT_COLLATERAL)

    assert engine.get_account_collateral_value(user) == 30_000 * PRECISION

def test_gate_carries_the_computed_factor(engine, minted_user, eth_usd):
    eth_usd.update_answer(18 * 10**8)

    with pytest.raises(BreakHealthFactor) as exc:
        engine.health.revert_if_broken(minted_user)
    assert exc.value.health_factor == 9 * PRECISION // 10
    assert exc.value.health_factor < MIN_HEALTH_FACTOR

def test_protocol_constants(engine):
    assert engine.precision == PRECISION
    assert engine.additional_feed_precision == 10**10
    assert engine.liquidation_threshold == 50
    assert engine.liquidation_bonus == 10
    assert engine.min_health_factor == MIN_HEALTH_FACTOR
    assert engine.stable_address == "token:DSC"
