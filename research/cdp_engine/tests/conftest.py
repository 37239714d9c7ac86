"""Shared fixtures: a two-collateral engine wired to in-memory tokens and feeds."""
from __future__ import annotations

import pytest

from cdp_engine.src.constants import PRECISION
from cdp_engine.src.engine import StableUnitEngine
from cdp_engine.src.price_feed import MockPriceFeed
from cdp_engine.src.tokens import ERC20Token, StableUnitToken

DEPLOYER = "deployer"
USER = "user"
LIQUIDATOR = "liquidator"

ETH_USD_PRICE = 2000 * 10**8
BTC_USD_PRICE = 1000 * 10**8

STARTING_ERC20_BALANCE = 10 * PRECISION
AMOUNT_COLLATERAL = 10 * PRECISION
AMOUNT_TO_MINT = 100 * PRECISION
COLLATERAL_TO_COVER = 20 * PRECISION

START_TIME = 1_700_000_000


class FakeClock:
    """Settable clock shared by the engine and the feeds"""

    def __init__(self, now: int = START_TIME) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def weth() -> ERC20Token:
    return ERC20Token("Wrapped Ether", "WETH", address="token:WETH")


@pytest.fixture()
def wbtc() -> ERC20Token:
    return ERC20Token("Wrapped Bitcoin", "WBTC", address="token:WBTC")


@pytest.fixture()
def eth_usd(clock: FakeClock) -> MockPriceFeed:
    return MockPriceFeed("feed:ETH-USD", ETH_USD_PRICE, clock=clock)


@pytest.fixture()
def btc_usd(clock: FakeClock) -> MockPriceFeed:
    return MockPriceFeed("feed:BTC-USD", BTC_USD_PRICE, clock=clock)


@pytest.fixture()
def stable() -> StableUnitToken:
    return StableUnitToken(owner=DEPLOYER, address="token:DSC")


@pytest.fixture()
def engine(weth, wbtc, eth_usd, btc_usd, stable, clock) -> StableUnitEngine:
    engine = StableUnitEngine([weth, wbtc], [eth_usd, btc_usd], stable, clock=clock)
    stable.transfer_ownership(DEPLOYER, engine.address)
    return engine


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


def fund(token: ERC20Token, engine: StableUnitEngine, account: str, amount: int) -> None:
    token.faucet(account, amount)
    token.approve(account, engine.address, amount)


@pytest.fixture()
def user(engine, weth, wbtc) -> str:
    fund(weth, engine, USER, STARTING_ERC20_BALANCE)
    fund(wbtc, engine, USER, STARTING_ERC20_BALANCE)
    return USER


@pytest.fixture()
def deposited_user(engine, weth, user) -> str:
    engine.deposit(user, weth.address, AMOUNT_COLLATERAL)
    return user


@pytest.fixture()
def minted_user(engine, weth, stable, user) -> str:
    engine.deposit_and_mint(user, weth.address, AMOUNT_COLLATERAL, AMOUNT_TO_MINT)
    stable.approve(user, engine.address, AMOUNT_TO_MINT)
    return user


@pytest.fixture()
def liquidator(engine, weth, stable) -> str:
    """Holds AMOUNT_TO_MINT stable units backed by COLLATERAL_TO_COVER weth"""
    fund(weth, engine, LIQUIDATOR, COLLATERAL_TO_COVER)
    engine.deposit_and_mint(LIQUIDATOR, weth.address, COLLATERAL_TO_COVER, AMOUNT_TO_MINT)
    stable.approve(LIQUIDATOR, engine.address, AMOUNT_TO_MINT)
    return LIQUIDATOR


# ---------------------------------------------------------------------------
# Misbehaving collaborators
# ---------------------------------------------------------------------------


class FlakyToken(ERC20Token):
    """Collateral token whose transfers can be switched to report failure"""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.fail_transfer = False
        self.fail_transfer_from = False

    def transfer(self, caller: str, to: str, amount: int) -> bool:
        if self.fail_transfer:
            return False
        return super().transfer(caller, to, amount)

    def transfer_from(self, caller: str, owner: str, to: str, amount: int) -> bool:
        if self.fail_transfer_from:
            return False
        return super().transfer_from(caller, owner, to, amount)


class FlakyStableUnit(StableUnitToken):
    """Stable unit whose mint or burn can be switched to report failure"""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.fail_mint = False
        self.fail_burn = False

    def mint(self, caller: str, to: str, amount: int) -> bool:
        if self.fail_mint:
            return False
        return super().mint(caller, to, amount)

    def burn(self, caller: str, amount: int) -> bool:
        if self.fail_burn:
            return False
        return super().burn(caller, amount)


@pytest.fixture()
def flaky_weth() -> FlakyToken:
    return FlakyToken("Flaky Ether", "FETH", address="token:FETH")


@pytest.fixture()
def flaky_stable() -> FlakyStableUnit:
    return FlakyStableUnit(owner=DEPLOYER, address="token:FDSC")


@pytest.fixture()
def flaky_engine(flaky_weth, flaky_stable, eth_usd, clock) -> StableUnitEngine:
    """Single collateral engine where every external call can be made to fail"""
    engine = StableUnitEngine([flaky_weth], [eth_usd], flaky_stable, clock=clock)
    flaky_stable.transfer_ownership(DEPLOYER, engine.address)
    fund(flaky_weth, engine, USER, STARTING_ERC20_BALANCE)
    return engine
