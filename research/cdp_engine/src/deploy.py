"""Wire a complete system (collateral tokens, feeds, stable unit, engine) from config"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .config import DeploymentConfig
from .engine import StableUnitEngine
from .price_feed import MockPriceFeed
from .tokens import ERC20Token, StableUnitToken

logger = logging.getLogger(__name__)


@dataclass
class Deployment:
    engine: StableUnitEngine
    stable: StableUnitToken
    tokens: Dict[str, ERC20Token]  # by symbol
    price_feeds: Dict[str, MockPriceFeed]  # by symbol
    deployer: str


def deploy(config: DeploymentConfig, clock: Optional[Callable[[], int]] = None) -> Deployment:
    """Deploy every collaborator and hand stable unit ownership to the engine"""
    deployer = config.deployer
    tokens: Dict[str, ERC20Token] = {}
    feeds: Dict[str, MockPriceFeed] = {}

    for asset in config.collateral:
        token = ERC20Token(asset.symbol, asset.symbol, address=f"token:{asset.symbol}")
        if asset.initial_balance:
            token.faucet(deployer, asset.initial_balance)
        tokens[asset.symbol] = token
        feeds[asset.symbol] = MockPriceFeed(
            address=f"feed:{asset.symbol}-USD",
            initial_answer=asset.initial_price,
            decimals=asset.feed_decimals,
            clock=clock,
        )

    stable = StableUnitToken(
        owner=deployer,
        address=f"token:{config.stable_unit.symbol}",
        name=config.stable_unit.name,
        symbol=config.stable_unit.symbol,
    )
    engine = StableUnitEngine(
        tokens=list(tokens.values()),
        price_feeds=list(feeds.values()),
        stable=stable,
        params=config.engine.to_params(),
        clock=clock,
    )
    stable.transfer_ownership(deployer, engine.address)

    logger.info("Deployed engine %s with stable unit %s", engine.address, stable.address)
    return Deployment(engine=engine, stable=stable, tokens=tokens, price_feeds=feeds, deployer=deployer)
