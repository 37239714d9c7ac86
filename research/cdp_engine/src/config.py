"""Deployment configuration loader: reads a YAML file, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .constants import (
    FEED_DECIMALS,
    LIQUIDATION_BONUS,
    LIQUIDATION_PRECISION,
    LIQUIDATION_THRESHOLD,
    MIN_HEALTH_FACTOR,
    STALENESS_WINDOW,
)
from .state.protocol_config import EngineParams

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EngineSection:
    liquidation_threshold: int = LIQUIDATION_THRESHOLD
    liquidation_precision: int = LIQUIDATION_PRECISION
    liquidation_bonus: int = LIQUIDATION_BONUS
    min_health_factor: int = MIN_HEALTH_FACTOR
    staleness_window_seconds: int = STALENESS_WINDOW

    def to_params(self) -> EngineParams:
        return EngineParams(
            liquidation_threshold=self.liquidation_threshold,
            liquidation_precision=self.liquidation_precision,
            liquidation_bonus=self.liquidation_bonus,
            min_health_factor=self.min_health_factor,
            staleness_window=self.staleness_window_seconds,
        )


@dataclass(frozen=True)
class CollateralConfig:
    symbol: str = ""
    feed_decimals: int = FEED_DECIMALS
    initial_price: int = 0  # raw feed answer, feed_decimals fractional digits
    initial_balance: int = 0  # minted to the deployer, 18 decimals


@dataclass(frozen=True)
class StableUnitConfig:
    name: str = "Decentralized Stable Coin"
    symbol: str = "DSC"


@dataclass(frozen=True)
class DeploymentConfig:
    deployer: str = "deployer"
    engine: EngineSection = field(default_factory=EngineSection)
    stable_unit: StableUnitConfig = field(default_factory=StableUnitConfig)
    collateral: tuple[CollateralConfig, ...] = ()


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


def _to_int(value: Any) -> int:
    """YAML scalars may arrive as strings after interpolation; allow 2_000e8 style ints."""
    if isinstance(value, str):
        value = value.replace("_", "").strip()
        if "e" in value.lower():
            mantissa, exponent = value.lower().split("e")
            return int(mantissa) * 10 ** int(exponent)
    return int(value)


# ---------------------------------------------------------------------------
# YAML -> dataclass builders
# ---------------------------------------------------------------------------


def _build_engine(raw: dict[str, Any]) -> EngineSection:
    return EngineSection(
        liquidation_threshold=_to_int(raw.get("liquidation_threshold", LIQUIDATION_THRESHOLD)),
        liquidation_precision=_to_int(raw.get("liquidation_precision", LIQUIDATION_PRECISION)),
        liquidation_bonus=_to_int(raw.get("liquidation_bonus", LIQUIDATION_BONUS)),
        min_health_factor=_to_int(raw.get("min_health_factor", MIN_HEALTH_FACTOR)),
        staleness_window_seconds=_to_int(raw.get("staleness_window_seconds", STALENESS_WINDOW)),
    )


def _build_collateral(raw: list[dict[str, Any]]) -> tuple[CollateralConfig, ...]:
    assets: list[CollateralConfig] = []
    for c in raw:
        assets.append(
            CollateralConfig(
                symbol=c.get("symbol", ""),
                feed_decimals=_to_int(c.get("feed_decimals", FEED_DECIMALS)),
                initial_price=_to_int(c.get("initial_price", 0)),
                initial_balance=_to_int(c.get("initial_balance", 0)),
            )
        )
    return tuple(assets)


def _build_stable_unit(raw: dict[str, Any]) -> StableUnitConfig:
    return StableUnitConfig(
        name=raw.get("name", StableUnitConfig.name),
        symbol=raw.get("symbol", StableUnitConfig.symbol),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_config(raw: dict[str, Any]) -> DeploymentConfig:
    """Build and validate a DeploymentConfig from an already loaded mapping."""
    raw = _interpolate_env(raw or {})
    cfg = DeploymentConfig(
        deployer=raw.get("deployer", "deployer") or "deployer",
        engine=_build_engine(raw.get("engine", {})),
        stable_unit=_build_stable_unit(raw.get("stable_unit", {})),
        collateral=_build_collateral(raw.get("collateral", [])),
    )
    _validate(cfg)
    return cfg


def load_config(config_path: str | Path | None = None) -> DeploymentConfig:
    """Load deployment configuration from YAML + .env.

    Args:
        config_path: Path to the YAML file. Defaults to ``config.yaml`` in the
            research directory (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    cfg = parse_config(raw)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: DeploymentConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.collateral:
        raise ValueError("At least one collateral asset must be configured")

    seen: set[str] = set()
    for asset in cfg.collateral:
        if not asset.symbol:
            raise ValueError("Collateral asset without a symbol")
        if asset.symbol in seen:
            raise ValueError(f"Collateral asset '{asset.symbol}' configured twice")
        seen.add(asset.symbol)
        if asset.initial_price <= 0:
            raise ValueError(f"Collateral asset '{asset.symbol}' needs a positive initial_price")
        if asset.initial_balance < 0:
            raise ValueError(f"Collateral asset '{asset.symbol}' has a negative initial_balance")

    # EngineParams carries the range checks for the risk parameters
    cfg.engine.to_params()
