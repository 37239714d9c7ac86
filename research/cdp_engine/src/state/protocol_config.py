"""Engine risk parameters"""
from dataclasses import dataclass
from ..constants import (
    LIQUIDATION_BONUS,
    LIQUIDATION_PRECISION,
    LIQUIDATION_THRESHOLD,
    MIN_HEALTH_FACTOR,
    STALENESS_WINDOW,
)

@dataclass(frozen=True)
class EngineParams:
    """Single global risk configuration, fixed for the engine's lifetime"""
    liquidation_threshold: int = LIQUIDATION_THRESHOLD
    liquidation_precision: int = LIQUIDATION_PRECISION
    liquidation_bonus: int = LIQUIDATION_BONUS  # same precision as the threshold
    min_health_factor: int = MIN_HEALTH_FACTOR
    staleness_window: int = STALENESS_WINDOW  # seconds

    def __post_init__(self):
        if self.liquidation_precision <= 0:
            raise ValueError("liquidation_precision must be positive")
        if not 0 < self.liquidation_threshold <= self.liquidation_precision:
            raise ValueError("liquidation_threshold must be within (0, liquidation_precision]")
        if self.liquidation_bonus < 0:
            raise ValueError("liquidation_bonus cannot be negative")
        if self.min_health_factor <= 0:
            raise ValueError("min_health_factor must be positive")
        if self.staleness_window <= 0:
            raise ValueError("staleness_window must be positive")

    @property
    def collateralization_ratio(self) -> float:
        """Required collateral value per unit of debt, e.g. 2.0 for a 50 threshold"""
        return self.liquidation_precision / self.liquidation_threshold
