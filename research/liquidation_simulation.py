import logging
import numpy as np
import matplotlib.pyplot as plt
from dataclasses import dataclass
from typing import List, Optional, Tuple
import pandas as pd
from pathlib import Path
from datetime import datetime

from cdp_engine.src.config import load_config
from cdp_engine.src.constants import PRECISION, U256_MAX
from cdp_engine.src.deploy import Deployment, deploy
from cdp_engine.src.errors import HealthFactorNotImproved, InsufficientCollateral
from cdp_engine.src.logging_setup import configure_logging

logger = logging.getLogger(__name__)

# Health factors above this are drawn at the cap
HEALTH_FACTOR_PLOT_CAP = 5.0
STEP_SECONDS = 3600

@dataclass
class SimulationParams:
    collateral_symbol: str = "WETH"
    price_drift: float = -0.0005  # per step, slightly bearish so liquidations happen
    price_volatility: float = 0.01  # per step
    simulation_days: int = 30
    steps_per_day: int = 24  # hourly steps
    random_seed: Optional[int] = None
    experiment_name: str = "default"
    collateral_per_borrower: int = 10 * PRECISION
    # collateral value / debt at open, 2.0 is the tightest the engine allows
    borrower_ratios: Tuple[float, ...] = (2.05, 2.2, 2.5, 3.0, 4.0)
    liquidator_collateral: int = 5_000 * PRECISION
    liquidation_fraction: float = 0.5  # share of a bad position's debt covered per step
    config_path: Optional[str] = None

class SimulationClock:
    """Simulated seconds, shared by the feeds and the engine"""

    def __init__(self, start: int = 1_700_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds

class LiquidationSimulation:
    def __init__(self, params: SimulationParams):
        self.params = params
        self.clock = SimulationClock()
        self.deployment: Deployment = deploy(load_config(params.config_path), clock=self.clock)
        self.engine = self.deployment.engine
        self.token = self.deployment.tokens[params.collateral_symbol]
        self.feed = self.deployment.price_feeds[params.collateral_symbol]
        self.borrowers: List[str] = [f"borrower-{ratio}" for ratio in params.borrower_ratios]
        self.liquidator = "liquidator"
        self.records: List[dict] = []
        self.liquidations: List[dict] = []
        self.rng = np.random.default_rng(params.random_seed)

    @property
    def price(self) -> float:
        return self.feed.answer / 10 ** self.feed.decimals()

    def _fund(self, account: str, amount: int) -> None:
        self.token.faucet(account, amount)
        self.token.approve(account, self.engine.address, amount)

    def open_positions(self) -> None:
        """Open each borrower at its ratio and arm the liquidator with stable units"""
        p = self.params
        for borrower, ratio in zip(self.borrowers, p.borrower_ratios):
            self._fund(borrower, p.collateral_per_borrower)
            collateral_usd = self.engine.get_usd_value(self.token.address, p.collateral_per_borrower)
            debt = int(collateral_usd / ratio)
            self.engine.deposit_and_mint(borrower, self.token.address, p.collateral_per_borrower, debt)

        self._fund(self.liquidator, p.liquidator_collateral)
        liquidator_usd = self.engine.get_usd_value(self.token.address, p.liquidator_collateral)
        # keep the liquidator far from its own limit
        self.engine.deposit_and_mint(self.liquidator, self.token.address, p.liquidator_collateral, liquidator_usd // 8)
        self.deployment.stable.approve(self.liquidator, self.engine.address, U256_MAX)

    def step_price(self) -> None:
        p = self.params
        shock = self.rng.normal(p.price_drift - p.price_volatility ** 2 / 2, p.price_volatility)
        new_price = self.price * float(np.exp(shock))
        self.clock.advance(STEP_SECONDS)
        self.feed.update_answer(max(1, int(round(new_price * 10 ** self.feed.decimals()))))

    def liquidate_unhealthy(self, step: int) -> None:
        for borrower in self.borrowers:
            debt = self.engine.get_debt(borrower)
            if debt == 0 or self.engine.get_health_factor(borrower) >= self.engine.min_health_factor:
                continue
            debt_to_cover = max(1, int(debt * self.params.liquidation_fraction))
            try:
                result = self.engine.liquidate(self.liquidator, self.token.address, borrower, debt_to_cover)
            except (HealthFactorNotImproved, InsufficientCollateral) as e:
                # underwater past the bonus: liquidating would only make it worse
                logger.info("Step %d: %s not liquidatable: %s", step, borrower, type(e).__name__)
                continue
            self.liquidations.append({
                "step": step,
                "borrower": borrower,
                "price": self.price,
                "debt_covered": result.debt_covered / PRECISION,
                "collateral_seized": result.collateral_seized / PRECISION,
                "hf_before": result.starting_health_factor / PRECISION,
                "hf_after": min(result.ending_health_factor / PRECISION, HEALTH_FACTOR_PLOT_CAP),
            })

    def record(self, step: int) -> None:
        for borrower in self.borrowers:
            debt, collateral_usd = self.engine.get_account_information(borrower)
            hf = self.engine.get_health_factor(borrower)
            self.records.append({
                "step": step,
                "time_days": step / self.params.steps_per_day,
                "price": self.price,
                "borrower": borrower,
                "debt": debt / PRECISION,
                "collateral_usd": collateral_usd / PRECISION,
                "health_factor": min(hf / PRECISION, HEALTH_FACTOR_PLOT_CAP),
            })

    def simulate(self) -> pd.DataFrame:
        self.open_positions()
        total_steps = self.params.simulation_days * self.params.steps_per_day
        self.record(0)
        for step in range(1, total_steps + 1):
            self.step_price()
            self.liquidate_unhealthy(step)
            self.record(step)
        return pd.DataFrame(self.records)

    def plot_results(self, history: pd.DataFrame) -> Path:
        output_dir = Path('research/results') / self.params.experiment_name
        output_dir.mkdir(parents=True, exist_ok=True)

        fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8), sharex=True)

        prices = history.drop_duplicates("step")
        ax1.plot(prices["time_days"], prices["price"], label=f'{self.params.collateral_symbol} Price')
        ax1.set_ylabel('Price (USD)')
        ax1.set_title('Collateral Price Over Time')
        ax1.legend()
        ax1.grid(True, alpha=0.3)

        for borrower, rows in history.groupby("borrower", sort=False):
            ax2.plot(rows["time_days"], rows["health_factor"], label=borrower)
        ax2.axhline(y=1.0, color='r', linestyle='--', alpha=0.3)
        if self.liquidations:
            events = pd.DataFrame(self.liquidations)
            ax2.scatter(events["step"] / self.params.steps_per_day, events["hf_before"],
                        marker='x', color='black', label='liquidation')
        ax2.set_ylabel(f'Health Factor (capped at {HEALTH_FACTOR_PLOT_CAP})')
        ax2.set_xlabel('Time (days)')
        ax2.set_title('Borrower Health Factors')
        ax2.legend(bbox_to_anchor=(1.05, 1), loc='upper left')
        ax2.grid(True, alpha=0.3)

        seed_text = f"Random Seed: {self.params.random_seed}" if self.params.random_seed is not None else "No Seed"
        fig.text(0.02, 0.02, seed_text, fontsize=8, alpha=0.7)

        plt.tight_layout()

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        plot_path = output_dir / f"health_factors_{timestamp}.png"
        plt.savefig(plot_path, bbox_inches='tight', dpi=150)
        plt.close()

        history.to_csv(output_dir / f"history_{timestamp}.csv", index=False)
        if self.liquidations:
            pd.DataFrame(self.liquidations).to_csv(output_dir / f"liquidations_{timestamp}.csv", index=False)
        return plot_path

def main():
    configure_logging("INFO")

    params = SimulationParams(
        experiment_name="bearish_drift",
        random_seed=57,
        simulation_days=30,
    )
    sim = LiquidationSimulation(params)
    history = sim.simulate()
    plot_path = sim.plot_results(history)

    logger.info("%d liquidations over %d steps, chart at %s",
                len(sim.liquidations), history["step"].max(), plot_path)

if __name__ == "__main__":
    main()
