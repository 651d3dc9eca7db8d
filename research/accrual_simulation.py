import numpy as np
import matplotlib.pyplot as plt
from dataclasses import dataclass, replace
from typing import List, Optional
import pandas as pd
from pathlib import Path
from datetime import datetime

from lending_model.src.constants import (
    BP,
    COLLATERAL_BALANCE_PRECISION,
    DEFAULT_DAILY_RATE,
    SECONDS_PER_DAY
)
from lending_model.src.instructions.accrue_loan_rate import update_pair_rate_info
from lending_model.src.instructions.calculate_collateral_balance import settle_position
from lending_model.src.instructions.change_total_borrowed import change_total_borrowed
from lending_model.src.instructions.set_pair_rate_settings import set_daily_rate
from lending_model.src.state.borrow_position import BorrowPositionSnapshot
from lending_model.src.state.rate_store import PairRateStore

SALE_TOKEN = "0x" + "11" * 20
HOLD_TOKEN = "0x" + "22" * 20

@dataclass
class SimulationParams:
    daily_rate: int = DEFAULT_DAILY_RATE  # bps per day
    simulation_days: int = 30
    steps_per_day: int = 24  # hourly steps
    start_time: int = 1_700_000_000
    initial_borrowed: int = 1_000_000 * 10**6  # borrowed by everyone but the tracked position
    flow_volatility: float = 0.02  # std of per step borrow/repay flow, relative to the pool
    position_amount: int = 10_000 * 10**6
    collateral_days: int = 14  # days of fees the tracked position's collateral covers
    random_seed: Optional[int] = None
    experiment_name: str = "default"
    sale_token: str = SALE_TOKEN
    hold_token: str = HOLD_TOKEN

    @property
    def position_collateral(self) -> int:
        """Collateral covering collateral_days of fees, in accumulator precision"""
        daily_fee = self.position_amount * self.daily_rate * COLLATERAL_BALANCE_PRECISION // BP
        return daily_fee * self.collateral_days

class LoanRateSimulation:
    def __init__(self, params: SimulationParams):
        self.params = params
        self.store = PairRateStore()
        self.times: List[float] = []
        self.accumulators: List[int] = []
        self.totals: List[int] = []
        self.balances: List[int] = []
        self.fees: List[int] = []

        if params.random_seed is not None:
            np.random.seed(params.random_seed)

    def simulate(self) -> pd.DataFrame:
        sale_token, hold_token = self.params.sale_token, self.params.hold_token
        start = self.params.start_time

        set_daily_rate(self.store, sale_token, hold_token, self.params.daily_rate, start)
        change_total_borrowed(
            self.store, sale_token, hold_token,
            self.params.initial_borrowed + self.params.position_amount, start
        )
        _, record = update_pair_rate_info(self.store, sale_token, hold_token, start)
        snapshot = BorrowPositionSnapshot.capture(
            self.params.position_amount, record, self.params.position_collateral
        )

        step_seconds = SECONDS_PER_DAY // self.params.steps_per_day
        total_steps = self.params.simulation_days * self.params.steps_per_day

        for step in range(1, total_steps + 1):
            now = start + step * step_seconds

            # Random borrow/repay by other users, never touching the tracked position
            others = record.total_borrowed - self.params.position_amount
            flow = int(np.random.normal(0, self.params.flow_volatility) * others)
            flow = max(flow, -others)

            _, record = change_total_borrowed(self.store, sale_token, hold_token, flow, now)
            balance, fees = settle_position(snapshot, record)

            self.times.append(step / self.params.steps_per_day)
            self.accumulators.append(record.accumulated_rate_per_second)
            self.totals.append(record.total_borrowed)
            self.balances.append(balance)
            self.fees.append(fees)

        return self.to_frame()

    def to_frame(self) -> pd.DataFrame:
        scale = COLLATERAL_BALANCE_PRECISION
        return pd.DataFrame({
            "day": self.times,
            "accrued_rate_bps": [acc / scale for acc in self.accumulators],
            "total_borrowed": [float(total) for total in self.totals],
            "position_fees": [fee / scale for fee in self.fees],
            "position_collateral_balance": [balance / scale for balance in self.balances],
        })

    def plot_results(self):
        output_dir = Path('research/results') / self.params.experiment_name
        output_dir.mkdir(parents=True, exist_ok=True)
        frame = self.to_frame()

        fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8))

        # Plot accumulated rate
        ax1.plot(frame["day"], frame["accrued_rate_bps"] / BP * 100, label='Accrued loan rate')
        ax1.set_ylabel('Accrued rate (%)')
        ax1.set_title('Pair Loan Rate Accumulator')
        ax1.legend()
        ax1.grid(True)

        # Plot collateral balance
        ax2.plot(frame["day"], frame["position_collateral_balance"], label='Collateral balance', color='orange')
        ax2.axhline(y=0.0, color='r', linestyle='--', alpha=0.3)
        ax2.set_ylabel('Collateral balance')
        ax2.set_xlabel('Time (days)')
        ax2.set_title('Tracked Position Collateral')
        ax2.legend()
        ax2.grid(True)

        plt.tight_layout()

        plot_name = f"daily_rate_{self.params.daily_rate}_collateral_days_{self.params.collateral_days}"
        if self.params.random_seed is not None:
            plot_name += f"_seed_{self.params.random_seed}"

        plt.savefig(output_dir / f"{plot_name}.png")
        plt.close()

def liquidation_day(frame: pd.DataFrame) -> Optional[float]:
    """First simulated day with a negative collateral balance"""
    negative = frame[frame["position_collateral_balance"] < 0]
    if negative.empty:
        return None
    return float(negative["day"].iloc[0])

def compare_daily_rates(daily_rates: List[int], base_params: SimulationParams) -> pd.DataFrame:
    """Run one simulation per daily rate and plot collateral balances together"""
    output_dir = Path('research/results/daily_rate_comparison')
    output_dir.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(1, 1, figsize=(12, 6))
    summary = []

    for daily_rate in daily_rates:
        params = replace(base_params, daily_rate=daily_rate)
        frame = LoanRateSimulation(params).simulate()
        ax.plot(frame["day"], frame["position_collateral_balance"], label=f"{daily_rate / 100:.2f}% / day")
        summary.append({
            "daily_rate": daily_rate,
            "final_fees": frame["position_fees"].iloc[-1],
            "liquidation_day": liquidation_day(frame),
        })
        print(f"Daily rate {daily_rate} bps: liquidation day {summary[-1]['liquidation_day']}")

    ax.axhline(y=0.0, color='r', linestyle='--', alpha=0.3)
    ax.set_ylabel('Collateral balance')
    ax.set_xlabel('Time (days)')
    ax.set_title('Position Collateral by Daily Rate')
    ax.legend(bbox_to_anchor=(1.05, 1), loc='upper left')
    ax.grid(True, alpha=0.3)

    seed_text = f"Random Seed: {base_params.random_seed}" if base_params.random_seed is not None else "No Seed"
    fig.text(0.02, 0.02, seed_text, fontsize=8, alpha=0.7)

    plt.tight_layout()

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    plt.savefig(output_dir / f"daily_rate_comparison_{timestamp}.png", bbox_inches='tight', dpi=300)
    plt.close()

    return pd.DataFrame(summary)

def main():
    base_params = SimulationParams(
        experiment_name="daily_rate_comparison",
        random_seed=57,
        simulation_days=30
    )
    summary = compare_daily_rates([5, 10, 25, 50], base_params)
    print(summary.to_string(index=False))


if __name__ == "__main__":
    main()
