"""Per pair loan rate state"""
from dataclasses import dataclass, replace
from typing import Optional

from ..constants import DEFAULT_PARAMS, LendingParams


@dataclass
class PairRateRecord:
    """Loan rate info for one (sale token, hold token) pair"""
    last_update_time: int = 0  # seconds
    accumulated_rate_per_second: int = 0  # scaled by COLLATERAL_BALANCE_PRECISION
    current_daily_rate: Optional[int] = None  # bps per day, None means protocol default
    total_borrowed: int = 0
    entrance_fee_bp: Optional[int] = None  # None means protocol default

    def resolved_daily_rate(self, params: LendingParams = DEFAULT_PARAMS) -> int:
        if self.current_daily_rate is None:
            return params.default_daily_rate
        return self.current_daily_rate

    def resolved_entrance_fee_bp(self, params: LendingParams = DEFAULT_PARAMS) -> int:
        if self.entrance_fee_bp is None:
            return params.default_entrance_fee_bps
        return self.entrance_fee_bp

    def copy(self) -> "PairRateRecord":
        return replace(self)
