"""Protocol constants for the lending pair model"""
from dataclasses import dataclass

# Fixed point scale factors
BP = 10_000  # Basis points (100% = 10000)
COLLATERAL_BALANCE_PRECISION = 1_000_000_000_000_000_000  # 1e18 for the loan rate accumulator

# Time constants
SECONDS_PER_DAY = 24 * 60 * 60  # 24 hours * 60 minutes * 60 seconds

# Rate constants
DEFAULT_DAILY_RATE = 10          # 0.1% per day in bps
MIN_DAILY_RATE = 5               # 0.05% per day in bps
MAX_DAILY_RATE = 10_000          # 100% per day in bps

# Fee constants
DEFAULT_ENTRANCE_FEE_BPS = 10    # 0.1% in bps
MAX_ENTRANCE_FEE_BPS = 1_000     # 10% in bps

# Native integer widths
UINT256_MAX = 2**256 - 1


@dataclass(frozen=True)
class LendingParams:
    """Protocol constants consumed by accrual and settlement"""
    default_daily_rate: int = DEFAULT_DAILY_RATE
    default_entrance_fee_bps: int = DEFAULT_ENTRANCE_FEE_BPS
    collateral_balance_precision: int = COLLATERAL_BALANCE_PRECISION
    bp: int = BP
    seconds_per_day: int = SECONDS_PER_DAY


DEFAULT_PARAMS = LendingParams()
