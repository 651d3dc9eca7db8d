"""Fees and residual collateral for a borrow position"""
from typing import Tuple

from ..constants import DEFAULT_PARAMS, LendingParams
from ..errors import AccrualOrderingError
from ..fixed_point import DEFAULT_FULL_MATH, FullMath
from ..state.borrow_position import BorrowPositionSnapshot
from ..state.pair_rate import PairRateRecord


def calculate_collateral_balance(
    borrowed_amount: int,
    borrowing_acc_loan_rate_per_share: int,
    borrowing_daily_rate_collateral: int,
    acc_loan_rate_per_seconds: int,
    params: LendingParams = DEFAULT_PARAMS,
    full_math: FullMath = DEFAULT_FULL_MATH
) -> Tuple[int, int]:
    """Return (collateral_balance, current_fees) for a position.

    Fees are rounded up. The balance is signed: below zero the position's
    collateral no longer covers its fees.
    """
    if borrowed_amount == 0:
        return 0, 0

    rate_delta = acc_loan_rate_per_seconds - borrowing_acc_loan_rate_per_share
    if rate_delta < 0:
        raise AccrualOrderingError(
            f"Pair accumulator {acc_loan_rate_per_seconds} is below position "
            f"snapshot {borrowing_acc_loan_rate_per_share}"
        )

    current_fees = full_math.mul_div_rounding_up(borrowed_amount, rate_delta, params.bp)
    collateral_balance = borrowing_daily_rate_collateral - current_fees
    return collateral_balance, current_fees

def settle_position(
    snapshot: BorrowPositionSnapshot,
    record: PairRateRecord,
    params: LendingParams = DEFAULT_PARAMS,
    full_math: FullMath = DEFAULT_FULL_MATH
) -> Tuple[int, int]:
    """calculate_collateral_balance for a snapshot against an accrued record"""
    return calculate_collateral_balance(
        snapshot.borrowed_amount,
        snapshot.borrowing_acc_loan_rate_per_share,
        snapshot.borrowing_daily_rate_collateral,
        record.accumulated_rate_per_second,
        params,
        full_math,
    )

def is_liquidatable(collateral_balance: int) -> bool:
    return collateral_balance < 0

def calculate_entrance_fee(
    amount: int,
    record: PairRateRecord,
    params: LendingParams = DEFAULT_PARAMS,
    full_math: FullMath = DEFAULT_FULL_MATH
) -> int:
    """Entrance fee on a borrowed amount, rounded up"""
    return full_math.mul_div_rounding_up(amount, record.resolved_entrance_fee_bp(params), params.bp)
