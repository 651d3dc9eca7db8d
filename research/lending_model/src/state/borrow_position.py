"""Borrow position snapshot state"""
from dataclasses import dataclass

from .pair_rate import PairRateRecord


@dataclass(frozen=True)
class BorrowPositionSnapshot:
    """Values captured when a position is opened, read but never updated"""
    borrowed_amount: int
    borrowing_acc_loan_rate_per_share: int  # pair accumulator at borrow time
    borrowing_daily_rate_collateral: int  # scaled by COLLATERAL_BALANCE_PRECISION

    @classmethod
    def capture(
        cls,
        borrowed_amount: int,
        record: PairRateRecord,
        daily_rate_collateral: int
    ) -> "BorrowPositionSnapshot":
        """Snapshot a position against a freshly accrued pair record"""
        if borrowed_amount < 0 or daily_rate_collateral < 0:
            raise ValueError("Snapshot amounts must be non-negative")
        return cls(
            borrowed_amount=borrowed_amount,
            borrowing_acc_loan_rate_per_share=record.accumulated_rate_per_second,
            borrowing_daily_rate_collateral=daily_rate_collateral,
        )
