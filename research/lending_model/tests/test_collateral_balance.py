"""Test suite for position fees and collateral balance"""
import pytest
from lending_model.src.constants import BP, COLLATERAL_BALANCE_PRECISION, SECONDS_PER_DAY
from lending_model.src.errors import AccrualOrderingError, ArithmeticOverflowError
from lending_model.src.instructions.accrue_loan_rate import update_pair_rate_info
from lending_model.src.instructions.calculate_collateral_balance import (
    calculate_collateral_balance,
    calculate_entrance_fee,
    is_liquidatable,
    settle_position
)
from lending_model.src.instructions.change_total_borrowed import change_total_borrowed
from lending_model.src.instructions.set_pair_rate_settings import set_daily_rate, set_entrance_fee
from lending_model.src.state.borrow_position import BorrowPositionSnapshot
from lending_model.src.state.pair_rate import PairRateRecord
from lending_model.src.state.rate_store import PairRateStore

SALE = "0x" + "01" * 20
HOLD = "0x" + "02" * 20
T0 = 1_700_000_000


class FloorFullMath:
    """Deterministic fake that records calls and rounds down"""

    def __init__(self):
        self.calls = []

    def mul_div(self, a, b, denominator):
        self.calls.append((a, b, denominator))
        return a * b // denominator

    def mul_div_rounding_up(self, a, b, denominator):
        return self.mul_div(a, b, denominator)


def test_zero_borrowed_settles_to_zero():
    assert calculate_collateral_balance(0, 0, 0, 0) == (0, 0)
    assert calculate_collateral_balance(0, 10**30, 123, 5) == (0, 0)

def test_fees_round_up():
    # 3 * 1 / 10000 is 0.0003
    assert calculate_collateral_balance(3, 0, 0, 1) == (-1, 1)

    # 12345 * 7 / 10000 is 8.6415
    balance, fees = calculate_collateral_balance(12_345, 100, 50, 107)
    assert fees == 9
    assert balance == 41

def test_exact_fees_not_rounded():
    balance, fees = calculate_collateral_balance(10_000, 0, 100, 150)
    assert fees == 150

def test_negative_collateral_balance():
    balance, fees = calculate_collateral_balance(10_000, 0, 100, 150)
    assert (balance, fees) == (-50, 150)
    assert is_liquidatable(balance)
    assert not is_liquidatable(0)

def test_one_day_of_fees():
    # 10_000 units at 0.1% per day owe 10 units after a day
    accumulated = 10 * COLLATERAL_BALANCE_PRECISION
    collateral = 15 * COLLATERAL_BALANCE_PRECISION
    balance, fees = calculate_collateral_balance(10_000, 0, collateral, accumulated)

    assert fees == 10 * COLLATERAL_BALANCE_PRECISION
    assert balance == 5 * COLLATERAL_BALANCE_PRECISION

def test_accumulator_below_snapshot_is_ordering_error():
    with pytest.raises(AccrualOrderingError):
        calculate_collateral_balance(1, 11, 0, 10)

def test_large_product_uses_full_precision():
    # borrowed * delta exceeds uint256, the quotient does not
    borrowed = 2**200
    delta = 2**60
    _, fees = calculate_collateral_balance(borrowed, 0, 0, delta)
    assert fees == -(-(borrowed * delta) // BP)

def test_fee_overflow_aborts():
    with pytest.raises(ArithmeticOverflowError):
        calculate_collateral_balance(2**256 - 1, 0, 0, 2**256 - 1)

def test_injected_full_math():
    full_math = FloorFullMath()
    balance, fees = calculate_collateral_balance(3, 0, 0, 1, full_math=full_math)

    assert (balance, fees) == (0, 0)
    assert full_math.calls == [(3, 1, BP)]

def test_settle_position_after_accrual():
    store = PairRateStore()
    set_daily_rate(store, SALE, HOLD, 100, T0)
    _, record = change_total_borrowed(store, SALE, HOLD, 2_000, T0)
    snapshot = BorrowPositionSnapshot.capture(2_000, record, 30 * COLLATERAL_BALANCE_PRECISION)

    # 2000 units at 1% per day: 20 units of fees per day
    _, record = update_pair_rate_info(store, SALE, HOLD, T0 + SECONDS_PER_DAY)
    balance, fees = settle_position(snapshot, record)
    assert fees == 20 * COLLATERAL_BALANCE_PRECISION
    assert balance == 10 * COLLATERAL_BALANCE_PRECISION

    _, record = update_pair_rate_info(store, SALE, HOLD, T0 + 2 * SECONDS_PER_DAY)
    balance, fees = settle_position(snapshot, record)
    assert balance == -10 * COLLATERAL_BALANCE_PRECISION
    assert is_liquidatable(balance)

def test_snapshot_is_immutable():
    snapshot = BorrowPositionSnapshot.capture(1, PairRateRecord(accumulated_rate_per_second=7), 3)
    assert snapshot.borrowing_acc_loan_rate_per_share == 7

    with pytest.raises(AttributeError):
        snapshot.borrowed_amount = 2
    with pytest.raises(ValueError):
        BorrowPositionSnapshot.capture(-1, PairRateRecord(), 0)

def test_entrance_fee():
    store = PairRateStore()
    record = store.peek(store.key_for(SALE, HOLD))

    # default 10 bps of 1_000_001 is 1000.001
    assert calculate_entrance_fee(1_000_001, record) == 1_001

    record = set_entrance_fee(store, SALE, HOLD, 250)
    assert calculate_entrance_fee(1_000_000, record) == 25_000

    record = set_entrance_fee(store, SALE, HOLD, 0)
    assert calculate_entrance_fee(1_000_000, record) == 0
