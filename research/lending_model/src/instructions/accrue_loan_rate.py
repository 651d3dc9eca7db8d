"""Loan rate accrual for a lending pair"""
import logging
import time
from dataclasses import replace
from typing import Optional, Tuple

from ..constants import DEFAULT_PARAMS, LendingParams
from ..errors import TimestampRegressionError
from ..fixed_point import checked_add, checked_div, checked_mul
from ..state.pair_rate import PairRateRecord
from ..state.rate_store import PairRateStore

logger = logging.getLogger(__name__)


def resolve_timestamp(current_timestamp: Optional[int]) -> int:
    if current_timestamp is None:
        return int(time.time())
    if current_timestamp < 0:
        raise TimestampRegressionError(f"Negative timestamp {current_timestamp}")
    return current_timestamp

def accrue(
    record: PairRateRecord,
    current_timestamp: int,
    params: LendingParams = DEFAULT_PARAMS
) -> Tuple[int, PairRateRecord]:
    """Accrue the pair accumulator up to current_timestamp.

    Pure: returns the resolved daily rate and a new record, leaving the
    input untouched. The accumulator only moves while something is
    borrowed; the timestamp always advances.

    increment = elapsed * daily_rate * PRECISION / SECONDS_PER_DAY
    """
    if current_timestamp < record.last_update_time:
        logger.warning(
            "Timestamp regression: stored %d, current %d",
            record.last_update_time,
            current_timestamp,
        )
        raise TimestampRegressionError(
            f"Current time {current_timestamp} is before last update {record.last_update_time}"
        )

    current_daily_rate = record.resolved_daily_rate(params)
    accumulated = record.accumulated_rate_per_second

    if record.total_borrowed > 0:
        elapsed = current_timestamp - record.last_update_time
        time_weighted_rate = checked_mul(elapsed, current_daily_rate)
        increment = checked_div(
            checked_mul(time_weighted_rate, params.collateral_balance_precision),
            params.seconds_per_day
        )
        accumulated = checked_add(accumulated, increment)

    return current_daily_rate, replace(
        record,
        accumulated_rate_per_second=accumulated,
        last_update_time=current_timestamp,
    )

def get_pair_rate_info(
    store: PairRateStore,
    sale_token: str,
    hold_token: str,
    current_timestamp: Optional[int] = None,
    params: LendingParams = DEFAULT_PARAMS
) -> PairRateRecord:
    """Project the pair record to now without persisting anything.

    The returned record carries the default daily rate and entrance fee in
    place of unset values.
    """
    key = store.key_for(sale_token, hold_token)
    now = resolve_timestamp(current_timestamp)
    with store.lock(key):
        record = store.peek(key)
    record.entrance_fee_bp = record.resolved_entrance_fee_bp(params)
    record.current_daily_rate = record.resolved_daily_rate(params)
    _, projected = accrue(record, now, params)
    return projected

def update_pair_rate_info(
    store: PairRateStore,
    sale_token: str,
    hold_token: str,
    current_timestamp: Optional[int] = None,
    params: LendingParams = DEFAULT_PARAMS
) -> Tuple[int, PairRateRecord]:
    """Accrue and persist the pair record.

    Must run before anything changes total_borrowed. Returns the daily rate
    used for accrual and the live stored record. An unset daily rate stays
    unset in storage.
    """
    key = store.key_for(sale_token, hold_token)
    with store.lock(key):
        return commit_accrual(store, key, resolve_timestamp(current_timestamp), params)

def commit_accrual(
    store: PairRateStore,
    key: bytes,
    current_timestamp: int,
    params: LendingParams
) -> Tuple[int, PairRateRecord]:
    """Accrue and persist under a lock on key already held by the caller"""
    record = store.load(key)
    current_daily_rate, accrued = accrue(record, current_timestamp, params)

    # Only the two counters are written back
    record.accumulated_rate_per_second = accrued.accumulated_rate_per_second
    record.last_update_time = accrued.last_update_time

    logger.debug(
        "Accrued pair %s: rate=%d acc=%d t=%d",
        key.hex()[:16],
        current_daily_rate,
        record.accumulated_rate_per_second,
        record.last_update_time,
    )
    return current_daily_rate, record
