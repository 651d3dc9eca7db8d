"""Borrow and repay bookkeeping on the pair total"""
import logging
from typing import Optional, Tuple

from ..constants import DEFAULT_PARAMS, LendingParams
from ..fixed_point import checked_add, checked_sub
from ..state.pair_rate import PairRateRecord
from ..state.rate_store import PairRateStore
from .accrue_loan_rate import commit_accrual, resolve_timestamp

logger = logging.getLogger(__name__)


def change_total_borrowed(
    store: PairRateStore,
    sale_token: str,
    hold_token: str,
    delta: int,
    current_timestamp: Optional[int] = None,
    params: LendingParams = DEFAULT_PARAMS
) -> Tuple[int, PairRateRecord]:
    """Accrue at the old total, then apply a signed change to total_borrowed.

    Both steps run under one pair lock. A repay larger than the total fails
    before anything is written.
    """
    key = store.key_for(sale_token, hold_token)
    now = resolve_timestamp(current_timestamp)
    with store.lock(key):
        record = store.peek(key)
        if delta >= 0:
            new_total = checked_add(record.total_borrowed, delta)
        else:
            new_total = checked_sub(record.total_borrowed, -delta)

        current_daily_rate, record = commit_accrual(store, key, now, params)
        record.total_borrowed = new_total

    logger.debug("Pair %s total borrowed now %d", key.hex()[:16], new_total)
    return current_daily_rate, record
