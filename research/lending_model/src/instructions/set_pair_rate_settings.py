"""Daily rate and entrance fee settings for a pair"""
import logging
from typing import Optional

from ..constants import (
    DEFAULT_PARAMS,
    MAX_DAILY_RATE,
    MAX_ENTRANCE_FEE_BPS,
    MIN_DAILY_RATE,
    LendingParams
)
from ..errors import InvalidSettingsError
from ..state.pair_rate import PairRateRecord
from ..state.rate_store import PairRateStore
from .accrue_loan_rate import commit_accrual, resolve_timestamp

logger = logging.getLogger(__name__)


def set_daily_rate(
    store: PairRateStore,
    sale_token: str,
    hold_token: str,
    daily_rate: Optional[int],
    current_timestamp: Optional[int] = None,
    params: LendingParams = DEFAULT_PARAMS
) -> PairRateRecord:
    """Set the pair daily rate, None restoring the protocol default.

    Time elapsed so far is accrued at the old rate first.
    """
    if daily_rate is not None and not MIN_DAILY_RATE <= daily_rate <= MAX_DAILY_RATE:
        raise InvalidSettingsError(
            f"Daily rate {daily_rate} outside [{MIN_DAILY_RATE}, {MAX_DAILY_RATE}]"
        )

    key = store.key_for(sale_token, hold_token)
    now = resolve_timestamp(current_timestamp)
    with store.lock(key):
        _, record = commit_accrual(store, key, now, params)
        record.current_daily_rate = daily_rate

    logger.info("Pair %s daily rate set to %s", key.hex()[:16], daily_rate)
    return record

def set_entrance_fee(
    store: PairRateStore,
    sale_token: str,
    hold_token: str,
    entrance_fee_bp: Optional[int]
) -> PairRateRecord:
    """Set the pair entrance fee, None restoring the protocol default"""
    if entrance_fee_bp is not None and not 0 <= entrance_fee_bp <= MAX_ENTRANCE_FEE_BPS:
        raise InvalidSettingsError(
            f"Entrance fee {entrance_fee_bp} outside [0, {MAX_ENTRANCE_FEE_BPS}]"
        )

    key = store.key_for(sale_token, hold_token)
    with store.lock(key):
        record = store.load(key)
        record.entrance_fee_bp = entrance_fee_bp

    logger.info("Pair %s entrance fee set to %s", key.hex()[:16], entrance_fee_bp)
    return record
