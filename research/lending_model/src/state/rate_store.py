"""Key-value store of pair loan rate records"""
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List

import pandas as pd

from ..keys import DEFAULT_KEY_DERIVER, PairKeyDeriver
from .pair_rate import PairRateRecord


class PairRateStore:
    """Maps pair keys to PairRateRecord.

    Records are created lazily on first load and never deleted. Read-accrue-write
    sequences on one pair must run inside lock(key).
    """

    def __init__(self, key_deriver: PairKeyDeriver = DEFAULT_KEY_DERIVER):
        self.key_deriver = key_deriver
        self._records: Dict[bytes, PairRateRecord] = {}
        self._locks: Dict[bytes, threading.Lock] = {}
        self._guard = threading.Lock()

    def key_for(self, sale_token: str, hold_token: str) -> bytes:
        return self.key_deriver.derive(sale_token, hold_token)

    def load(self, key: bytes) -> PairRateRecord:
        """Live record for key, created with default values if absent"""
        record = self._records.get(key)
        if record is None:
            with self._guard:
                record = self._records.setdefault(key, PairRateRecord())
        return record

    def peek(self, key: bytes) -> PairRateRecord:
        """Copy of the record for key; never inserts.

        Only consistent while lock(key) is held.
        """
        record = self._records.get(key)
        if record is None:
            return PairRateRecord()
        return record.copy()

    @contextmanager
    def lock(self, key: bytes) -> Iterator[None]:
        with self._guard:
            pair_lock = self._locks.setdefault(key, threading.Lock())
        with pair_lock:
            yield

    def keys(self) -> List[bytes]:
        with self._guard:
            return list(self._records)

    def __contains__(self, key: bytes) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)

    def to_frame(self) -> pd.DataFrame:
        """Export every record for off-line readers, one row per pair"""
        columns = [
            "pair_key",
            "last_update_time",
            "accumulated_rate_per_second",
            "current_daily_rate",
            "total_borrowed",
            "entrance_fee_bp",
        ]
        rows = []
        for key in self.keys():
            with self.lock(key):
                record = self.peek(key)
            rows.append({
                "pair_key": key.hex(),
                "last_update_time": record.last_update_time,
                # accumulator and amounts can exceed int64
                "accumulated_rate_per_second": record.accumulated_rate_per_second,
                "current_daily_rate": record.current_daily_rate,
                "total_borrowed": record.total_borrowed,
                "entrance_fee_bp": record.entrance_fee_bp,
            })
        frame = pd.DataFrame(rows, columns=columns)
        for column in ("accumulated_rate_per_second", "total_borrowed"):
            frame[column] = frame[column].astype(object)
        for column in ("current_daily_rate", "entrance_fee_bp"):
            frame[column] = frame[column].astype("Int64")
        return frame
