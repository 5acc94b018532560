"""In-process serialization of settlement per loan"""

import threading
import zlib
from contextlib import contextmanager
from typing import Iterator, List


class SettlementLocks:
    """
    Fixed pool of locks striped by loan id.

    Two settlements for the same loan always hash to the same stripe and run
    one after the other. Unrelated loans may share a stripe, which only costs
    a short wait. Cross-process exclusion comes from the row lock taken by
    the repository.
    """

    def __init__(self, stripes: int = 64):
        if stripes < 1:
            raise ValueError("stripes must be >= 1")
        self._locks: List[threading.Lock] = [threading.Lock() for _ in range(stripes)]

    def _lock_for(self, loan_id: str) -> threading.Lock:
        return self._locks[zlib.crc32(loan_id.encode("utf-8")) % len(self._locks)]

    @contextmanager
    def hold(self, loan_id: str) -> Iterator[None]:
        lock = self._lock_for(loan_id)
        with lock:
            yield


settlement_locks = SettlementLocks()
