"""Bounded de-duplication of transfer records across overlapping queries."""

from collections import deque

from ethhistory.domain.models import TransferRecord


def dedup_key(record: TransferRecord) -> str:
    """Stable identity of a transfer.

    Prefers the provider's uniqueId, then falls back to
    hash|category|logIndex|tokenId|from|to.
    """
    if record.unique_id:
        return record.unique_id
    parts = [
        record.hash,
        record.category.value,
        "" if record.log_index is None else str(record.log_index),
        record.token_id or "",
        (record.from_address or "").lower(),
        (record.to_address or "").lower(),
    ]
    return "|".join(parts)


class RollingDedupSet:
    """Set of recently admitted keys with a fixed capacity.

    Eviction is strict FIFO by insertion order; lookups do not refresh a key.
    Evicted keys can be admitted again.
    """

    def __init__(self, capacity: int = 250_000) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = capacity
        self._keys: set[str] = set()
        self._order: deque[str] = deque()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __contains__(self, key: str) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._order)

    def add(self, key: str) -> bool:
        """Admit a key. Returns False if it was already present."""
        if key in self._keys:
            return False
        self._keys.add(key)
        self._order.append(key)
        if len(self._order) > self._capacity:
            self._keys.discard(self._order.popleft())
        return True
