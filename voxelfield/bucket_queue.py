"""Approximate priority queue that sorts keys into value buckets."""

from __future__ import annotations

import math
from collections import deque


class BucketQueue:
    """Priority queue with ``num_buckets`` FIFO buckets over [0, max_val].

    Values are bucketed by magnitude and clamped at ``max_val``; keys in the
    same bucket come out in insertion order.
    """

    def __init__(self, num_buckets=0, max_val=1.0) -> None:
        self.set_num_buckets(num_buckets, max_val)

    def set_num_buckets(self, num_buckets, max_val) -> None:
        """Reconfigure the buckets. Empties the queue."""
        num_buckets = int(num_buckets)
        if num_buckets < 0:
            raise ValueError("number of buckets must not be negative")
        self._num_buckets = num_buckets
        self._max_val = float(max_val)
        self.clear()

    def push(self, key, value) -> None:
        if self._num_buckets == 0:
            raise ValueError("bucket queue has no buckets")
        value = float(value)
        if value > self._max_val:
            value = self._max_val
        bucket_index = int(
            math.floor(abs(value) / self._max_val * (self._num_buckets - 1))
        )
        bucket_index = min(bucket_index, self._num_buckets - 1)
        if bucket_index < self._last_bucket_index:
            self._last_bucket_index = bucket_index
        self._buckets[bucket_index].append(key)
        self._num_elements += 1

    def _advance(self) -> None:
        while (
            self._last_bucket_index < self._num_buckets
            and not self._buckets[self._last_bucket_index]
        ):
            self._last_bucket_index += 1

    def front(self):
        """The key in the lowest non-empty bucket, without removing it."""
        if self._num_buckets == 0:
            raise ValueError("bucket queue has no buckets")
        if not self._num_elements:
            raise IndexError("front of an empty bucket queue")
        self._advance()
        return self._buckets[self._last_bucket_index][0]

    def pop(self):
        """Remove and return the front key; does nothing on an empty queue."""
        if not self._num_elements:
            return None
        self._advance()
        if self._last_bucket_index < self._num_buckets:
            self._num_elements -= 1
            return self._buckets[self._last_bucket_index].popleft()
        return None

    def clear(self) -> None:
        self._buckets = [deque() for _ in range(self._num_buckets)]
        self._last_bucket_index = 0
        self._num_elements = 0

    def __len__(self) -> int:
        return self._num_elements

    def __bool__(self) -> bool:
        return self._num_elements > 0