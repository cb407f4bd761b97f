"""Generic containers: a chained hash map, a FIFO queue, binary-heap
priority queues and a callback-driven quicksort."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, MutableSequence, TypeVar

K = TypeVar("K")
V = TypeVar("V")
T = TypeVar("T")

HashFun = Callable[[Any], int]
EqualsFun = Callable[[Any, Any], bool]
PriComparator = Callable[[Any, Any], int]

_UINT_MASK = 0xFFFFFFFF


# ---------------------------------------------------------------------------
# Hash map
# ---------------------------------------------------------------------------


class HashMap(Generic[K, V]):
    """Hash map with separate chaining and user supplied hash and equality."""

    def __init__(self, capacity: int, hash_fun: HashFun, equals_fun: EqualsFun) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._hash = hash_fun
        self._equals = equals_fun
        # Each bucket keeps its entries oldest first; the newest is at the end.
        self._buckets: list[list[list[Any]]] = [[] for _ in range(capacity)]

    def _bucket(self, key: K) -> list[list[Any]]:
        return self._buckets[(self._hash(key) & _UINT_MASK) % self._capacity]

    def _find(self, bucket: list[list[Any]], key: K) -> int | None:
        for pos in range(len(bucket) - 1, -1, -1):
            if self._equals(key, bucket[pos][0]):
                return pos
        return None

    def query(self, key: K) -> V | None:
        """Return the value bound to ``key``, or None when it is absent."""
        bucket = self._bucket(key)
        pos = self._find(bucket, key)
        return None if pos is None else bucket[pos][1]

    def define(self, key: K, val: V) -> bool:
        """Bind ``key`` to ``val``; return True if an existing binding was replaced."""
        bucket = self._bucket(key)
        pos = self._find(bucket, key)
        if pos is not None:
            bucket[pos][1] = val
            return True
        bucket.append([key, val])
        return False

    def delete(self, key: K) -> V | None:
        """Remove ``key`` and return its value, or None when it is absent."""
        bucket = self._bucket(key)
        pos = self._find(bucket, key)
        if pos is None:
            return None
        return bucket.pop(pos)[1]

    def contains(self, key: K) -> bool:
        """Tell whether ``key`` is bound."""
        return self._find(self._bucket(key), key) is not None

    def __iter__(self) -> Iterator[tuple[K, V]]:
        """Yield (key, value) pairs bucket by bucket, newest first in a bucket."""
        for bucket in self._buckets:
            for key, val in reversed(list(bucket)):
                yield key, val


def hash_string(text: str) -> int:
    """Hash a string into an unsigned 32-bit value."""
    total = 2
    for byte in text.encode("utf-8"):
        signed = byte - 256 if byte > 127 else byte
        total = ((total + signed) * 5) & _UINT_MASK
    return total


def equals_strings(a: str, b: str) -> bool:
    """Tell whether two strings are equal."""
    return a == b


# ---------------------------------------------------------------------------
# FIFO queue
# ---------------------------------------------------------------------------


class FifoQueue(Generic[T]):
    """First-in first-out queue whose reads return None when empty."""

    def __init__(self) -> None:
        self._items: deque[T] = deque()

    def put(self, item: T) -> None:
        """Append ``item`` at the back."""
        self._items.append(item)

    def get(self) -> T | None:
        """Remove and return the front item, or None when empty."""
        return self._items.popleft() if self._items else None

    def peek(self) -> T | None:
        """Return the front item without removing it, or None when empty."""
        return self._items[0] if self._items else None

    def __len__(self) -> int:
        return len(self._items)


# ---------------------------------------------------------------------------
# Priority queues
# ---------------------------------------------------------------------------


class FullPriQueue(Generic[T]):
    """Binary heap; the element greatest under ``compare`` comes out first.

    ``compare(a, b)`` returns a positive number when ``a`` ranks above ``b``,
    a negative one when below and zero when they tie.
    """

    def __init__(self, compare: PriComparator, initial_size: int = 16) -> None:
        if initial_size <= 0:
            raise ValueError("initial_size must be positive")
        self._compare = compare
        self._heap: list[T] = []

    def _shift_up(self, i: int) -> None:
        heap, compare = self._heap, self._compare
        while i > 0:
            parent = (i - 1) // 2
            if compare(heap[parent], heap[i]) >= 0:
                break
            heap[parent], heap[i] = heap[i], heap[parent]
            i = parent

    def _shift_down(self, i: int) -> None:
        heap, compare = self._heap, self._compare
        size = len(heap)
        while True:
            best = i
            for child in (2 * i + 1, 2 * i + 2):
                if child < size and compare(heap[child], heap[best]) > 0:
                    best = child
            if best == i:
                return
            heap[i], heap[best] = heap[best], heap[i]
            i = best

    def put(self, elem: T) -> None:
        """Insert ``elem``."""
        self._heap.append(elem)
        self._shift_up(len(self._heap) - 1)

    def get(self) -> T:
        """Remove and return the top element; raise IndexError when empty."""
        if not self._heap:
            raise IndexError("get from an empty priority queue")
        heap = self._heap
        result = heap[0]
        last = heap.pop()
        if heap:
            heap[0] = last
            self._shift_down(0)
        return result

    def peek(self) -> T | None:
        """Return the top element without removing it, or None when empty."""
        return self._heap[0] if self._heap else None

    def __len__(self) -> int:
        return len(self._heap)


@dataclass
class _PriObj:
    pri: float
    elem: Any


def _pri_compare(a: _PriObj, b: _PriObj) -> int:
    diff = b.pri - a.pri
    return 1 if diff > 0 else (-1 if diff < 0 else 0)


class PriQueue(Generic[T]):
    """Priority queue of elements keyed by a number; the lowest number leaves first."""

    def __init__(self) -> None:
        self._queue: FullPriQueue[_PriObj] = FullPriQueue(_pri_compare, 16)

    def put(self, elem: T, pri: float) -> None:
        """Insert ``elem`` with priority ``pri``."""
        self._queue.put(_PriObj(pri, elem))

    def get(self) -> T:
        """Remove and return the element with the lowest priority.

        Raises IndexError when empty.
        """
        return self._queue.get().elem

    def peek(self) -> T | None:
        """Return the element with the lowest priority, or None when empty."""
        top = self._queue.peek()
        return None if top is None else top.elem

    def best(self) -> float:
        """Return the lowest priority in the queue, or 0 when empty."""
        top = self._queue.peek()
        return 0 if top is None else top.pri

    def __len__(self) -> int:
        return len(self._queue)


# ---------------------------------------------------------------------------
# Generic sort
# ---------------------------------------------------------------------------


def sort(
    seq: Any,
    left: int,
    right: int,
    compare: Callable[[Any, int, int], int],
    swap: Callable[[Any, int, int], None],
) -> None:
    """Quicksort positions ``left``..``right`` (inclusive) of ``seq``.

    Elements are only reached through ``compare(seq, i, j)``, negative when
    position ``i`` sorts before ``j``, and ``swap(seq, i, j)``.
    """
    if left >= right:
        return
    swap(seq, left, (left + right) // 2)
    last = left
    for i in range(left + 1, right + 1):
        if compare(seq, i, left) < 0:
            last += 1
            swap(seq, last, i)
    swap(seq, left, last)
    sort(seq, left, last - 1, compare, swap)
    sort(seq, last + 1, right, compare, swap)


def _list_compare(seq: MutableSequence[Any], i: int, j: int) -> int:
    return (seq[i] > seq[j]) - (seq[i] < seq[j])