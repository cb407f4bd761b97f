"""Semaphores, mutexes and condition variables with FIFO hand-off.

Waiting threads are served strictly in arrival order. A released ticket or
mutex is handed straight to the first waiter instead of being left free to
be grabbed by whoever comes next.
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field

# Guards the state of every primitive in this module.
_kernel = threading.Lock()


class SyncError(RuntimeError):
    """Raised when a primitive is used in a way that breaks its protocol."""


@dataclass(eq=False)
class _Waiter:
    thread: threading.Thread
    granted: threading.Event = field(default_factory=threading.Event)


class Semaphore:
    """Counting semaphore whose waiters are woken first come, first served."""

    def __init__(self, tickets: int = 0) -> None:
        if tickets < 0:
            raise ValueError("a semaphore cannot start with a negative count")
        self._count = tickets
        self._queue: deque[_Waiter] = deque()

    @property
    def value(self) -> int:
        """Tickets currently available."""
        with _kernel:
            return self._count

    @property
    def waiting(self) -> int:
        """Number of threads blocked in :meth:`wait`."""
        with _kernel:
            return len(self._queue)

    def wait(self) -> None:
        """Take a ticket, blocking until one is posted if none is left."""
        with _kernel:
            if self._count > 0:
                self._count -= 1
                return
            waiter = _Waiter(threading.current_thread())
            self._queue.append(waiter)
        waiter.granted.wait()

    def post(self) -> None:
        """Hand a ticket to the oldest waiter, or store it when none waits."""
        with _kernel:
            if self._queue:
                self._queue.popleft().granted.set()
            else:
                self._count += 1


class Mutex:
    """Non-reentrant lock that remembers its owner and grants it in FIFO order."""

    def __init__(self) -> None:
        self._owner: threading.Thread | None = None
        self._wq: deque[_Waiter] = deque()

    @property
    def owner(self) -> threading.Thread | None:
        """The thread holding the mutex, or None."""
        with _kernel:
            return self._owner

    @property
    def waiting(self) -> int:
        """Number of threads queued for the mutex."""
        with _kernel:
            return len(self._wq)

    def lock(self) -> None:
        """Acquire the mutex, queueing behind earlier requests."""
        me = threading.current_thread()
        with _kernel:
            if self._owner is None and not self._wq:
                self._owner = me
                return
            waiter = _Waiter(me)
            self._wq.append(waiter)
        waiter.granted.wait()

    def unlock(self) -> None:
        """Release the mutex, passing it to the first queued thread if any."""
        with _kernel:
            self._check_owner("unlock")
            self._release()

    def _check_owner(self, operation: str) -> None:
        if self._owner is not threading.current_thread():
            raise SyncError(f"{operation}: this thread does not own this mutex")

    def _release(self) -> None:
        if self._wq:
            nxt = self._wq.popleft()
            self._owner = nxt.thread
            nxt.granted.set()
        else:
            self._owner = None

    def __enter__(self) -> Mutex:
        self.lock()
        return self

    def __exit__(self, *args: object) -> None:
        self.unlock()


class Condition:
    """Condition variable bound to one mutex.

    Signalled threads are moved to the mutex queue and resume once they are
    granted the mutex.
    """

    def __init__(self, mutex: Mutex | None = None) -> None:
        self._mutex = mutex
        self._wq: deque[_Waiter] = deque()

    @property
    def waiting(self) -> int:
        """Number of threads waiting for a signal."""
        with _kernel:
            return len(self._wq)

    def wait(self, mutex: Mutex) -> None:
        """Release ``mutex``, wait for a signal and reacquire ``mutex``."""
        with _kernel:
            mutex._check_owner("wait")
            if self._mutex is not None and self._mutex is not mutex:
                raise SyncError("wait: the mutex is not the one registered before")
            self._mutex = mutex
            waiter = _Waiter(threading.current_thread())
            self._wq.append(waiter)
            mutex._release()
        waiter.granted.wait()

    def signal(self) -> None:
        """Move the oldest waiter, if any, to the mutex queue."""
        with _kernel:
            if not self._wq:
                return
            mutex = self._mutex
            if mutex is not None:
                mutex._check_owner("signal")
            waiter = self._wq.popleft()
            if mutex is not None:
                mutex._wq.append(waiter)

    def broadcast(self) -> None:
        """Move every waiter to the mutex queue, preserving their order."""
        with _kernel:
            mutex = self._mutex
            if mutex is None:
                return
            mutex._check_owner("broadcast")
            mutex._wq.extend(self._wq)
            self._wq.clear()