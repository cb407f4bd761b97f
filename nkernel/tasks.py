"""Tasks: threads started with positional arguments that hand back a result.

A task is started with :func:`emit_task`, ends by returning from its
procedure or by calling :func:`exit_task`, and another task collects its
result with :meth:`Task.wait`. :class:`Monitor` bundles a mutex with a
condition, the way monitor-based programs expect.
"""

from __future__ import annotations

import itertools
import threading
from typing import Any, Callable

from .sync import Condition, Mutex, SyncError

_MAXNAMESIZE = 80

_local = threading.local()
_adopt_lock = threading.Lock()
_adopted: dict[int, "Task"] = {}
_ids = itertools.count(1)
_id_lock = threading.Lock()


class TaskExit(BaseException):
    """Raised by :func:`exit_task` to end the calling task with a result."""

    def __init__(self, rc: Any) -> None:
        super().__init__(rc)
        self.rc = rc


class Task:
    """A running or finished task."""

    def __init__(self, thread: threading.Thread, name: str | None, emitted: bool) -> None:
        self._thread = thread
        self.name = name
        self._emitted = emitted
        self._done = threading.Event()
        self._rc: Any = None
        self._error: BaseException | None = None
        self._joined = False
        self._join_lock = threading.Lock()

    @property
    def finished(self) -> bool:
        """True once the task has ended."""
        if self._emitted:
            return self._done.is_set()
        return not self._thread.is_alive()

    def wait(self) -> Any:
        """Block until the task ends and return its result.

        An exception that ended the task is raised again here. A task can
        be waited for only once.
        """
        if not self._emitted:
            raise SyncError("wait: only tasks made by emit_task can be waited for")
        if self is current_task():
            raise SyncError("wait: a task cannot wait for itself")
        with self._join_lock:
            if self._joined:
                raise SyncError("wait: task waited for twice")
            self._joined = True
        self._done.wait()
        self._thread.join()
        if self._error is not None:
            raise self._error
        return self._rc

    def __repr__(self) -> str:
        state = "finished" if self.finished else "running"
        return f"Task(name={self.name!r}, {state})"


def _next_name() -> str:
    with _id_lock:
        return str(next(_ids))


def _run(task: Task, proc: Callable[..., Any], args: tuple[Any, ...]) -> None:
    _local.task = task
    try:
        task._rc = proc(*args)
    except TaskExit as stop:
        task._rc = stop.rc
    except BaseException as exc:  # handed to whoever waits for the task
        task._error = exc
    finally:
        task._done.set()


def emit_task(proc: Callable[..., Any], *args: Any) -> Task:
    """Start a new task running ``proc(*args)`` and return it."""
    thread = threading.Thread(target=lambda: None, daemon=True)
    task = Task(thread, _next_name(), emitted=True)
    thread = threading.Thread(target=_run, args=(task, proc, args), daemon=True)
    task._thread = thread
    thread.start()
    return task


def exit_task(rc: Any) -> None:
    """End the calling task with result ``rc``."""
    raise TaskExit(rc)


def current_task() -> Task:
    """Return the task that is running the caller."""
    task = getattr(_local, "task", None)
    if task is not None:
        return task
    thread = threading.current_thread()
    with _adopt_lock:
        task = _adopted.get(thread.ident or 0)
        if task is None or task._thread is not thread:
            name = "main" if thread is threading.main_thread() else thread.name
            task = Task(thread, name, emitted=False)
            _adopted[thread.ident or 0] = task
    _local.task = task
    return task


def set_task_name(name: str) -> None:
    """Name the calling task; names longer than the limit are cut short."""
    current_task().name = str(name)[: _MAXNAMESIZE - 1]


def get_task_name() -> str | None:
    """Return the name of the calling task."""
    return current_task().name


class _BoundCondition:
    """A condition tied to the mutex of one monitor."""

    def __init__(self, monitor: Monitor) -> None:
        self._monitor = monitor
        self._cond = Condition(monitor._mutex)

    def wait(self) -> None:
        """Release the monitor, wait for a signal and enter it again."""
        self._cond.wait(self._monitor._mutex)

    def signal(self) -> None:
        """Wake the oldest task waiting on this condition."""
        self._cond.signal()

    def broadcast(self) -> None:
        """Wake every task waiting on this condition."""
        self._cond.broadcast()


class Monitor:
    """A non-reentrant monitor: a mutex with one built-in condition."""

    def __init__(self) -> None:
        self._mutex = Mutex()
        self._cond = Condition(self._mutex)

    def enter(self) -> None:
        """Enter the monitor."""
        self._mutex.lock()

    def exit(self) -> None:
        """Leave the monitor."""
        self._mutex.unlock()

    def wait(self) -> None:
        """Leave the monitor and sleep until :meth:`notify_all`, then re-enter."""
        self._cond.wait(self._mutex)

    def notify_all(self) -> None:
        """Wake every task sleeping in :meth:`wait`."""
        self._cond.broadcast()

    def make_condition(self) -> _BoundCondition:
        """Create an extra condition tied to this monitor."""
        return _BoundCondition(self)

    def __enter__(self) -> Monitor:
        self.enter()
        return self

    def __exit__(self, *args: object) -> None:
        self.exit()