"""Synchronous messages between tasks: send, receive and reply."""

from __future__ import annotations

import threading
import weakref
from collections import deque
from dataclasses import dataclass
from typing import Any

from .tasks import Task, current_task


class MessageError(RuntimeError):
    """Raised when a message operation breaks the send/receive/reply protocol."""


@dataclass(eq=False)
class _Envelope:
    sender: Task
    msg: Any
    rc: Any = None
    replied: bool = False


_cv = threading.Condition()
_inboxes: "weakref.WeakKeyDictionary[Task, deque[_Envelope]]" = weakref.WeakKeyDictionary()
_awaiting: "weakref.WeakKeyDictionary[Task, _Envelope]" = weakref.WeakKeyDictionary()


def _inbox(task: Task) -> deque[_Envelope]:
    box = _inboxes.get(task)
    if box is None:
        box = deque()
        _inboxes[task] = box
    return box


def send(target: Task, msg: Any) -> Any:
    """Send ``msg`` to ``target`` and block until it replies; return the reply."""
    me = current_task()
    if target is me:
        raise MessageError("send: a task cannot send a message to itself")
    if target.finished:
        raise MessageError("send: the receiver has finished")
    envelope = _Envelope(me, msg)
    with _cv:
        _inbox(target).append(envelope)
        _awaiting[me] = envelope
        _cv.notify_all()
        _cv.wait_for(lambda: envelope.replied)
    return envelope.rc


def receive_nanos(max_nanos: int) -> tuple[Task | None, Any]:
    """Take the oldest pending message as ``(sender, msg)``.

    A negative ``max_nanos`` waits without limit, zero does not wait, and a
    positive value waits at most that long. ``(None, None)`` is returned
    when no message came.
    """
    me = current_task()
    with _cv:
        box = _inbox(me)
        if not box and max_nanos != 0:
            timeout = None if max_nanos < 0 else max_nanos / 1_000_000_000
            _cv.wait_for(lambda: bool(box), timeout=timeout)
        if not box:
            return None, None
        envelope = box.popleft()
        return envelope.sender, envelope.msg


def receive(max_millis: int) -> tuple[Task | None, Any]:
    """Like :func:`receive_nanos` with the limit in milliseconds."""
    return receive_nanos(max_millis * 1_000_000)


def reply(sender: Task, rc: Any) -> None:
    """Answer the pending message of ``sender`` with ``rc`` and wake it."""
    with _cv:
        envelope = _awaiting.pop(sender, None)
        if envelope is None:
            raise MessageError("reply: this task does not wait for a reply")
        envelope.rc = rc
        envelope.replied = True
        _cv.notify_all()