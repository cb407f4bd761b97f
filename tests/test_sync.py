import threading
import time

import pytest

from nkernel.sync import Condition, Mutex, Semaphore, SyncError


def _wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached in time")
        time.sleep(0.001)


def _start(target):
    th = threading.Thread(target=target, daemon=True)
    th.start()
    return th


def test_semaphore_negative_count_rejected():
    with pytest.raises(ValueError):
        Semaphore(-1)


def test_semaphore_wait_consumes_tickets():
    sem = Semaphore(2)
    sem.wait()
    sem.wait()
    assert sem.value == 0


def test_semaphore_post_without_waiters_stores_ticket():
    sem = Semaphore(0)
    sem.post()
    sem.post()
    assert sem.value == 2
    sem.wait()
    assert sem.value == 1


def test_semaphore_wakes_waiters_in_fifo_order():
    sem = Semaphore(0)
    order = []
    lock = threading.Lock()

    def worker(name):
        def run():
            sem.wait()
            with lock:
                order.append(name)
        return run

    t1 = _start(worker("a"))
    _wait_until(lambda: sem.waiting == 1)
    t2 = _start(worker("b"))
    _wait_until(lambda: sem.waiting == 2)

    sem.post()
    t1.join(5)
    assert order == ["a"]
    assert sem.value == 0
    sem.post()
    t2.join(5)
    assert order == ["a", "b"]
    assert sem.waiting == 0


def test_mutex_context_manager_sets_and_clears_owner():
    m = Mutex()
    with m:
        assert m.owner is threading.current_thread()
    assert m.owner is None


def test_mutex_unlock_by_non_owner_raises():
    m = Mutex()
    m.lock()
    errors = []

    def intruder():
        try:
            m.unlock()
        except SyncError as exc:
            errors.append(exc)

    th = _start(intruder)
    th.join(5)
    assert len(errors) == 1
    assert m.owner is threading.current_thread()
    m.unlock()


def test_mutex_unlock_when_free_raises():
    with pytest.raises(SyncError):
        Mutex().unlock()


def test_mutex_hands_off_in_fifo_order():
    m = Mutex()
    order = []
    m.lock()

    def worker(n):
        def run():
            with m:
                order.append(n)
        return run

    t1 = _start(worker(1))
    _wait_until(lambda: m.waiting == 1)
    t2 = _start(worker(2))
    _wait_until(lambda: m.waiting == 2)
    m.unlock()
    t1.join(5)
    t2.join(5)
    assert order == [1, 2]
    assert m.owner is None


def test_mutex_mutual_exclusion():
    m = Mutex()
    counter = {"n": 0}
    owners_ok = []

    def run():
        me = threading.current_thread()
        for _ in range(200):
            with m:
                owners_ok.append(m.owner is me)
                value = counter["n"]
                counter["n"] = value + 1

    threads = [_start(run) for _ in range(4)]
    for th in threads:
        th.join(10)
    assert counter["n"] == 800
    assert owners_ok == [True] * 800
    assert m.owner is None
    assert m.waiting == 0


def test_condition_wait_requires_ownership():
    m = Mutex()
    cond = Condition(m)
    with pytest.raises(SyncError):
        cond.wait(m)


def test_condition_wait_with_other_mutex_raises():
    m1, m2 = Mutex(), Mutex()
    cond = Condition(m1)
    m2.lock()
    with pytest.raises(SyncError):
        cond.wait(m2)
    assert m2.owner is threading.current_thread()
    m2.unlock()


def test_condition_signal_wakes_waiter():
    m = Mutex()
    cond = Condition(m)
    state = {"ready": False, "seen": None}

    def consumer():
        with m:
            while not state["ready"]:
                cond.wait(m)
            state["seen"] = m.owner is threading.current_thread()

    th = _start(consumer)
    _wait_until(lambda: cond.waiting == 1)
    with m:
        state["ready"] = True
        cond.signal()
        assert cond.waiting == 0
        assert m.waiting == 1
    th.join(5)
    assert state["seen"] is True
    assert m.owner is None


def test_condition_signal_without_owning_raises():
    m = Mutex()
    cond = Condition(m)
    done = []

    def waiter():
        with m:
            cond.wait(m)
            done.append(True)

    th = _start(waiter)
    _wait_until(lambda: cond.waiting == 1)
    with pytest.raises(SyncError):
        cond.signal()
    assert cond.waiting == 1
    with m:
        cond.signal()
    th.join(5)
    assert done == [True]


def test_condition_broadcast_wakes_all_in_order():
    m = Mutex()
    cond = Condition(m)
    order = []

    def worker(n):
        def run():
            with m:
                cond.wait(m)
                order.append(n)
        return run

    threads = []
    for n in range(3):
        threads.append(_start(worker(n)))
        _wait_until(lambda k=n: cond.waiting == k + 1)
    with m:
        cond.broadcast()
        assert cond.waiting == 0
        assert m.waiting == 3
    for th in threads:
        th.join(5)
    assert order == [0, 1, 2]


def test_condition_broadcast_without_owning_raises():
    m = Mutex()
    cond = Condition(m)
    with pytest.raises(SyncError):
        cond.broadcast()