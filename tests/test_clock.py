from nkernel.clock import (
    get_time,
    get_time_nanos,
    sleep_micros,
    sleep_millis,
    sleep_nanos,
    sleep_seconds,
)


def test_time_nanos_never_decreases():
    values = [get_time_nanos() for _ in range(1000)]
    assert values[0] >= 0
    assert all(a <= b for a, b in zip(values, values[1:]))


def test_get_time_is_millis_of_nanos():
    before = get_time_nanos()
    millis = get_time()
    after = get_time_nanos()
    assert before // 1_000_000 <= millis <= after // 1_000_000


def test_sleep_millis_waits_at_least_requested():
    start = get_time_nanos()
    sleep_millis(20)
    assert get_time_nanos() - start >= 20 * 1_000_000


def test_sleep_micros_waits_at_least_requested():
    start = get_time_nanos()
    sleep_micros(5000)
    assert get_time_nanos() - start >= 5000 * 1_000


def test_sleep_nanos_waits_at_least_requested():
    start = get_time_nanos()
    sleep_nanos(3_000_000)
    assert get_time_nanos() - start >= 3_000_000


def test_non_positive_sleep_returns_promptly():
    start = get_time_nanos()
    sleep_nanos(0)
    sleep_seconds(0)
    sleep_millis(-10)
    assert get_time_nanos() - start < 1_000_000_000