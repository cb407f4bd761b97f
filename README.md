# nkernel

Concurrency building blocks for ordinary Python threads: containers,
first-come-first-served synchronisation primitives, tasks that return a
result, synchronous message passing, and a sealed-bid auction built on top of
them.

## Modules

### `nkernel.structures`

- `HashMap(capacity, hash_fun, equals_fun)` is a hash map with separate
  chaining that uses the hash and equality functions you supply. It has
  `query`, `define` (which returns `True` when it replaced an existing
  binding), `delete`, `contains` and iteration over `(key, value)` pairs.
  `hash_string` and `equals_strings` are ready-made helpers for string keys.
- `FifoQueue` has `put`, `get`, `peek` and `len()`. `get` and `peek` return
  `None` when the queue is empty.
- `FullPriQueue(compare, initial_size=16)` is a binary heap. The element that
  ranks highest under `compare(a, b)` comes out first, and `compare` returns a
  positive number when `a` ranks above `b`. `get` raises `IndexError` when the
  queue is empty.
- `PriQueue` holds elements keyed by a number, and the lowest number comes out
  first. It has `put(elem, pri)`, `get`, `peek`, `best`, which returns the
  lowest priority or `0` when empty, and `len()`.
- `sort(seq, left, right, compare, swap)` is a quicksort over the inclusive
  range `left..right`. It reaches the elements only through the `compare` and
  `swap` callbacks.

### `nkernel.sync`

- `Semaphore(tickets=0)` has `wait()` and `post()`. A posted ticket goes
  straight to the oldest waiter. The `value` and `waiting` properties report
  its state.
- `Mutex` has `lock()`, `unlock()` and can be used as a context manager. It is
  not reentrant. Waiting threads get the mutex in arrival order.
- `Condition(mutex=None)` has `wait(mutex)`, `signal()` and `broadcast()`. A
  signalled thread moves into the mutex queue and carries on once it holds the
  mutex again.

Unlocking a mutex the calling thread does not own raises `SyncError`. So does
waiting with a different mutex than the one first used with a condition, and
signalling or broadcasting without holding the mutex.

### `nkernel.clock`

`get_time_nanos()` and `get_time()` return the nanoseconds and milliseconds
elapsed since the module was loaded. The value never decreases.
`sleep_nanos`, `sleep_micros`, `sleep_millis` and `sleep_seconds` suspend the
calling thread.

### `nkernel.tasks`

- `emit_task(proc, *args)` starts a `Task` that runs `proc(*args)` in a new
  thread.
- `Task.wait()` blocks until the task ends and returns its result. If an
  exception ended the task, `wait()` raises it again. A task can be waited for
  only once, and waiting for yourself raises `SyncError`.
- `exit_task(rc)` ends the calling task with result `rc`.
- `current_task()`, `set_task_name(name)` and `get_task_name()` identify the
  caller. Names are cut short at 79 characters.
- `Monitor` has `enter`, `exit`, `wait`, `notify_all`, and can be used as a
  context manager. `make_condition()` returns an extra condition tied to the
  monitor, with `wait`, `signal` and `broadcast`.

### `nkernel.messages`

- `send(target, msg)` blocks until `target` replies and returns the reply.
- `receive(max_millis)` and `receive_nanos(max_nanos)` return
  `(sender, msg)`. A negative limit waits forever, zero does not wait, and
  `(None, None)` means no message arrived.
- `reply(sender, rc)` answers the sender's pending message.

Sending to yourself or to a finished task raises `MessageError`. So does
replying to a task that is not waiting for a reply.

### `nkernel.auction`

`Auction(units)` sells a fixed number of identical units.
`offer(price)` blocks until the bid is decided. It returns `False` as soon as
more offers are pending than there are units and this one is the lowest. It
returns `True` when `award()` closes the auction with the bid still pending.
`award()` returns `(total, unsold)`.

```python
from nkernel.auction import Auction
from nkernel.tasks import emit_task

auction = Auction(2)
bidders = {name: emit_task(auction.offer, price)
           for name, price in [("pedro", 1), ("juan", 3), ("diego", 4), ("pepe", 2)]}

print(bidders["pedro"].wait())   # False
print(bidders["pepe"].wait())    # False
total, unsold = auction.award()
print(total, unsold)             # 7 0
print(bidders["juan"].wait(), bidders["diego"].wait())  # True True
```

## Command line

```
nkernel-auction
```

This runs the auction self-check scenarios, first one at a time and then
many in parallel, and prints what happens along the way. It exits with status
0 when every scenario passes. When a scenario fails, it prints the failure to
standard error and exits with status 1. The scenarios deliberately pause
between bids, so a full run takes a while.

## What it does not do

Tasks are plain operating-system threads. The package has no scheduler of
its own: it offers no choice between first-come-first-served, round-robin or
priority scheduling, no time slices, no thread priorities and no virtual
cores. The operating system decides when each thread runs. The only ordering
the package guarantees is the first-come-first-served hand-off inside its
semaphores, mutexes and conditions.

## Installing and testing

```
pip install -e ".[test]"
pytest
```