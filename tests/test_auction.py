import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from nkernel.auction import Auction


def _wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached in time")
        time.sleep(0.005)


@pytest.fixture
def pool():
    with ThreadPoolExecutor(max_workers=8) as executor:
        yield executor


def test_random_order_two_units(pool):
    auction = Auction(2)
    pedro = pool.submit(auction.offer, 1)
    juan = pool.submit(auction.offer, 3)
    diego = pool.submit(auction.offer, 4)
    pepe = pool.submit(auction.offer, 2)
    assert pedro.result(timeout=5) is False
    assert pepe.result(timeout=5) is False
    total, unsold = auction.award()
    assert total == 7
    assert unsold == 0
    assert juan.result(timeout=5) is True
    assert diego.result(timeout=5) is True


def test_sequential_bids_three_units(pool):
    auction = Auction(3)
    ana = pool.submit(auction.offer, 7)
    _wait_until(lambda: auction.pending == 1)
    maria = pool.submit(auction.offer, 3)
    _wait_until(lambda: auction.pending == 2)
    ximena = pool.submit(auction.offer, 4)
    _wait_until(lambda: auction.pending == 3)
    erika = pool.submit(auction.offer, 5)
    assert maria.result(timeout=5) is False
    assert auction.pending == 3
    sonia = pool.submit(auction.offer, 6)
    assert ximena.result(timeout=5) is False
    total, unsold = auction.award()
    assert total == 18
    assert unsold == 0
    assert ana.result(timeout=5) is True
    assert erika.result(timeout=5) is True
    assert sonia.result(timeout=5) is True


def test_fewer_bidders_than_units(pool):
    auction = Auction(5)
    tomas = pool.submit(auction.offer, 2)
    monica = pool.submit(auction.offer, 3)
    _wait_until(lambda: auction.pending == 2)
    total, unsold = auction.award()
    assert total == 5
    assert unsold == 3
    assert tomas.result(timeout=5) is True
    assert monica.result(timeout=5) is True


def test_offers_block_until_decided(pool):
    auction = Auction(1)
    first = pool.submit(auction.offer, 10)
    _wait_until(lambda: auction.pending == 1)
    time.sleep(0.05)
    assert not first.done()
    auction.award()
    assert first.result(timeout=5) is True


def test_lowest_new_bid_is_rejected_at_once(pool):
    auction = Auction(1)
    high = pool.submit(auction.offer, 10)
    _wait_until(lambda: auction.pending == 1)
    assert auction.offer(1) is False
    assert auction.pending == 1
    total, unsold = auction.award()
    assert total == 10
    assert unsold == 0
    assert high.result(timeout=5) is True


def test_zero_units_rejects_every_offer():
    auction = Auction(0)
    assert auction.offer(100) is False
    assert auction.award() == (0, 0)


def test_award_without_offers_leaves_all_units():
    auction = Auction(4)
    total, unsold = auction.award()
    assert total == 0
    assert unsold == auction.units


def test_winners_are_the_highest_bids(pool):
    units = 3
    prices = [5, 1, 9, 4, 7, 2, 8]
    auction = Auction(units)
    futures = {price: pool.submit(auction.offer, price) for price in prices}
    _wait_until(lambda: sum(f.done() for f in futures.values()) == len(prices) - units)
    total, unsold = auction.award()
    winners = sorted(p for p, f in futures.items() if f.result(timeout=5))
    assert winners == sorted(prices)[-units:]
    assert total == sum(winners)
    assert unsold == 0


def test_many_concurrent_bidders_keep_invariants():
    units = 10
    auction = Auction(units)
    results = {}
    lock = threading.Lock()

    def bid(price):
        won = auction.offer(price)
        with lock:
            results[price] = won

    threads = [threading.Thread(target=bid, args=(p,)) for p in range(1, 41)]
    for thread in threads:
        thread.start()
    _wait_until(lambda: len(results) == 40 - units)
    total, unsold = auction.award()
    for thread in threads:
        thread.join(timeout=5)
    winners = [p for p, won in results.items() if won]
    assert len(results) == 40
    assert sorted(winners) == list(range(31, 41))
    assert total == sum(winners)
    assert unsold == 0


def test_main_help_exits():
    from nkernel.auction import main

    with pytest.raises(SystemExit) as info:
        main(["--help"])
    assert info.value.code == 0