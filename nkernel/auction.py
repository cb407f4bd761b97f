"""A sealed-bid auction of identical units among concurrent bidders.

Each bidder calls :meth:`Auction.offer` and blocks. As soon as more offers
are pending than there are units, the lowest one is rejected and its bidder
is released with ``False``. When the auction is closed with
:meth:`Auction.award`, every offer still pending wins a unit and its bidder
is released with ``True``.
"""

from __future__ import annotations

import argparse
import random
import sys
import threading
from dataclasses import dataclass, field
from enum import Enum, auto

from .clock import sleep_millis
from .structures import PriQueue
from .tasks import Task, emit_task, set_task_name


class _Resolution(Enum):
    PENDING = auto()
    REJECTED = auto()
    AWARDED = auto()


@dataclass(eq=False)
class _Bid:
    price: float
    state: _Resolution = _Resolution.PENDING
    decided: threading.Event = field(default_factory=threading.Event)


class Auction:
    """An auction of ``units`` identical items."""

    def __init__(self, units: int) -> None:
        self._units = units
        self._bids: PriQueue[_Bid] = PriQueue()
        self._lock = threading.Lock()

    @property
    def units(self) -> int:
        """Number of units on offer."""
        return self._units

    @property
    def pending(self) -> int:
        """Number of offers currently holding a provisional unit."""
        with self._lock:
            return len(self._bids)

    def offer(self, price: float) -> bool:
        """Bid ``price`` and block until the bid is decided.

        Return True when a unit is awarded to this bid, False when enough
        higher bids displaced it.
        """
        bid = _Bid(price)
        with self._lock:
            self._bids.put(bid, price)
            if len(self._bids) > self._units:
                worst = self._bids.get()
                if worst is bid:
                    return False
                worst.state = _Resolution.REJECTED
                worst.decided.set()
        bid.decided.wait()
        return bid.state is _Resolution.AWARDED

    def award(self) -> tuple[float, int]:
        """Close the auction, awarding a unit to every pending bid.

        Return the total amount raised and the number of units left unsold.
        """
        total: float = 0
        sold = 0
        with self._lock:
            while len(self._bids):
                total += self._bids.best()
                bid = self._bids.get()
                bid.state = _Resolution.AWARDED
                bid.decided.set()
                sold += 1
        return total, self._units - sold


# ---------------------------------------------------------------------------
# Self-check program
# ---------------------------------------------------------------------------

_PARALLEL = 30
_MASSIVE = 50


class _ScenarioFailure(Exception):
    def __init__(self, procname: str, message: str) -> None:
        super().__init__(f"Error Fatal en la rutina {procname} y la tarea \n{message}")


def _bidder(auction: Auction, print_msg: int, name: str, price: int, random_delay: bool) -> bool:
    if print_msg >= 0:
        set_task_name(name)
        if random_delay:
            sleep_millis(random.randrange(1000))
    if print_msg > 0:
        print(f"{name} ofrece {price}", flush=True)
    won = auction.offer(price)
    if print_msg > 0:
        if won:
            print(f"{name} se adjudico un item a {price}", flush=True)
        else:
            print(f"{name} fallo con su oferta de {price}", flush=True)
    return won


def _random_bidder(auction: Auction, print_msg: int, name: str, price: int) -> Task:
    return emit_task(_bidder, auction, print_msg, name, price, True)


def _bidder_now(auction: Auction, print_msg: int, name: str, price: int) -> Task:
    return emit_task(_bidder, auction, print_msg, name, price, False)


def _pause(print_msg: int) -> None:
    if print_msg >= 0:
        sleep_millis(1000)


def _expect(ok: bool, procname: str, message: str) -> None:
    if not ok:
        raise _ScenarioFailure(procname, message)


def _report(print_msg: int, total: float, unsold: int) -> None:
    if print_msg > 0:
        print(
            f"El monto recaudado es {int(total)} y quedaron {unsold} unidades sin vender",
            flush=True,
        )


def _scenario_random(print_msg: int) -> None:
    auction = Auction(2)
    pedro = _random_bidder(auction, print_msg, "pedro", 1)
    juan = _random_bidder(auction, print_msg, "juan", 3)
    diego = _random_bidder(auction, print_msg, "diego", 4)
    pepe = _random_bidder(auction, print_msg, "pepe", 2)
    _expect(not pedro.wait(), "test1", "pedro debio perder con 1\n")
    _expect(not pepe.wait(), "test1", "pepe debio perder con 2\n")
    total, unsold = auction.award()
    _expect(total == 7, "test1", f"La recaudacion debio ser 7 y no {int(total)}\n")
    _expect(unsold == 0, "test1", f"Quedaron {unsold} unidades sin vender\n")
    _expect(juan.wait(), "nMain", "juan debio ganar con 3\n")
    _expect(diego.wait(), "nMain", "diego debio ganar con 4\n")
    _report(print_msg, total, unsold)


def _scenario_sequential(print_msg: int) -> None:
    auction = Auction(3)
    ana = _bidder_now(auction, print_msg, "ana", 7)
    _pause(print_msg)
    maria = _bidder_now(auction, print_msg, "maria", 3)
    _pause(print_msg)
    ximena = _bidder_now(auction, print_msg, "ximena", 4)
    _pause(print_msg)
    erika = _bidder_now(auction, print_msg, "erika", 5)
    _pause(print_msg)
    _expect(not maria.wait(), "nMain", "maria debio perder con 3\n")
    sonia = _bidder_now(auction, print_msg, "sonia", 6)
    _pause(print_msg)
    _expect(not ximena.wait(), "nMain", "ximena debio perder con 4\n")
    total, unsold = auction.award()
    _expect(total == 18, "test2", f"La recaudacion debio ser 18 y no {int(total)}\n")
    _expect(unsold == 0, "test2", f"Quedaron {unsold} unidades sin vender\n")
    _expect(ana.wait(), "nMain", "ana debio ganar con 7\n")
    _expect(erika.wait(), "nMain", "erika debio ganar con 5\n")
    _expect(sonia.wait(), "nMain", "sonia debio ganar con 6\n")
    _report(print_msg, total, unsold)


def _scenario_few_bidders(print_msg: int) -> None:
    auction = Auction(5)
    tomas = _bidder_now(auction, print_msg, "tomas", 2)
    _pause(print_msg)
    monica = _bidder_now(auction, print_msg, "monica", 3)
    _pause(print_msg)
    total, unsold = auction.award()
    _expect(total == 5, "test3", f"La recaudacion debio ser 5 y no {int(total)}\n")
    _expect(unsold == 3, "test3", f"Quedaron {unsold} unidades sin vender\n")
    _report(print_msg, total, unsold)
    _expect(tomas.wait(), "nMain", "tomas debio ganar con 2\n")
    _expect(monica.wait(), "nMain", "monica debio ganar con 3\n")


def _separator() -> None:
    print("test aprobado")
    print("-------------", flush=True)


def _run_all() -> None:
    print("una sola subasta con tiempos aleatorios", flush=True)
    _scenario_random(1)
    _separator()

    print("una sola subasta con tiempos deterministicos", flush=True)
    _scenario_sequential(1)
    _separator()

    print("una sola subasta con menos oferentes que unidades disponibles", flush=True)
    _scenario_few_bidders(1)
    _separator()

    print("Test de robustez")
    print(f"{_PARALLEL} subastas en paralelo", flush=True)
    batch: list[Task] = []
    for _ in range(1, _PARALLEL):
        batch += [
            emit_task(_scenario_random, 0),
            emit_task(_scenario_sequential, 0),
            emit_task(_scenario_few_bidders, 0),
        ]
    batch += [
        emit_task(_scenario_random, 1),
        emit_task(_scenario_sequential, 1),
        emit_task(_scenario_few_bidders, 1),
    ]
    for task in batch:
        task.wait()
    _separator()

    print(f"{_MASSIVE * 2} subastas en paralelo", flush=True)
    quiet = [
        task
        for _ in range(1, _MASSIVE)
        for task in (emit_task(_scenario_random, -1), emit_task(_scenario_sequential, -1))
    ]
    loud = [emit_task(_scenario_random, 1), emit_task(_scenario_sequential, 1)]
    for task in loud:
        task.wait()
    print("Enterrando tareas.  Cada '.' son 30 tareas enterradas.", flush=True)
    for k, pair_start in enumerate(range(0, len(quiet), 2), start=1):
        quiet[pair_start].wait()
        quiet[pair_start + 1].wait()
        if k % 10 == 0:
            print(".", end="", flush=True)
    print("\ntest aprobado")
    print("-------------")
    print("Felicitaciones: paso todos los tests", flush=True)


def main(argv: list[str] | None = None) -> int:
    """Run the auction self-check scenarios; return the exit status."""
    parser = argparse.ArgumentParser(description="Run the auction self-check scenarios.")
    parser.parse_args(argv)
    try:
        _run_all()
    except _ScenarioFailure as failure:
        print(failure, file=sys.stderr)
        return 1
    return 0