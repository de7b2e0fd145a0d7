from __future__ import annotations

"""
Extraction Scheduler.

Drives the fetch -> merge -> publish cycle at a fixed interval. Cycles
run strictly one after another on the calling thread. The wait between
cycles observes a cancellation event, so a stop request ends the loop
without waiting out the interval.

State machine: Idle -> Running(n) -> Sleeping -> Running(n + 1) -> ...
A failed root or a failed delivery never leaves this loop; only an
encoding failure (broken invariant) or the cancellation event does.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, TextIO

from etcdextract.core.fetcher import StoreClient, fetch_roots
from etcdextract.core.merger import merge_node
from etcdextract.core.publisher import publish
from etcdextract.domain.constants import DEFAULT_REQUEST_TIMEOUT
from etcdextract.domain.snapshot_models import Document, Envelope

logger = logging.getLogger(__name__)


class ShutdownRequested(Exception):
    """Raised from a signal handler to abort the running cycle."""

    def __init__(self, signum: int, name: str = "") -> None:
        super().__init__(name or f"signal {signum}")
        self.signum = signum
        self.name = name

    @property
    def exit_code(self) -> int:
        return 128 + self.signum


# -----------------------------------------------------------------------------
# SINGLE CYCLE
# -----------------------------------------------------------------------------

def run_cycle(
        client: StoreClient,
        roots: List[str],
        destination: str,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        clock: Callable[[], float] = time.time,
        stream: Optional[TextIO] = None,
        log: Optional[logging.Logger] = None,
) -> Envelope:
    """
    Execute one extraction cycle.

    Every root is attempted before publication; roots that fail
    contribute nothing to the snapshot.

    Returns:
        Envelope: The envelope handed to the publisher.
    """
    log = log or logger
    doc: Document = {}

    for _root, node in fetch_roots(client, roots, timeout=timeout, log=log):
        merge_node(doc, node, log)

    envelope = Envelope.capture(doc, clock=clock)
    publish(envelope, destination, stream=stream, log=log)
    return envelope


# -----------------------------------------------------------------------------
# LOOP
# -----------------------------------------------------------------------------

class Scheduler:
    """
    Repeats run_cycle every 'interval' seconds until stopped.

    Args:
        client: Store client reused by every cycle.
        config: Validated configuration (roots, interval, destination, timeout).
        stop_event: Cancellation token observed between cycles.
        log: Injected logger; defaults to the module logger.
        stream: Console stream override for the stdout sink.
        clock: Time source for envelope timestamps.
    """

    def __init__(
            self,
            client: StoreClient,
            config: Dict[str, Any],
            *,
            stop_event: Optional[threading.Event] = None,
            log: Optional[logging.Logger] = None,
            stream: Optional[TextIO] = None,
            clock: Callable[[], float] = time.time,
    ) -> None:
        self.client = client
        self.roots: List[str] = list(config["roots"])
        self.interval: int = int(config["interval"])
        self.destination: str = config["destination"]
        self.timeout: float = float(config.get("timeout", DEFAULT_REQUEST_TIMEOUT))
        self.stop_event = stop_event or threading.Event()
        self.log = log or logger
        self.stream = stream
        self.clock = clock
        self.cycles = 0

    def stop(self) -> None:
        self.stop_event.set()

    def run_once(self) -> Envelope:
        self.cycles += 1
        self.log.debug(f"Cycle {self.cycles} started ({len(self.roots)} roots)")
        return run_cycle(
            self.client,
            self.roots,
            self.destination,
            timeout=self.timeout,
            clock=self.clock,
            stream=self.stream,
            log=self.log,
        )

    def run_forever(self, max_cycles: Optional[int] = None) -> int:
        """
        Run cycles until the stop event is set or max_cycles is reached.

        Args:
            max_cycles: Optional upper bound on the number of cycles.

        Returns:
            int: Number of cycles completed by this call.
        """
        completed = 0
        self.log.info(
            f"Extracting {', '.join(self.roots)} every {self.interval}s to {self.destination}"
        )

        while not self.stop_event.is_set():
            self.run_once()
            completed += 1

            if max_cycles is not None and completed >= max_cycles:
                break
            if self.stop_event.wait(self.interval):
                break

        self.log.debug(f"Scheduler stopped after {completed} cycles")
        return completed
