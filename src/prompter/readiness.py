"""
Startup readiness gate for the inference service.

A ticker thread launches one probe per interval, each in its own daemon thread
so a slow probe never delays the next tick. The first probe that succeeds fires
the one-shot ready event and stops the ticker. Probes still in flight are left
to finish and their results are dropped.

    PROBING --(first successful probe)--> READY
"""

from __future__ import annotations
import enum
import logging
import threading
import time
from typing import Callable, List, Optional

from . import config as CFG

log = logging.getLogger(__name__)


class State(enum.Enum):
    PROBING = "probing"
    READY = "ready"


class ReadinessCoordinator:
    def __init__(self, probe: Callable[[], bool], *, interval: float = CFG.PING_INTERVAL) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.probe = probe
        self.interval = interval
        self._ready = threading.Event()        # the one-shot readiness signal
        self._stop = threading.Event()         # ticker stop (ready or cancelled)
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []
        self._ticker: Optional[threading.Thread] = None
        self.probes_started = 0
        self.signals_ignored = 0

    @property
    def state(self) -> State:
        return State.READY if self._ready.is_set() else State.PROBING

    def on_ready(self, fn: Callable[[], None]) -> None:
        """Register a callback run once, on the thread of the first successful probe."""
        with self._lock:
            if not self._ready.is_set():
                self._callbacks.append(fn)
                return
        fn()

    # ------------- lifecycle -------------

    def start(self) -> "ReadinessCoordinator":
        with self._lock:
            if self._ticker is not None:
                raise RuntimeError("coordinator already started")
            self._ticker = threading.Thread(target=self._tick_loop, name="readiness-ticker", daemon=True)
        self._ticker.start()
        log.info("Probing every %.1fs for readiness", self.interval)
        return self

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until READY. Returns False on timeout, or as soon as stop() is
        called before readiness.
        """
        if self._ready.is_set():
            return True
        # wake on either event; poll the stop flag at a short cadence
        deadline = None if timeout is None else time.monotonic() + timeout
        step = min(self.interval, 0.1)
        while not self._stop.is_set():
            if deadline is not None:
                left = deadline - time.monotonic()
                if left <= 0:
                    break
                step = min(step, left)
            if self._ready.wait(step):
                return True
        return self._ready.is_set()

    def stop(self) -> None:
        """Stop issuing probes. Does not change the state."""
        self._stop.set()
        t = self._ticker
        if t is not None and t is not threading.current_thread():
            t.join()

    # ------------- internals -------------

    def _tick_loop(self) -> None:
        # first probe goes out one interval after start, like a ticker
        while not self._stop.wait(self.interval):
            self._launch_probe()

    def _launch_probe(self) -> None:
        with self._lock:
            self.probes_started += 1
            n = self.probes_started
        threading.Thread(target=self._run_probe, args=(n,), name=f"readiness-probe-{n}", daemon=True).start()

    def _run_probe(self, n: int) -> None:
        try:
            ok = bool(self.probe())
        except Exception as exc:  # probe failures only mean "not yet"
            log.debug("probe #%d raised %r", n, exc)
            return
        if ok:
            self._signal(n)
        else:
            log.debug("probe #%d: not ready", n)

    def _signal(self, n: int) -> None:
        with self._lock:
            if self._ready.is_set():
                self.signals_ignored += 1
                log.debug("probe #%d succeeded after readiness; ignored", n)
                return
            self._ready.set()
            self._stop.set()
            callbacks, self._callbacks = self._callbacks, []
        log.info("Remote service ready (probe #%d)", n)
        for fn in callbacks:
            fn()
