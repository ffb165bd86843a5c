import threading
import time

import pytest

from prompter.readiness import ReadinessCoordinator, State


class ScriptedProbe:
    """Fails the first `fail` calls (alternating False / raising), then succeeds."""

    def __init__(self, fail: int = 0):
        self.fail = fail
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self) -> bool:
        with self._lock:
            self.calls += 1
            n = self.calls
        if n <= self.fail:
            if n % 2:
                raise ConnectionError("refused")
            return False
        return True


def test_becomes_ready_after_failures():
    probe = ScriptedProbe(fail=3)
    c = ReadinessCoordinator(probe, interval=0.01).start()
    try:
        assert c.wait(timeout=5) is True
        assert c.state is State.READY
        assert probe.calls >= 4
    finally:
        c.stop()


def test_not_ready_while_probes_fail():
    c = ReadinessCoordinator(lambda: False, interval=0.01).start()
    try:
        assert c.wait(timeout=0.2) is False
        assert c.state is State.PROBING
        assert c.probes_started >= 2
    finally:
        c.stop()


def test_exactly_one_ready_event_with_concurrent_successes():
    release = threading.Event()

    def slow_success():
        # every probe blocks until released, so several succeed "at once"
        release.wait(5)
        return True

    fired = []
    c = ReadinessCoordinator(slow_success, interval=0.01)
    c.on_ready(lambda: fired.append(threading.current_thread().name))
    c.start()
    try:
        deadline = time.monotonic() + 5
        while c.probes_started < 5 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert c.probes_started >= 5
        release.set()
        assert c.wait(timeout=5)
        c.stop()  # joins the ticker: no probe starts after this
        # stragglers finish after readiness and are ignored
        deadline = time.monotonic() + 5
        while c.signals_ignored < c.probes_started - 1 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert len(fired) == 1
        assert c.signals_ignored == c.probes_started - 1
    finally:
        c.stop()


def test_ticker_stops_after_ready():
    c = ReadinessCoordinator(lambda: True, interval=0.01).start()
    assert c.wait(timeout=5)
    c.stop()
    started = c.probes_started
    time.sleep(0.1)
    assert c.probes_started == started


def test_first_probe_waits_one_interval():
    probe = ScriptedProbe()
    c = ReadinessCoordinator(probe, interval=0.5).start()
    try:
        time.sleep(0.1)
        assert probe.calls == 0
        assert c.wait(timeout=5)
    finally:
        c.stop()


def test_on_ready_after_ready_runs_immediately():
    c = ReadinessCoordinator(lambda: True, interval=0.01).start()
    assert c.wait(timeout=5)
    fired = []
    c.on_ready(lambda: fired.append(1))
    assert fired == [1]
    c.stop()


def test_stop_unblocks_waiters_without_ready():
    c = ReadinessCoordinator(lambda: False, interval=0.01).start()
    result = {}
    t = threading.Thread(target=lambda: result.setdefault("ok", c.wait()))
    t.start()
    time.sleep(0.05)
    c.stop()
    t.join(timeout=5)
    assert result == {"ok": False}
    assert c.state is State.PROBING


def test_start_twice_is_an_error():
    c = ReadinessCoordinator(lambda: False, interval=0.01).start()
    try:
        with pytest.raises(RuntimeError):
            c.start()
    finally:
        c.stop()


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        ReadinessCoordinator(lambda: True, interval=0)
