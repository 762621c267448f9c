"""
Unit tests for the stop controller and signal wiring.
"""

import os
import signal
import threading

import pytest

from timerlat_top.orchestration import SignalHandler, StopController


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.mark.unit
class TestStopController:
    """Test cases for the cooperative stop flag."""

    def test_initially_not_stopped(self):
        assert StopController().should_stop() is False

    def test_request_stop_is_idempotent(self):
        controller = StopController()
        for _ in range(3):
            controller.request_stop()
            assert controller.should_stop() is True

    def test_wait_runs_full_timeout_without_stop(self):
        clock = FakeClock()
        controller = StopController()

        assert controller.wait(1.0, clock=clock, sleep=clock.sleep) is False
        assert clock.now == pytest.approx(101.0)
        assert max(clock.sleeps) <= 0.05 + 1e-9

    def test_wait_returns_immediately_when_already_stopped(self):
        clock = FakeClock()
        controller = StopController()
        controller.request_stop()

        assert controller.wait(5.0, clock=clock, sleep=clock.sleep) is True
        assert clock.sleeps == []

    def test_wait_ends_early_on_stop(self):
        clock = FakeClock()
        controller = StopController()

        def sleep(seconds):
            clock.sleep(seconds)
            if len(clock.sleeps) == 3:
                controller.request_stop()

        assert controller.wait(10.0, clock=clock, sleep=sleep) is True
        assert len(clock.sleeps) == 3

    def test_request_from_another_thread(self):
        controller = StopController()
        thread = threading.Thread(target=controller.request_stop)
        thread.start()
        thread.join()
        assert controller.should_stop() is True


@pytest.mark.unit
class TestSignalHandler:
    """Test cases for routing signals and the duration timer to the controller."""

    def test_sigint_requests_stop_and_handlers_are_restored(self):
        original = signal.getsignal(signal.SIGINT)
        controller = StopController()
        handler = SignalHandler(controller)

        handler.setup_signal_handlers()
        try:
            os.kill(os.getpid(), signal.SIGINT)
            controller.wait(1.0)
        finally:
            handler.cleanup_signal_handlers()

        assert controller.should_stop() is True
        assert signal.getsignal(signal.SIGINT) is original

    def test_sigterm_requests_stop(self):
        controller = StopController()
        handler = SignalHandler(controller)

        handler.setup_signal_handlers()
        try:
            os.kill(os.getpid(), signal.SIGTERM)
            controller.wait(1.0)
        finally:
            handler.cleanup_signal_handlers()

        assert controller.should_stop() is True

    def test_duration_via_alarm(self):
        original = signal.getsignal(signal.SIGALRM)
        controller = StopController()
        handler = SignalHandler(controller)

        handler.arm_duration(0.05)
        try:
            assert controller.wait(5.0) is True
        finally:
            handler.cleanup_signal_handlers()

        assert signal.getsignal(signal.SIGALRM) is original
        assert signal.getitimer(signal.ITIMER_REAL)[0] == 0

    def test_duration_off_main_thread_uses_timer(self):
        controller = StopController()
        handler = SignalHandler(controller)

        thread = threading.Thread(target=handler.arm_duration, args=(0.05,))
        thread.start()
        thread.join()
        try:
            assert handler._timer is not None
            assert controller.wait(5.0) is True
        finally:
            handler.cleanup_signal_handlers()

        assert handler._timer is None

    def test_cleanup_disarms_pending_alarm(self):
        controller = StopController()
        handler = SignalHandler(controller)

        handler.arm_duration(10)
        handler.cleanup_signal_handlers()

        assert signal.getitimer(signal.ITIMER_REAL)[0] == 0
        assert controller.should_stop() is False

    def test_setup_off_main_thread_is_tolerated(self):
        handler = SignalHandler(StopController())
        thread = threading.Thread(target=handler.setup_signal_handlers)
        thread.start()
        thread.join()

        assert handler._signal_handlers_set is False
        handler.cleanup_signal_handlers()
