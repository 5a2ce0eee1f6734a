"""
Unit tests for the recognizer session state machine.
"""

import pytest

from src.voice.recognizer import RecognizerSession, RecognizerState
from conftest import FakeClock


class FakeEngine:
    def __init__(self, fail_starts=0):
        self.fail_starts = fail_starts
        self.starts = 0
        self.stops = 0

    def start(self):
        self.starts += 1
        if self.fail_starts:
            self.fail_starts -= 1
            raise RuntimeError("microphone busy")

    def stop(self):
        self.stops += 1


@pytest.fixture
def clock():
    return FakeClock(0.0)


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def session(engine, clock):
    transcripts = []
    s = RecognizerSession(engine, on_transcript=lambda t, final: transcripts.append((t, final)), clock=clock)
    s.transcripts = transcripts
    return s


class TestLifecycle:
    def test_starts_idle(self, session):
        assert session.state == RecognizerState.IDLE
        assert not session.active

    def test_start_listens(self, session, engine):
        assert session.start()
        assert session.state == RecognizerState.LISTENING
        assert engine.starts == 1

    def test_start_twice_is_noop(self, session, engine):
        session.start()
        session.start()
        assert engine.starts == 1

    def test_start_failure_stops_with_error(self, clock):
        session = RecognizerSession(FakeEngine(fail_starts=1), clock=clock)
        assert not session.start()
        assert session.state == RecognizerState.STOPPED
        assert session.last_error.startswith("start-failed")

    def test_results_reach_callback_only_while_listening(self, session):
        session.on_result("بسم الله")
        session.start()
        session.on_result("بسم الله", True)
        assert session.transcripts == [("بسم الله", True)]

    def test_user_stop_cancels_pending_restart(self, session, engine, clock):
        session.start()
        session.on_error('no-speech')
        session.stop()
        clock.advance(1)
        session.tick()
        assert session.state == RecognizerState.STOPPED
        assert engine.starts == 1
        assert engine.stops == 0


class TestRestarts:
    @pytest.mark.parametrize("error", ['no-speech', 'network', 'audio-capture', 'aborted'])
    def test_recoverable_error_restarts_after_delay(self, session, engine, clock, error):
        session.start()
        session.on_error(error)
        assert session.state == RecognizerState.RESTARTING
        session.tick()
        assert engine.starts == 1
        clock.advance(0.3)
        session.tick()
        assert session.state == RecognizerState.LISTENING
        assert engine.starts == 2
        assert session.restarts == 1

    def test_fatal_error_stops(self, session):
        session.start()
        session.on_error('not-allowed')
        assert session.state == RecognizerState.STOPPED
        assert session.last_error == 'not-allowed'

    def test_engine_end_restarts(self, session, clock):
        session.start()
        session.on_end()
        clock.advance(0.3)
        session.tick()
        assert session.state == RecognizerState.LISTENING

    def test_inactivity_watchdog_forces_restart(self, session, engine, clock):
        session.start()
        clock.advance(5.9)
        session.tick()
        assert session.state == RecognizerState.LISTENING
        clock.advance(0.1)
        session.tick()
        assert session.state == RecognizerState.RESTARTING
        assert engine.stops == 1

    def test_results_keep_watchdog_quiet(self, session, clock):
        session.start()
        clock.advance(5)
        session.on_result("الحمد")
        clock.advance(5)
        session.tick()
        assert session.state == RecognizerState.LISTENING

    def test_repeated_restart_failures_stop_the_session(self, clock):
        engine = FakeEngine()
        session = RecognizerSession(engine, max_restart_failures=5, clock=clock)
        session.start()
        engine.fail_starts = 10
        session.on_error('network')
        for _ in range(5):
            clock.advance(0.3)
            session.tick()
        assert session.state == RecognizerState.STOPPED
        assert session.restart_failures == 5
        assert session.last_error.startswith("restart-failed")

    def test_restart_recovers_before_limit(self, clock):
        engine = FakeEngine()
        session = RecognizerSession(engine, clock=clock)
        session.start()
        engine.fail_starts = 2
        session.on_error('network')
        for _ in range(3):
            clock.advance(0.3)
            session.tick()
        assert session.state == RecognizerState.LISTENING
        assert session.restart_failures == 2

    def test_tick_accepts_explicit_time(self, session, engine):
        session.start()
        session.tick(now=6.0)
        assert session.state == RecognizerState.RESTARTING
