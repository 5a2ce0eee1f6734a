"""
Speech-recognizer session lifecycle as an explicit state machine.

States: idle -> listening <-> restarting, and stopped (terminal until the
next ``start``). The recognizer engine itself is injected, so the
restart/cancel semantics can be exercised without a microphone.
"""
import logging
import time
from enum import Enum
from typing import Callable, Optional, Protocol

from config import (
    RECOGNIZER_INACTIVITY_TIMEOUT,
    RECOGNIZER_MAX_RESTART_FAILURES,
    RECOGNIZER_RESTART_DELAY
)

logger = logging.getLogger(__name__)

RECOVERABLE_ERRORS = frozenset({'no-speech', 'network', 'audio-capture', 'aborted'})


class RecognizerEngine(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...


class RecognizerState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    RESTARTING = "restarting"
    STOPPED = "stopped"


class RecognizerSession:
    """Keeps a speech recognizer running until the user stops it.

    - A recoverable error, or the engine ending on its own, schedules a
      restart after ``restart_delay`` seconds.
    - ``tick`` drives scheduled restarts and the inactivity watchdog: with no
      event for ``inactivity_timeout`` seconds the engine is force-restarted.
    - After ``max_restart_failures`` consecutive failed restarts the session
      stops and exposes the error.
    """

    def __init__(
        self,
        engine: RecognizerEngine,
        on_transcript: Optional[Callable[[str, bool], None]] = None,
        restart_delay: float = RECOGNIZER_RESTART_DELAY,
        inactivity_timeout: float = RECOGNIZER_INACTIVITY_TIMEOUT,
        max_restart_failures: int = RECOGNIZER_MAX_RESTART_FAILURES,
        clock: Callable[[], float] = time.monotonic
    ):
        self.engine = engine
        self.on_transcript = on_transcript
        self.restart_delay = restart_delay
        self.inactivity_timeout = inactivity_timeout
        self.max_restart_failures = max_restart_failures
        self._clock = clock

        self.state = RecognizerState.IDLE
        self.last_error: Optional[str] = None
        self.restart_failures = 0
        self.restarts = 0
        self._restart_due: Optional[float] = None
        self._last_event_at: Optional[float] = None

    @property
    def active(self) -> bool:
        return self.state in (RecognizerState.LISTENING, RecognizerState.RESTARTING)

    def _schedule_restart(self, reason: str) -> None:
        self.state = RecognizerState.RESTARTING
        self._restart_due = self._clock() + self.restart_delay
        logger.debug(f"[Recognizer] Restart scheduled ({reason})")

    def _fail(self, error: str) -> None:
        self.state = RecognizerState.STOPPED
        self.last_error = error
        self._restart_due = None
        logger.error(f"[Recognizer] Stopped: {error}")

    def start(self) -> bool:
        """Begin listening. Returns False if the engine refused to start."""
        if self.active:
            return True
        self.last_error = None
        self.restart_failures = 0
        try:
            self.engine.start()
        except Exception as e:
            self._fail(f"start-failed: {e}")
            return False
        self.state = RecognizerState.LISTENING
        self._last_event_at = self._clock()
        return True

    def stop(self) -> None:
        """User-initiated stop; cancels any pending restart."""
        was_listening = self.state == RecognizerState.LISTENING
        self.state = RecognizerState.STOPPED
        self._restart_due = None
        if was_listening:
            self.engine.stop()

    def on_result(self, transcript: str, is_final: bool = False) -> None:
        if self.state != RecognizerState.LISTENING:
            return
        self._last_event_at = self._clock()
        self.restart_failures = 0
        if self.on_transcript is not None:
            self.on_transcript(transcript, is_final)

    def on_error(self, error: str) -> None:
        if not self.active:
            return
        self._last_event_at = self._clock()
        if error in RECOVERABLE_ERRORS:
            logger.info(f"[Recognizer] Recoverable error '{error}'")
            self._schedule_restart(error)
        else:
            self._fail(error)

    def on_end(self) -> None:
        """The engine ended by itself (e.g. end of a non-continuous session)."""
        if self.state == RecognizerState.LISTENING:
            self._schedule_restart("ended")

    def tick(self, now: Optional[float] = None) -> None:
        now = self._clock() if now is None else now

        if self.state == RecognizerState.LISTENING:
            if self._last_event_at is not None and now - self._last_event_at >= self.inactivity_timeout:
                logger.info(f"[Recognizer] No events for {self.inactivity_timeout}s, forcing restart")
                self.engine.stop()
                self._schedule_restart("inactivity")
            return

        if self.state == RecognizerState.RESTARTING and self._restart_due is not None and now >= self._restart_due:
            try:
                self.engine.start()
            except Exception as e:
                self.restart_failures += 1
                logger.warning(f"[Recognizer] Restart attempt {self.restart_failures} failed: {e}")
                if self.restart_failures >= self.max_restart_failures:
                    self._fail(f"restart-failed: {e}")
                else:
                    self._schedule_restart("retry")
                return
            self.restarts += 1
            self.state = RecognizerState.LISTENING
            self._restart_due = None
            self._last_event_at = now
