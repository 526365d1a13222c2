from __future__ import annotations

import logging
from datetime import datetime
from threading import Event, Lock, Thread
from typing import Callable, Optional

from time_utils import now_local

from .alarm import MAX_SNOOZES, SNOOZE_MINUTES, Alarm
from .registry import AlarmListing, AlarmRegistry
from .sounds import AlarmBell

logger = logging.getLogger(__name__)


class AlarmRuntimeState:
    def __init__(self) -> None:
        self.handling = False
        self.ringing_alarm: Optional[Alarm] = None


class AlarmManager:
    """Owns the registry, the ticker thread and the handling guard.

    While an alarm is being handled (from the tick that returned it until
    ``snooze`` succeeds or ``dismiss`` is called) every further ``evaluate``
    is a no-op.
    """

    def __init__(
        self,
        registry: Optional[AlarmRegistry] = None,
        bell: Optional[AlarmBell] = None,
        check_interval: float = 1.0,
        snooze_minutes: int = SNOOZE_MINUTES,
        max_snoozes: int = MAX_SNOOZES,
        on_alarm_triggered: Optional[Callable[[Alarm], None]] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self.registry = registry or AlarmRegistry()
        self.bell = bell
        self.check_interval = max(0.2, check_interval)
        self.snooze_minutes = max(1, snooze_minutes)
        self.max_snoozes = max(0, max_snoozes)
        self.on_alarm_triggered = on_alarm_triggered
        self.clock = clock

        self._lock = Lock()
        self._stop_event = Event()
        self._thread: Optional[Thread] = None
        self._runtime = AlarmRuntimeState()

    def start(self) -> None:
        self._stop_event.clear()
        self._thread = Thread(target=self._loop, name="alarm-ticker", daemon=True)
        self._thread.start()
        logger.info("Alarm ticker started (interval=%.1fs)", self.check_interval)

    def shutdown(self) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=2)
        if self.bell:
            self.bell.stop_loop()
        self._thread = None
        logger.info("Alarm ticker stopped")

    def add_alarm(self, time_text: str, day: str) -> None:
        with self._lock:
            self.registry.add(time_text, day)

    def delete_alarm(self, index: int) -> bool:
        with self._lock:
            target = self.registry.get(index)
            if not self.registry.delete(index):
                return False
            ringing_removed = target is self._runtime.ringing_alarm
            if ringing_removed:
                logger.info("Ringing alarm %s on %s deleted, handling released", target.time, target.day)
                self._release()
        if ringing_removed and self.bell:
            self.bell.stop_loop()
        return True

    def list_alarms(self) -> AlarmListing:
        with self._lock:
            return self.registry.list()

    @property
    def is_handling(self) -> bool:
        with self._lock:
            return self._runtime.handling

    @property
    def ringing_alarm(self) -> Optional[Alarm]:
        with self._lock:
            return self._runtime.ringing_alarm

    def evaluate(self, now: Optional[datetime] = None) -> Optional[Alarm]:
        now = now or self.clock()
        with self._lock:
            if self._runtime.handling:
                logger.debug("Tick skipped, alarm %s still being handled", self._runtime.ringing_alarm)
                return None
            alarm = self.registry.evaluate(now)
            if not alarm:
                return None
            self._runtime.handling = True
            self._runtime.ringing_alarm = alarm
        self._trigger_alarm(alarm)
        return alarm

    def snooze(self, now: Optional[datetime] = None) -> bool:
        with self._lock:
            ringing = self._runtime.ringing_alarm
            if not ringing:
                return False
            snoozed = ringing.snooze(now or self.clock(), self.snooze_minutes, self.max_snoozes)
            if snoozed:
                self._release()
        if snoozed and self.bell:
            self.bell.stop_loop()
        return snoozed

    def dismiss(self) -> Optional[Alarm]:
        with self._lock:
            current = self._runtime.ringing_alarm
            if current:
                current.dismiss()
                logger.info("Alarm %s on %s dismissed", current.time, current.day)
            self._release()
        if self.bell:
            self.bell.stop_loop()
        return current

    def _release(self) -> None:
        self._runtime.handling = False
        self._runtime.ringing_alarm = None

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            self.evaluate()
            self._stop_event.wait(self.check_interval)

    def _trigger_alarm(self, alarm: Alarm) -> None:
        logger.info("Alarm triggered: %s on %s", alarm.time, alarm.day)
        if self.bell:
            self.bell.start_loop()
        if self.on_alarm_triggered:
            try:
                self.on_alarm_triggered(alarm)
            except Exception:
                logger.error("on_alarm_triggered callback failed", exc_info=True)
