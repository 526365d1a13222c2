from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterator, List, NamedTuple, Optional

from time_utils import time_of_day, weekday_name

from .alarm import Alarm

logger = logging.getLogger(__name__)


class AlarmEntry(NamedTuple):
    index: int
    time: str
    day: str
    active: bool

    @property
    def status(self) -> str:
        return "active" if self.active else "inactive"


class AlarmListing:
    """Read-only view over the registry; every iteration starts afresh."""

    def __init__(self, alarms: List[Alarm]):
        self._alarms = alarms

    def __iter__(self) -> Iterator[AlarmEntry]:
        for idx, alarm in enumerate(self._alarms):
            yield AlarmEntry(idx, alarm.time, alarm.day, alarm.active)

    def __len__(self) -> int:
        return len(self._alarms)


class AlarmRegistry:
    """Ordered alarms addressed by their current 0-based position.

    Inputs are trusted: ``alarms.parser`` rejects malformed times and days
    before they get here.
    """

    def __init__(self) -> None:
        self._alarms: List[Alarm] = []

    def __len__(self) -> int:
        return len(self._alarms)

    def get(self, index: int) -> Optional[Alarm]:
        if 0 <= index < len(self._alarms):
            return self._alarms[index]
        return None

    def add(self, time: str, day: str) -> None:
        self._alarms.append(Alarm(time=time, day=day.lower()))
        logger.info("Alarm added for %s on %s (index=%s)", time, day.lower(), len(self._alarms) - 1)

    def delete(self, index: int) -> bool:
        if not 0 <= index < len(self._alarms):
            return False
        removed = self._alarms.pop(index)
        logger.info("Removed alarm %s on %s (index=%s)", removed.time, removed.day, index)
        return True

    def list(self) -> AlarmListing:
        return AlarmListing(self._alarms)

    def find_due(self, now_time: str, now_weekday: str) -> Optional[Alarm]:
        # First match only; other due alarms are picked up on later ticks.
        for alarm in self._alarms:
            if alarm.is_due(now_time, now_weekday):
                return alarm
        return None

    def evaluate(self, now: datetime) -> Optional[Alarm]:
        return self.find_due(time_of_day(now), weekday_name(now))
