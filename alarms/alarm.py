from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from time_utils import now_local, shift_time_of_day, time_of_day

logger = logging.getLogger(__name__)

SNOOZE_MINUTES = 5
MAX_SNOOZES = 3


@dataclass
class Alarm:
    """A weekday + time-of-day trigger.

    ``time`` is always a zero-padded ``HH:MM`` so plain string comparison
    orders it against the current time of day. Once ``active`` is False the
    alarm never fires again.
    """

    time: str
    day: str
    active: bool = True
    snooze_count: int = 0

    def is_due(self, now_time: str, now_weekday: str) -> bool:
        return self.active and self.day.lower() == now_weekday.lower() and self.time <= now_time

    def snooze(
        self,
        now: Optional[datetime] = None,
        minutes: int = SNOOZE_MINUTES,
        max_snoozes: int = MAX_SNOOZES,
    ) -> bool:
        """Push the alarm ``minutes`` past ``now``.

        Returns False without touching the alarm once ``max_snoozes`` have
        been used; the caller is expected to dismiss it then.
        """
        if self.snooze_count >= max_snoozes:
            logger.info("Snooze refused for %s on %s (count=%s)", self.time, self.day, self.snooze_count)
            return False
        now = now or now_local()
        self.snooze_count += 1
        self.time = shift_time_of_day(time_of_day(now), minutes)
        logger.info("Alarm on %s snoozed to %s (count=%s)", self.day, self.time, self.snooze_count)
        return True

    def dismiss(self) -> None:
        self.active = False
