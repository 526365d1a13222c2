from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from time_utils import WEEKDAYS

TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

INVALID_ALARM_MESSAGE = (
    "Invalid format. Please enter correct time in HH:MM format and valid day of the week"
)


class MenuChoice(Enum):
    REFRESH = "0"
    ADD = "1"
    DELETE = "2"
    LIST = "3"
    EXIT = "4"


@dataclass
class AlarmRequest:
    time: Optional[str] = None
    day: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def is_valid_time(text: str) -> bool:
    return bool(TIME_RE.match(text))


def is_valid_day(text: str) -> bool:
    return text.lower() in WEEKDAYS


def parse_alarm_request(time_text: str, day_text: str) -> AlarmRequest:
    """Validate raw menu input for a new alarm.

    Surrounding whitespace is ignored; the day comes back lower-cased.
    """
    time_value = time_text.strip()
    day_value = day_text.strip()
    if not is_valid_time(time_value) or not is_valid_day(day_value):
        return AlarmRequest(error=INVALID_ALARM_MESSAGE)
    return AlarmRequest(time=time_value, day=day_value.lower())


def parse_index(text: str) -> Optional[int]:
    try:
        return int(text.strip())
    except ValueError:
        return None


def parse_menu_choice(text: str) -> Optional[MenuChoice]:
    try:
        return MenuChoice(text.strip())
    except ValueError:
        return None


def is_snooze_answer(text: str) -> bool:
    return text.strip().lower() == "y"
