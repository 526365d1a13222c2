"""Alarm subsystem for the terminal alarm clock."""

from .alarm import Alarm
from .manager import AlarmManager, AlarmRuntimeState
from .parser import AlarmRequest, MenuChoice, parse_alarm_request
from .registry import AlarmEntry, AlarmRegistry
