import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from queue import Queue
from threading import Thread
from typing import Any, Callable, Iterable, Iterator, Optional, TextIO

from alarms.alarm import Alarm
from alarms.manager import AlarmManager
from alarms.parser import (
    MenuChoice,
    is_snooze_answer,
    parse_alarm_request,
    parse_index,
    parse_menu_choice,
)
from alarms.sounds import AlarmBell, LocalSpeaker
from config import load_config, setup_logging
from time_utils import format_clock, now_local

logger = logging.getLogger("alarm_clock")


class MenuState(Enum):
    MENU = "menu"
    ADD_TIME = "add_time"
    ADD_DAY = "add_day"
    DELETE_INDEX = "delete_index"
    SNOOZE_PROMPT = "snooze_prompt"
    EXITED = "exited"


@dataclass
class MenuEvent:
    kind: str  # "line", "alarm" or "eof"
    payload: Any = None


def stdin_lines() -> Iterator[str]:
    while True:
        try:
            yield input()
        except EOFError:
            return


class AlarmClockCli:
    """Sequential menu driven by one event queue.

    Typed lines (from the reader thread) and triggered alarms (from the
    ticker thread) are consumed one at a time on the caller's thread, so at
    most one prompt is ever waiting for an answer.
    """

    def __init__(
        self,
        manager: AlarmManager,
        out: Optional[TextIO] = None,
        lines: Optional[Iterable[str]] = None,
        speaker: Optional[LocalSpeaker] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self.manager = manager
        self.manager.on_alarm_triggered = self._on_alarm_triggered
        self.out = out or sys.stdout
        self.lines = lines if lines is not None else stdin_lines()
        self.speaker = speaker
        self.clock = clock

        self.events: "Queue[MenuEvent]" = Queue()
        self.state = MenuState.MENU
        self.reader_thread: Thread | None = None
        self._pending_time: Optional[str] = None
        self._ringing: Optional[Alarm] = None

    def start(self) -> None:
        self.manager.start()
        self.reader_thread = Thread(target=self._read_loop, name="menu-reader", daemon=True)
        self.reader_thread.start()

    def shutdown(self) -> None:
        self.manager.shutdown()

    def run(self) -> None:
        self._print("Alarm CLI Application!!!")
        self.display_menu()
        while self.state != MenuState.EXITED:
            self.handle_event(self.events.get())

    def handle_event(self, event: MenuEvent) -> None:
        if event.kind == "alarm":
            self._handle_alarm(event.payload)
        elif event.kind == "eof":
            self._exit()
        else:
            self._handle_line(event.payload)

    def display_menu(self) -> None:
        self.state = MenuState.MENU
        self._print(f"\nCurrent time: {format_clock(self.clock())}")
        self._print("0. Refresh Time")
        self._print("1. Add alarm")
        self._print("2. Delete alarm")
        self._print("3. List alarms")
        self._print("4. Exit")
        self._prompt("Enter your choice: ")

    def _read_loop(self) -> None:
        for line in self.lines:
            self.events.put(MenuEvent("line", line))
        self.events.put(MenuEvent("eof"))

    def _on_alarm_triggered(self, alarm: Alarm) -> None:
        # Runs on the ticker thread.
        self.events.put(MenuEvent("alarm", alarm))

    def _handle_line(self, text: str) -> None:
        if self.state == MenuState.MENU:
            self._handle_choice(text)
        elif self.state == MenuState.ADD_TIME:
            self._pending_time = text
            self.state = MenuState.ADD_DAY
            self._prompt("Enter day of the week: ")
        elif self.state == MenuState.ADD_DAY:
            self._finish_add(self._pending_time or "", text)
        elif self.state == MenuState.DELETE_INDEX:
            index = parse_index(text)
            if index is not None and self.manager.delete_alarm(index):
                self._print("\nAlarm deleted successfully.")
            else:
                self._print("Invalid alarm index.")
            self.display_menu()
        elif self.state == MenuState.SNOOZE_PROMPT:
            self._finish_snooze(text)

    def _handle_choice(self, text: str) -> None:
        choice = parse_menu_choice(text)
        if choice == MenuChoice.REFRESH:
            self.display_menu()
        elif choice == MenuChoice.ADD:
            self.state = MenuState.ADD_TIME
            self._prompt("Please Enter the alarm time in 24h Format (HH:MM): ")
        elif choice == MenuChoice.DELETE:
            self.state = MenuState.DELETE_INDEX
            self._prompt("Enter alarm index to delete: ")
        elif choice == MenuChoice.LIST:
            self._print_alarms()
            self.display_menu()
        elif choice == MenuChoice.EXIT:
            self._exit()
        else:
            self._print("Invalid choice. Please try again.")
            self.display_menu()

    def _finish_add(self, time_text: str, day_text: str) -> None:
        self._pending_time = None
        request = parse_alarm_request(time_text, day_text)
        if not request.ok:
            self._print(request.error)
        else:
            self.manager.add_alarm(request.time, request.day)
            self._print("Alarm added successfully.")
        self.display_menu()

    def _print_alarms(self) -> None:
        listing = self.manager.list_alarms()
        if not len(listing):
            self._print("\nNo alarms set.")
            return
        for entry in listing:
            self._print(f"\n{entry.index}. {entry.time} on {entry.day} is {entry.status}")

    def _handle_alarm(self, alarm: Alarm) -> None:
        if alarm is not self.manager.ringing_alarm:
            logger.info("Alarm %s on %s no longer ringing, prompt skipped", alarm.time, alarm.day)
            return
        # Whatever command was half-typed is abandoned.
        self._pending_time = None
        self._ringing = alarm
        self._print(f"\nALARM! It's {alarm.time} on {alarm.day}")
        if self.speaker and self.speaker.available:
            self.speaker.speak_async(f"Alarm! It's {alarm.time}.")
        self.state = MenuState.SNOOZE_PROMPT
        self._prompt("Snooze? (y/n): ")

    def _finish_snooze(self, answer: str) -> None:
        alarm = self._ringing
        self._ringing = None
        if is_snooze_answer(answer) and self.manager.snooze():
            self._print(
                f"Alarm snoozed for {self.manager.snooze_minutes} minutes. "
                f"Next alert at {alarm.time if alarm else '?'}"
            )
        else:
            self.manager.dismiss()
            self._print("Alarm dismissed.")
        self.display_menu()

    def _exit(self) -> None:
        if self.state == MenuState.SNOOZE_PROMPT:
            self.manager.dismiss()
        self.state = MenuState.EXITED
        logger.info("Exit requested")

    def _print(self, text: str) -> None:
        print(text, file=self.out)

    def _prompt(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()


def main() -> None:
    config = load_config()
    setup_logging(config.log_level, config.log_dir, config.log_to_console)
    logger.info("Starting alarm clock")

    bell = AlarmBell() if config.bell_enabled else None
    speaker = LocalSpeaker() if config.speak_enabled else None
    if speaker and not speaker.available:
        logger.warning("ALARM_SPEAK is set but pyttsx3 is not installed")

    manager = AlarmManager(
        bell=bell,
        check_interval=config.check_interval_ms / 1000.0,
        snooze_minutes=config.snooze_minutes,
        max_snoozes=config.max_snoozes,
    )
    cli = AlarmClockCli(manager, speaker=speaker)
    cli.start()
    try:
        cli.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        cli.shutdown()


if __name__ == "__main__":
    main()
