import time
from datetime import datetime
from threading import Event

from alarms.manager import AlarmManager


class FakeBell:
    def __init__(self):
        self.started = 0
        self.stopped = 0

    def start_loop(self):
        self.started += 1

    def stop_loop(self):
        self.stopped += 1


def _monday(hour: int, minute: int) -> datetime:
    return datetime(2025, 1, 6, hour, minute)


def _manager(**kwargs) -> AlarmManager:
    return AlarmManager(clock=lambda: _monday(9, 5), **kwargs)


def test_evaluate_returns_due_alarm_and_holds_guard():
    triggered = []
    bell = FakeBell()
    manager = _manager(bell=bell, on_alarm_triggered=triggered.append)
    manager.add_alarm("09:00", "Monday")

    alarm = manager.evaluate()
    assert alarm is not None
    assert manager.is_handling
    assert manager.ringing_alarm is alarm
    assert triggered == [alarm]
    assert bell.started == 1


def test_second_evaluation_is_noop_while_handling():
    triggered = []
    manager = _manager(on_alarm_triggered=triggered.append)
    manager.add_alarm("09:00", "monday")
    manager.add_alarm("08:00", "monday")

    first = manager.evaluate()
    assert first is not None
    assert manager.evaluate() is None
    assert manager.evaluate(_monday(9, 30)) is None
    assert triggered == [first]


def test_no_due_alarm_leaves_guard_free():
    manager = _manager()
    manager.add_alarm("10:00", "monday")
    assert manager.evaluate() is None
    assert not manager.is_handling


def test_snooze_releases_guard_and_reschedules():
    bell = FakeBell()
    manager = _manager(bell=bell)
    manager.add_alarm("09:00", "monday")
    alarm = manager.evaluate()

    assert manager.snooze(_monday(9, 6))
    assert alarm.time == "09:11"
    assert alarm.snooze_count == 1
    assert not manager.is_handling
    assert bell.stopped == 1
    assert manager.evaluate(_monday(9, 10)) is None
    assert manager.evaluate(_monday(9, 11)) is alarm


def test_exhausted_snooze_keeps_guard_until_dismiss():
    manager = _manager(max_snoozes=1)
    manager.add_alarm("09:00", "monday")
    alarm = manager.evaluate()
    assert manager.snooze(_monday(9, 5))
    assert manager.evaluate(_monday(9, 10)) is alarm

    assert manager.snooze(_monday(9, 10)) is False
    assert manager.is_handling
    assert manager.evaluate(_monday(9, 30)) is None

    assert manager.dismiss() is alarm
    assert not manager.is_handling
    assert not alarm.active


def test_dismissed_alarm_never_fires_again():
    manager = _manager()
    manager.add_alarm("09:00", "monday")
    manager.evaluate()
    manager.dismiss()
    assert manager.evaluate(_monday(23, 59)) is None
    assert list(manager.list_alarms())[0].active is False


def test_snooze_without_ringing_alarm_is_rejected():
    manager = _manager()
    assert manager.snooze() is False
    assert manager.dismiss() is None


def test_failing_callback_does_not_propagate():
    def boom(alarm):
        raise RuntimeError("callback failed")

    manager = _manager(on_alarm_triggered=boom)
    manager.add_alarm("09:00", "monday")
    assert manager.evaluate() is not None


def test_delete_alarm_reports_success():
    manager = _manager()
    manager.add_alarm("09:00", "monday")
    assert manager.delete_alarm(3) is False
    assert manager.delete_alarm(0) is True
    assert len(manager.list_alarms()) == 0


def test_start_and_shutdown_ticker():
    bell = FakeBell()
    manager = AlarmManager(bell=bell, check_interval=0.2, clock=lambda: _monday(9, 5))
    manager.start()
    manager.shutdown()
    assert bell.stopped == 1


def test_ticker_triggers_once_while_handling():
    fired = Event()
    triggered = []

    def on_trigger(alarm):
        triggered.append(alarm)
        fired.set()

    manager = AlarmManager(check_interval=0.2, on_alarm_triggered=on_trigger, clock=lambda: _monday(9, 5))
    manager.add_alarm("09:00", "monday")
    manager.start()
    try:
        assert fired.wait(timeout=2)
        time.sleep(manager.check_interval * 4)
        assert len(triggered) == 1
        assert manager.is_handling
    finally:
        manager.shutdown()


def test_deleting_ringing_alarm_releases_guard():
    bell = FakeBell()
    manager = _manager(bell=bell)
    manager.add_alarm("09:00", "monday")
    manager.evaluate()

    assert manager.delete_alarm(0)
    assert not manager.is_handling
    assert manager.ringing_alarm is None
    assert bell.stopped == 1


def test_deleting_other_alarm_keeps_guard():
    manager = _manager()
    manager.add_alarm("09:00", "monday")
    manager.add_alarm("10:00", "monday")
    alarm = manager.evaluate()

    assert manager.delete_alarm(1)
    assert manager.is_handling
    assert manager.ringing_alarm is alarm
