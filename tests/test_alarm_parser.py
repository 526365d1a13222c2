from alarms.parser import (
    INVALID_ALARM_MESSAGE,
    MenuChoice,
    is_snooze_answer,
    is_valid_day,
    is_valid_time,
    parse_alarm_request,
    parse_index,
    parse_menu_choice,
)


def test_valid_times():
    for text in ("00:00", "07:30", "19:59", "23:59"):
        assert is_valid_time(text)


def test_invalid_times():
    for text in ("24:00", "7:30", "07:60", "0730", "07:3", "ab:cd", "", "07:30 "):
        assert not is_valid_time(text)


def test_days_are_case_insensitive():
    assert is_valid_day("Monday")
    assert is_valid_day("SUNDAY")
    assert not is_valid_day("mon")
    assert not is_valid_day("funday")


def test_parse_alarm_request_normalizes():
    request = parse_alarm_request(" 07:30 ", " Friday ")
    assert request.ok
    assert request.time == "07:30"
    assert request.day == "friday"


def test_parse_alarm_request_rejects_bad_input():
    bad_time = parse_alarm_request("25:00", "friday")
    assert not bad_time.ok
    assert bad_time.error == INVALID_ALARM_MESSAGE

    bad_day = parse_alarm_request("07:30", "someday")
    assert not bad_day.ok
    assert bad_day.time is None


def test_parse_index():
    assert parse_index("2") == 2
    assert parse_index(" 0 ") == 0
    assert parse_index("-1") == -1
    assert parse_index("two") is None
    assert parse_index("") is None


def test_parse_menu_choice():
    assert parse_menu_choice("1") == MenuChoice.ADD
    assert parse_menu_choice(" 4 ") == MenuChoice.EXIT
    assert parse_menu_choice("5") is None
    assert parse_menu_choice("add") is None


def test_snooze_answer():
    assert is_snooze_answer("y")
    assert is_snooze_answer("Y ")
    assert not is_snooze_answer("yes")
    assert not is_snooze_answer("n")
