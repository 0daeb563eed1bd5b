from __future__ import annotations

import logging

from agenda_core.domain.lunch import classify_lunch_slot, is_lunch_slot, lunch_flags
from agenda_core.domain.models import LunchBreak, Resource
from agenda_core.domain.timegrid import build_grid
from factories import make_resource


def test_lunch_break_is_half_open() -> None:
    r = make_resource(lunch=("12:00", "13:00"))

    assert not is_lunch_slot(r, 11, 45)
    assert is_lunch_slot(r, 12, 0)
    assert is_lunch_slot(r, 12, 45)
    assert not is_lunch_slot(r, 13, 0)


def test_no_or_disabled_lunch_break_never_blocks() -> None:
    assert not is_lunch_slot(make_resource(lunch=None), 12, 0)

    disabled = Resource(id="r1", name="Ana", lunch_break=LunchBreak(enabled=False, start="12:00", end="13:00"))
    assert not is_lunch_slot(disabled, 12, 0)


def test_missing_minute_component_defaults_to_zero() -> None:
    r = make_resource(lunch=("12", "13:30"))

    assert is_lunch_slot(r, 12, 0)
    assert is_lunch_slot(r, 13, 15)
    assert not is_lunch_slot(r, 13, 30)


def test_malformed_lunch_time_fails_closed_and_warns(caplog) -> None:
    r = make_resource(lunch=("meio-dia", "13:00"))

    check = classify_lunch_slot(r, 12, 0)
    assert check.blocked is False
    assert check.warning is not None
    assert check.warning.source == "lunch_break"

    with caplog.at_level(logging.WARNING, logger="agenda_core.domain.lunch"):
        assert is_lunch_slot(r, 12, 0) is False
    assert "Barber r1" in caplog.text


def test_lunch_flags_cover_every_resource_and_slot() -> None:
    slots = build_grid(11, 14)
    ok = make_resource("r1", lunch=("12:00", "13:00"))
    broken = make_resource("r2", lunch=("xx", "13:00"))
    none = make_resource("r3", lunch=None)

    flags, warnings = lunch_flags([ok, broken, none], slots)

    assert set(flags) == {"r1", "r2", "r3"}
    assert [k for k, v in flags["r1"].items() if v] == ["12:00", "12:15", "12:30", "12:45"]
    assert not any(flags["r2"].values())
    assert not any(flags["r3"].values())
    # 設定ミスの警告は担当者ごとに1回
    assert len(warnings) == 1
