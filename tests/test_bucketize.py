from __future__ import annotations

from datetime import datetime

import pytest
from dateutil import tz

from agenda_core.domain.timegrid import build_grid
from agenda_core.preprocessing.bucketize import (
    active_resources,
    bucketize,
    by_day,
    dropped_appointments,
    to_business_time,
    visible_appointments,
)
from factories import make_appointment, make_resource


def test_every_resource_and_slot_is_initialised_empty() -> None:
    slots = build_grid(9, 11)
    buckets = bucketize([], [make_resource("r1"), make_resource("r2")], slots)

    assert set(buckets) == {"r1", "r2"}
    for by_slot in buckets.values():
        assert list(by_slot) == [s.key for s in slots]
        assert all(v == [] for v in by_slot.values())


def test_start_time_is_floored_to_slot_key() -> None:
    a = make_appointment("a", datetime(2026, 1, 20, 14, 7))
    b = make_appointment("b", datetime(2026, 1, 20, 14, 15))

    buckets = bucketize([a, b], [make_resource("r1")], build_grid(7, 23))

    assert buckets["r1"]["14:00"] == [a]
    assert buckets["r1"]["14:15"] == [b]


def test_unknown_resource_is_dropped_without_error() -> None:
    ghost = make_appointment("ghost", datetime(2026, 1, 20, 10, 0), resource_id="removed")
    appts = [ghost]

    buckets = bucketize(appts, [make_resource("r1")], build_grid(7, 23))

    assert ghost in appts
    assert all(ghost not in lst for by_slot in buckets.values() for lst in by_slot.values())
    assert dropped_appointments(appts, buckets) == [ghost]


def test_null_resource_and_out_of_window_are_dropped() -> None:
    unassigned = make_appointment("u", datetime(2026, 1, 20, 10, 0), resource_id=None)
    early = make_appointment("e", datetime(2026, 1, 20, 6, 45))
    late = make_appointment("l", datetime(2026, 1, 20, 23, 0))
    ok = make_appointment("ok", datetime(2026, 1, 20, 22, 59))

    buckets = bucketize([unassigned, early, late, ok], [make_resource("r1")], build_grid(7, 23))

    assert buckets["r1"]["22:45"] == [ok]
    assert dropped_appointments([unassigned, early, late, ok], buckets) == [unassigned, early, late]


def test_bucket_keeps_input_order() -> None:
    first = make_appointment("first", datetime(2026, 1, 20, 10, 10))
    second = make_appointment("second", datetime(2026, 1, 20, 10, 0))
    third = make_appointment("third", datetime(2026, 1, 20, 10, 5))

    buckets = bucketize([first, second, third], [make_resource("r1")], build_grid(10, 11))

    assert [a.id for a in buckets["r1"]["10:00"]] == ["first", "second", "third"]


@pytest.mark.parametrize("arg", ["appointments", "resources", "slots"])
def test_missing_collaborator_is_a_programming_error(arg: str) -> None:
    kwargs = dict(appointments=[], resources=[make_resource()], slots=build_grid(9, 10))
    kwargs[arg] = None
    with pytest.raises(TypeError):
        bucketize(**kwargs)


def test_visible_appointments_hides_cancelled() -> None:
    keep = make_appointment("k", datetime(2026, 1, 20, 10, 0))
    gone = make_appointment("c", datetime(2026, 1, 20, 10, 0), status="cancelled")

    assert visible_appointments([keep, gone]) == [keep]
    assert visible_appointments([keep, gone], hide_cancelled=False) == [keep, gone]


def test_active_resources_filters_inactive_and_selected() -> None:
    r1, r2, off = make_resource("r1"), make_resource("r2"), make_resource("off", is_active=False)

    assert active_resources([r1, r2, off]) == [r1, r2]
    assert active_resources([r1, r2, off], "r2") == [r2]
    assert active_resources([r1, r2, off], "off") == []


def test_to_business_time_shifts_aware_datetimes() -> None:
    utc = make_appointment("a", datetime(2026, 1, 20, 15, 30, tzinfo=tz.UTC))
    naive = make_appointment("b", datetime(2026, 1, 20, 9, 0))

    local = to_business_time([utc, naive], tz.gettz("America/Sao_Paulo"))

    assert (local[0].start_time.hour, local[0].start_time.minute) == (12, 30)
    assert local[1] is naive


def test_by_day_groups_on_start_date() -> None:
    a = make_appointment("a", datetime(2026, 1, 20, 9, 0))
    b = make_appointment("b", datetime(2026, 1, 21, 9, 0))
    c = make_appointment("c", datetime(2026, 1, 20, 18, 0))

    grouped = by_day([a, b, c])
    assert [x.id for x in grouped[a.start_time.date()]] == ["a", "c"]
    assert [x.id for x in grouped[b.start_time.date()]] == ["b"]
