from __future__ import annotations

from datetime import date, datetime

import pytest

from agenda_core.domain.models import AgendaSnapshot, Holiday
from factories import make_appointment, make_resource, weekday_rules


@pytest.fixture
def snapshot() -> AgendaSnapshot:
    return AgendaSnapshot(
        resources=[make_resource("r1"), make_resource("r2", lunch=None)],
        appointments=[
            make_appointment("a1", datetime(2026, 1, 20, 12, 30), "r1"),
            make_appointment("a2", datetime(2026, 1, 20, 14, 7), "r2"),
            make_appointment("a3", datetime(2026, 1, 21, 10, 0), "r1"),
            make_appointment("a4", datetime(2026, 1, 20, 15, 0), "r1", status="cancelled"),
        ],
        business_hours=weekday_rules(),
        holidays=[Holiday(day=date(2026, 1, 23), name="Dia do Barbeiro")],
    )
