# agenda_core/reporting/report.py
from __future__ import annotations

from typing import List, Union

import pandas as pd

from agenda_core.domain.models import Appointment
from agenda_core.validation.validator import ValidationWarning
from agenda_core.views.day_view import DayView
from agenda_core.views.week_view import WeekView

LUNCH_MARK = "almoço"


def _cell_text(appts: List[Appointment], lunch: bool) -> str:
    if appts:
        return ", ".join(a.id for a in appts)
    return LUNCH_MARK if lunch else ""


def build_day_grid_table(view: DayView) -> pd.DataFrame:
    """行=コマ、列=担当者名。セルは予約ID（昼休みの空きコマは印のみ）"""
    rows = []
    for s in view.grid:
        row = dict(slot=s.key, within_hours=view.within_hours.get(s.key, False))
        for r in view.resources:
            row[r.name] = _cell_text(view.cell(r.id, s.key), view.is_lunch(r.id, s.key))
        rows.append(row)
    return pd.DataFrame(rows, columns=["slot", "within_hours"] + [r.name for r in view.resources])


def build_week_grid_table(view: WeekView) -> pd.DataFrame:
    """行=コマ、列="YYYY-MM-DD 担当者名"。休業日の列は空。"""
    columns = [f"{d.isoformat()} {r.name}" for d in view.days for r in view.resources]
    rows = []
    for s in view.grid:
        row = dict(slot=s.key)
        for d in view.days:
            for r in view.resources:
                row[f"{d.isoformat()} {r.name}"] = _cell_text(view.cell(d, r.id, s.key), view.is_lunch(r.id, s.key))
        rows.append(row)
    return pd.DataFrame(rows, columns=["slot"] + columns)


def _summary_row(window, appointment_count: int) -> dict:
    return dict(
        date=window.day.isoformat(),
        is_open=window.is_open,
        opening=window.hours.opening if window.hours else "",
        closing=window.hours.closing if window.hours else "",
        holiday=window.holiday.name if window.holiday else "",
        label=window.closed_label or "",
        appointments=appointment_count,
    )


def build_day_summary(view: Union[DayView, WeekView]) -> pd.DataFrame:
    if isinstance(view, WeekView):
        rows = [_summary_row(view.windows[d], len(view.appointments_on(d))) for d in view.days]
    else:
        count = sum(len(lst) for by_slot in view.buckets.values() for lst in by_slot.values())
        rows = [_summary_row(view.window, count)]
    return pd.DataFrame(rows)


def build_warning_table(warnings: List[ValidationWarning]) -> pd.DataFrame:
    return pd.DataFrame(
        [dict(source=w.source, message=w.message) for w in warnings],
        columns=["source", "message"],
    )
