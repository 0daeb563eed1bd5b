from __future__ import annotations

from datetime import date, datetime

import pandas as pd
import pytest

import main_cli
from agenda_core.io_layer.paths import InputPaths
from agenda_core.io_layer.xlsx_reader import XlsxReader
from agenda_core.validation.validator import ValidationError


def _write_snapshot(path, with_holidays: bool = True, drop_sheet: str | None = None) -> str:
    sheets = {
        "resources": pd.DataFrame([
            dict(id="r1", name="Carlos", calendar_color="#FF6B00", is_active=True,
                 lunch_break_enabled=True, lunch_break_start="12:00", lunch_break_end="13:00"),
            dict(id="r2", name="Bruno", calendar_color=None, is_active=False,
                 lunch_break_enabled=False, lunch_break_start=None, lunch_break_end=None),
        ]),
        "appointments": pd.DataFrame([
            dict(id="a1", start_time=datetime(2026, 1, 20, 12, 30), end_time=datetime(2026, 1, 20, 13, 0),
                 resource_id="r1", status="confirmed"),
            dict(id="a2", start_time=datetime(2026, 1, 20, 9, 10), end_time=datetime(2026, 1, 20, 9, 40),
                 resource_id=None, status="scheduled"),
        ]),
        "business_hours": pd.DataFrame([
            dict(day_of_week=0, opening_time=None, closing_time=None, is_closed=True),
            dict(day_of_week=2, opening_time="09:00", closing_time="19:00", is_closed=False),
        ]),
    }
    if with_holidays:
        sheets["holidays"] = pd.DataFrame([dict(date=date(2026, 1, 23), name="Dia do Barbeiro")])
    if drop_sheet:
        sheets.pop(drop_sheet)

    out = str(path / "snapshot.xlsx")
    with pd.ExcelWriter(out, engine="openpyxl") as w:
        for name, df in sheets.items():
            df.to_excel(w, sheet_name=name, index=False)
    return out


def test_read_snapshot(tmp_path) -> None:
    snap = XlsxReader(paths=InputPaths(snapshot_file=_write_snapshot(tmp_path))).read_snapshot()

    assert [r.id for r in snap.resources] == ["r1", "r2"]
    assert snap.resources[0].lunch_break.start == "12:00"
    assert snap.resources[1].is_active is False
    assert snap.appointments[0].start_time == datetime(2026, 1, 20, 12, 30)
    assert snap.appointments[1].resource_id is None
    assert snap.business_hours[0].is_closed
    assert snap.business_hours[1].day_of_week == 2
    assert snap.holidays[0].day == date(2026, 1, 23)


def test_holidays_sheet_is_optional(tmp_path) -> None:
    path = _write_snapshot(tmp_path, with_holidays=False)
    assert XlsxReader(paths=InputPaths(snapshot_file=path)).read_holidays() == []


def test_missing_required_sheet_is_rejected(tmp_path) -> None:
    path = _write_snapshot(tmp_path, drop_sheet="resources")
    with pytest.raises(ValidationError):
        XlsxReader(paths=InputPaths(snapshot_file=path)).read_snapshot()


def test_cli_day_view_writes_grid(tmp_path, capsys) -> None:
    out = tmp_path / "out" / "agenda.xlsx"
    code = main_cli.main([
        "--input", _write_snapshot(tmp_path), "--date", "2026-01-20", "--out", str(out),
        "--timezone", "America/Sao_Paulo",
    ])

    assert code == 0
    assert "[RESULT] OK" in capsys.readouterr().out
    grid = pd.read_excel(out, sheet_name="grid")
    assert list(grid.columns) == ["slot", "within_hours", "Carlos"]
    assert grid.loc[grid["slot"] == "12:30", "Carlos"].item() == "a1"
    assert grid.loc[grid["slot"] == "12:00", "Carlos"].item() == "almoço"
    days = pd.read_excel(out, sheet_name="days")
    assert bool(days.loc[0, "is_open"]) is True


def test_cli_week_view_on_business_hours(tmp_path) -> None:
    out = tmp_path / "week.xlsx"
    code = main_cli.main([
        "--input", _write_snapshot(tmp_path), "--date", "2026-01-20", "--view", "week",
        "--business-hours-only", "--out", str(out),
    ])

    assert code == 0
    days = pd.read_excel(out, sheet_name="days")
    assert len(days) == 7
    assert days.loc[days["date"] == "2026-01-23", "label"].item() == "Fechado - Dia do Barbeiro"


def test_cli_rejects_bad_input(tmp_path, capsys) -> None:
    path = _write_snapshot(tmp_path, drop_sheet="appointments")
    code = main_cli.main(["--input", path, "--date", "2026-01-20", "--out", str(tmp_path / "x.xlsx")])

    assert code == 1
    assert "[ERROR]" in capsys.readouterr().out


def test_cli_rejects_bad_date(tmp_path, capsys) -> None:
    code = main_cli.main(["--input", _write_snapshot(tmp_path), "--date", "20/01/2026"])
    assert code == 1
    assert "YYYY-MM-DD" in capsys.readouterr().out
