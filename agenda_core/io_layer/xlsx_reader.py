# agenda_core/io_layer/xlsx_reader.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, List, Optional

import pandas as pd
from openpyxl import load_workbook

from agenda_core.domain.models import (
    AgendaSnapshot,
    Appointment,
    BusinessHourRule,
    Holiday,
    LunchBreak,
    Resource,
)
from agenda_core.io_layer.paths import InputPaths
from agenda_core.validation.validator import ValidationError


def _is_blank(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, str):
        return not v.strip()
    try:
        return bool(pd.isna(v))
    except (TypeError, ValueError):
        return False


def _text(v: Any) -> Optional[str]:
    if _is_blank(v):
        return None
    if isinstance(v, float) and v.is_integer():
        # 数値IDがfloatで読まれるケース（"1.0"にしない）
        return str(int(v))
    return str(v).strip()


def _time_text(v: Any) -> Optional[str]:
    """セルの時刻を "HH:MM" 文字列へ。文字列はそのまま（検証は分類器側）。"""
    if _is_blank(v):
        return None
    if isinstance(v, (time, datetime)):
        return v.strftime("%H:%M")
    return str(v).strip()


def _as_bool(v: Any, default: bool) -> bool:
    if _is_blank(v):
        return default
    if isinstance(v, str):
        return v.strip().lower() not in {"0", "false", "no", "nao", "não"}
    return bool(int(v))


def _as_date(v: Any) -> date:
    return pd.to_datetime(v).date()


def _as_datetime(v: Any) -> datetime:
    return pd.to_datetime(v).to_pydatetime()


def _require_columns(df: pd.DataFrame, cols: List[str], where: str) -> None:
    for c in cols:
        if c not in df.columns:
            raise ValidationError(f"{where} に列 {c} がありません。")


@dataclass(frozen=True)
class XlsxReader:
    paths: InputPaths

    def _read_sheet(self, sheet_name: str, optional: bool = False) -> pd.DataFrame:
        wb = load_workbook(self.paths.snapshot_file, read_only=True)
        try:
            names = list(wb.sheetnames)
        finally:
            wb.close()
        if sheet_name not in names:
            if optional:
                return pd.DataFrame()
            raise ValidationError(f"{self.paths.snapshot_file} に '{sheet_name}' シートが見つかりません。")
        return pd.read_excel(self.paths.snapshot_file, sheet_name=sheet_name)

    def read_resources(self) -> List[Resource]:
        """
        resourcesシート想定列:
        id, name, (optional) calendar_color, is_active,
        lunch_break_enabled, lunch_break_start, lunch_break_end
        """
        where = f"{self.paths.snapshot_file}:{self.paths.resources_sheet}"
        df = self._read_sheet(self.paths.resources_sheet)
        _require_columns(df, ["id", "name"], where)

        out: List[Resource] = []
        for _, row in df.iterrows():
            rid = _text(row["id"])
            if rid is None:
                continue
            lunch = None
            if "lunch_break_enabled" in df.columns:
                lunch = LunchBreak(
                    enabled=_as_bool(row.get("lunch_break_enabled"), False),
                    start=_time_text(row.get("lunch_break_start")),
                    end=_time_text(row.get("lunch_break_end")),
                )
            out.append(Resource(
                id=rid,
                name=_text(row["name"]) or rid,
                calendar_color=_text(row.get("calendar_color")),
                is_active=_as_bool(row.get("is_active"), True),
                lunch_break=lunch,
            ))
        return out

    def read_appointments(self) -> List[Appointment]:
        """
        appointmentsシート想定列:
        id, start_time, end_time, resource_id, status
        行の順番（=取得順）をそのまま保持する。
        """
        where = f"{self.paths.snapshot_file}:{self.paths.appointments_sheet}"
        df = self._read_sheet(self.paths.appointments_sheet)
        _require_columns(df, ["id", "start_time", "end_time", "resource_id"], where)

        out: List[Appointment] = []
        for idx, row in df.iterrows():
            aid = _text(row["id"])
            if aid is None:
                continue
            try:
                start = _as_datetime(row["start_time"])
                end = _as_datetime(row["end_time"])
            except (ValueError, TypeError):
                raise ValidationError(f"{where} 行{int(idx) + 2}: 予約 {aid} の日時が不正です。")
            out.append(Appointment(
                id=aid,
                start_time=start,
                end_time=end,
                resource_id=_text(row["resource_id"]),
                status=_text(row.get("status")) or "scheduled",
            ))
        return out

    def read_business_hours(self) -> List[BusinessHourRule]:
        """
        business_hoursシート想定列:
        day_of_week(0=日曜), opening_time, closing_time, is_closed, (optional) specific_date
        """
        where = f"{self.paths.snapshot_file}:{self.paths.business_hours_sheet}"
        df = self._read_sheet(self.paths.business_hours_sheet)
        _require_columns(df, ["day_of_week", "opening_time", "closing_time"], where)

        out: List[BusinessHourRule] = []
        for _, row in df.iterrows():
            specific = row.get("specific_date") if "specific_date" in df.columns else None
            dow = row["day_of_week"]
            if _is_blank(dow) and _is_blank(specific):
                continue
            day_of_week = None if _is_blank(dow) else int(dow)
            if day_of_week is not None and not (0 <= day_of_week <= 6):
                raise ValidationError(f"{where}: day_of_week は0〜6です: {day_of_week}")
            out.append(BusinessHourRule(
                day_of_week=day_of_week,
                opening=_time_text(row["opening_time"]),
                closing=_time_text(row["closing_time"]),
                is_closed=_as_bool(row.get("is_closed"), False),
                specific_date=None if _is_blank(specific) else _as_date(specific),
            ))
        return out

    def read_holidays(self) -> List[Holiday]:
        """holidaysシート想定列: date, name（シート自体が無ければ祝日なし）"""
        where = f"{self.paths.snapshot_file}:{self.paths.holidays_sheet}"
        df = self._read_sheet(self.paths.holidays_sheet, optional=True)
        if df.empty:
            return []
        _require_columns(df, ["date", "name"], where)
        return [
            Holiday(day=_as_date(row["date"]), name=_text(row["name"]) or "Feriado")
            for _, row in df.iterrows()
            if not _is_blank(row["date"])
        ]

    def read_snapshot(self) -> AgendaSnapshot:
        return AgendaSnapshot(
            resources=self.read_resources(),
            appointments=self.read_appointments(),
            business_hours=self.read_business_hours(),
            holidays=self.read_holidays(),
        )
