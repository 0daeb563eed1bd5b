# agenda_core/views/week_view.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from agenda_core.config import AppConfig, DEFAULT_CONFIG
from agenda_core.domain.business_hours import (
    BusinessCalendar,
    DayWindow,
    collect_window_warnings,
    resolve_windows,
    within_business_hours,
)
from agenda_core.domain.lunch import lunch_flags
from agenda_core.domain.models import AgendaSnapshot, Appointment, Resource
from agenda_core.domain.now_indicator import business_tz, grid_indicator_offset, now_in_timezone, slot_height
from agenda_core.domain.timegrid import TimeGrid, union_bounds
from agenda_core.preprocessing.bucketize import (
    Buckets,
    active_resources,
    bucketize,
    by_day,
    to_business_time,
    visible_appointments,
)
from agenda_core.validation.validator import ValidationWarning
from agenda_core.views.day_view import grid_bounds


def week_days(anchor: date, week_starts_on: int = 6) -> List[date]:
    """anchor を含む週の7日間（week_starts_on は datetime.weekday() 基準）"""
    start = anchor - timedelta(days=(anchor.weekday() - week_starts_on) % 7)
    return [start + timedelta(days=i) for i in range(7)]


@dataclass
class WeekView:
    days: List[date]
    windows: Dict[date, DayWindow]
    grid: TimeGrid                              # 全曜日共通（和集合）
    resources: List[Resource]
    buckets: Dict[date, Buckets]
    lunch: Dict[str, Dict[str, bool]]
    within_hours: Dict[date, Dict[str, bool]]
    slot_height_px: int
    today: Optional[date] = None                # 表示週に今日が含まれる場合のみ
    indicator_offset_px: Optional[float] = None
    warnings: List[ValidationWarning] = field(default_factory=list)

    def cell(self, day: date, resource_id: str, key: str) -> List[Appointment]:
        return self.buckets.get(day, {}).get(resource_id, {}).get(key, [])

    def is_lunch(self, resource_id: str, key: str) -> bool:
        return self.lunch.get(resource_id, {}).get(key, False)

    def appointments_on(self, day: date) -> List[Appointment]:
        out: List[Appointment] = []
        for by_slot in self.buckets.get(day, {}).values():
            for lst in by_slot.values():
                out.extend(lst)
        return out


def build_week_view(
    snapshot: AgendaSnapshot,
    anchor: date,
    cfg: AppConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
    selected_resource_id: Optional[str] = None,
    container_px: Optional[int] = None,
    business_hours_only: Optional[bool] = None,
) -> WeekView:
    if snapshot is None:
        raise TypeError("build_week_view() requires a snapshot")
    bho = cfg.business_hours_only if business_hours_only is None else business_hours_only

    days = week_days(anchor, cfg.week_starts_on)
    calendar = BusinessCalendar(snapshot.business_hours, snapshot.holidays)
    windows = resolve_windows(calendar, days)

    # 営業時間が日ごとに違っても1つのグリッドで全列を描く
    union = union_bounds(
        (windows[d].hour_bounds() for d in days),
        cfg.grid.fallback_opening_hour,
        cfg.grid.fallback_closing_hour,
    )
    grid = TimeGrid.between(*grid_bounds(cfg, union, bho))
    resources = active_resources(snapshot.resources, selected_resource_id)

    zone = business_tz(cfg.timezone_name)
    appts_by_day = by_day(to_business_time(visible_appointments(snapshot.appointments, cfg.hide_cancelled), zone))
    buckets = {d: bucketize(appts_by_day.get(d, []), resources, grid.slots) for d in days}

    lunch, lunch_warnings = lunch_flags(resources, grid.slots)
    within = {d: {s.key: within_business_hours(windows[d], s.hour, s.minute) for s in grid} for d in days}

    height = slot_height(cfg.display, len(grid), container_px, cfg.display.week_header_height_px)
    if now is None:
        now = now_in_timezone(cfg.timezone_name)
    elif now.tzinfo is not None:
        now = now.astimezone(zone)

    today = now.date() if now.date() in days else None
    offset = grid_indicator_offset(now, grid, height) if today is not None else None

    return WeekView(
        days=days,
        windows=windows,
        grid=grid,
        resources=resources,
        buckets=buckets,
        lunch=lunch,
        within_hours=within,
        slot_height_px=height,
        today=today,
        indicator_offset_px=offset,
        warnings=collect_window_warnings(windows) + lunch_warnings,
    )
