# agenda_core/views/day_view.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from agenda_core.config import AppConfig, DEFAULT_CONFIG
from agenda_core.domain.business_hours import (
    BusinessCalendar,
    DayWindow,
    resolve_windows,
    within_business_hours,
)
from agenda_core.domain.lunch import lunch_flags
from agenda_core.domain.models import AgendaSnapshot, Appointment, Resource
from agenda_core.domain.now_indicator import (
    business_tz,
    grid_indicator_offset,
    is_today,
    now_in_timezone,
    slot_height,
)
from agenda_core.domain.timegrid import TimeGrid
from agenda_core.preprocessing.bucketize import (
    Buckets,
    active_resources,
    bucketize,
    by_day,
    to_business_time,
    visible_appointments,
)
from agenda_core.validation.validator import ValidationWarning


@dataclass
class DayView:
    day: date
    window: DayWindow
    grid: TimeGrid
    resources: List[Resource]
    buckets: Buckets
    lunch: Dict[str, Dict[str, bool]]          # resource_id -> key -> 昼休みか
    within_hours: Dict[str, bool]              # key -> 営業時間内か
    slot_height_px: int
    indicator_offset_px: Optional[float] = None
    warnings: List[ValidationWarning] = field(default_factory=list)

    @property
    def closed_label(self) -> Optional[str]:
        return self.window.closed_label

    def cell(self, resource_id: str, key: str) -> List[Appointment]:
        return self.buckets.get(resource_id, {}).get(key, [])

    def is_lunch(self, resource_id: str, key: str) -> bool:
        return self.lunch.get(resource_id, {}).get(key, False)

    def is_bookable(self, resource_id: str, key: str) -> bool:
        """新規予約を受けられるか（昼休みでも既存予約は表示される）"""
        return self.window.is_open and self.within_hours.get(key, False) and not self.is_lunch(resource_id, key)


def grid_bounds(cfg: AppConfig, bounds: Optional[Tuple[int, int]], business_hours_only: bool) -> Tuple[int, int]:
    if not business_hours_only:
        return cfg.grid.wide_start_hour, cfg.grid.wide_end_hour
    if bounds is None:
        return cfg.grid.fallback_opening_hour, cfg.grid.fallback_closing_hour
    return bounds


def build_day_view(
    snapshot: AgendaSnapshot,
    day: date,
    cfg: AppConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
    selected_resource_id: Optional[str] = None,
    container_px: Optional[int] = None,
    business_hours_only: Optional[bool] = None,
) -> DayView:
    if snapshot is None:
        raise TypeError("build_day_view() requires a snapshot")
    bho = cfg.business_hours_only if business_hours_only is None else business_hours_only

    calendar = BusinessCalendar(snapshot.business_hours, snapshot.holidays)
    windows = resolve_windows(calendar, [day])
    window = windows[day]

    grid = TimeGrid.between(*grid_bounds(cfg, window.hour_bounds(), bho))
    resources = active_resources(snapshot.resources, selected_resource_id)

    zone = business_tz(cfg.timezone_name)
    appts = to_business_time(visible_appointments(snapshot.appointments, cfg.hide_cancelled), zone)
    buckets = bucketize(by_day(appts).get(day, []), resources, grid.slots)

    lunch, lunch_warnings = lunch_flags(resources, grid.slots)
    within = {s.key: within_business_hours(window, s.hour, s.minute) for s in grid}

    height = slot_height(cfg.display, len(grid), container_px, cfg.display.day_header_height_px)
    if now is None:
        now = now_in_timezone(cfg.timezone_name)
    elif now.tzinfo is not None:
        now = now.astimezone(zone)
    offset = grid_indicator_offset(now, grid, height) if is_today(now, day) else None

    return DayView(
        day=day,
        window=window,
        grid=grid,
        resources=resources,
        buckets=buckets,
        lunch=lunch,
        within_hours=within,
        slot_height_px=height,
        indicator_offset_px=offset,
        warnings=list(window.warnings) + lunch_warnings,
    )
