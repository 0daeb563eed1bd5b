# agenda_core/domain/now_indicator.py
from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Callable, Optional

from dateutil import tz

from agenda_core.config import DisplayConfig
from agenda_core.domain.timegrid import SLOT_MINUTES, TimeGrid, TimeSlot

logger = logging.getLogger(__name__)


def business_tz(timezone_name: Optional[str]) -> tzinfo:
    """店舗のタイムゾーン。不明ならUTC。"""
    zone = tz.gettz(timezone_name) if timezone_name else None
    if zone is None:
        logger.warning("Unknown timezone %r, falling back to UTC", timezone_name)
        return tz.UTC
    return zone


def now_in_timezone(timezone_name: Optional[str], clock: Optional[Callable[[], datetime]] = None) -> datetime:
    """
    店舗タイムゾーンでの現在時刻。
    clock はテスト用（aware datetime を返すこと）。
    """
    zone = business_tz(timezone_name)
    if clock is None:
        return datetime.now(tz=zone)
    return clock().astimezone(zone)


def is_today(now: datetime, day: date) -> bool:
    return now.date() == day


def indicator_offset(
    now: datetime,
    first_slot: TimeSlot,
    slot_height_px: float,
    last_slot: Optional[TimeSlot] = None,
) -> Optional[float]:
    """
    現在時刻ラインのY座標(px)。表示窓 [先頭コマ, 最終コマ+15分) の外なら None。
    コマ単位に丸めず連続値を返す（1分ごとに滑らかに動かす）。
    last_slot を省略した場合は上限なし。
    """
    current = now.hour * 60 + now.minute
    first = first_slot.minutes
    if current < first:
        return None
    if last_slot is not None and current >= last_slot.minutes + SLOT_MINUTES:
        return None
    return ((current - first) / SLOT_MINUTES) * slot_height_px


def grid_indicator_offset(now: datetime, grid: TimeGrid, slot_height_px: float) -> Optional[float]:
    if grid.is_empty:
        return None
    return indicator_offset(now, grid.slots[0], slot_height_px, last_slot=grid.slots[-1])


def slot_height(display: DisplayConfig, slot_count: int, container_px: Optional[int] = None, header_px: int = 0) -> int:
    """コンパクト表示ならコンテナ高さに収まる高さ（下限あり）、通常は既定値。"""
    if container_px is None or slot_count <= 0:
        return display.default_slot_height_px
    return max(display.min_slot_height_px, (container_px - header_px) // slot_count)
