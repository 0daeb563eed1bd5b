# agenda_core/preprocessing/bucketize.py
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence

from agenda_core.domain.models import Appointment, Resource
from agenda_core.domain.timegrid import TimeSlot, slot_key_from_datetime

logger = logging.getLogger(__name__)

Buckets = Dict[str, Dict[str, List[Appointment]]]

CANCELLED_STATUSES = frozenset({"cancelled"})


def bucketize(
    appointments: Sequence[Appointment],
    resources: Sequence[Resource],
    slots: Sequence[TimeSlot],
) -> Buckets:
    """
    担当者→コマkey→予約リスト。
    全(担当者, コマ)を空リストで初期化し、予約は直接キー参照で入れる（O(R×S + A)）。
    担当者なし・担当者がビューに居ない・表示窓外の予約は落とす（データ自体は残る）。
    バケット内は入力順のまま。
    """
    if appointments is None or resources is None or slots is None:
        raise TypeError("bucketize() requires appointments, resources and slots (got None)")

    out: Buckets = {}
    for r in resources:
        out[r.id] = {s.key: [] for s in slots}

    dropped = 0
    for apt in appointments:
        if apt.resource_id is None:
            dropped += 1
            continue
        by_slot = out.get(apt.resource_id)
        if by_slot is None:
            dropped += 1
            continue
        bucket = by_slot.get(slot_key_from_datetime(apt.start_time))
        if bucket is None:
            dropped += 1
            continue
        bucket.append(apt)

    if dropped:
        logger.debug("bucketize: %d appointment(s) outside the visible grid/resources", dropped)
    return out


def dropped_appointments(appointments: Iterable[Appointment], buckets: Buckets) -> List[Appointment]:
    """バケットに入らなかった予約（診断用）"""
    placed = {id(a) for by_slot in buckets.values() for lst in by_slot.values() for a in lst}
    return [a for a in appointments if id(a) not in placed]


def visible_appointments(appointments: Iterable[Appointment], hide_cancelled: bool = True) -> List[Appointment]:
    if not hide_cancelled:
        return list(appointments)
    return [a for a in appointments if a.status not in CANCELLED_STATUSES]


def to_business_time(appointments: Iterable[Appointment], zone: tzinfo) -> List[Appointment]:
    """aware な開始/終了を店舗タイムゾーンの壁時計に合わせる。naive はそのまま（既に店舗時刻とみなす）。"""
    out: List[Appointment] = []
    for a in appointments:
        if a.start_time.tzinfo is None:
            out.append(a)
            continue
        out.append(replace(
            a,
            start_time=a.start_time.astimezone(zone),
            end_time=a.end_time.astimezone(zone) if a.end_time.tzinfo is not None else a.end_time,
        ))
    return out


def by_day(appointments: Iterable[Appointment]) -> Dict[date, List[Appointment]]:
    out: Dict[date, List[Appointment]] = {}
    for a in appointments:
        out.setdefault(a.start_time.date(), []).append(a)
    return out


def active_resources(resources: Iterable[Resource], selected_resource_id: Optional[str] = None) -> List[Resource]:
    """有効な担当者。selected_resource_id 指定時はその1名だけ。"""
    active = [r for r in resources if r.is_active]
    if selected_resource_id is None:
        return active
    return [r for r in active if r.id == selected_resource_id]
