# agenda_core/domain/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


@dataclass(frozen=True)
class LunchBreak:
    enabled: bool
    start: Optional[str]  # "HH:MM"
    end: Optional[str]


@dataclass(frozen=True)
class Resource:
    """予約を割り当てる担当者（バーバー／チェア）"""
    id: str
    name: str
    calendar_color: Optional[str] = None
    is_active: bool = True
    lunch_break: Optional[LunchBreak] = None


@dataclass(frozen=True)
class Appointment:
    """外部から渡される予約。コアは読むだけ。"""
    id: str
    start_time: datetime
    end_time: datetime
    resource_id: Optional[str]
    status: str = "scheduled"


@dataclass(frozen=True)
class BusinessHourRule:
    """
    曜日ごとの営業時間。specific_date があればその日付だけの上書き。
    day_of_week は 0=日曜 … 6=土曜。
    """
    day_of_week: Optional[int]
    opening: Optional[str]
    closing: Optional[str]
    is_closed: bool = False
    specific_date: Optional[date] = None


@dataclass(frozen=True)
class Holiday:
    day: date
    name: str


@dataclass(frozen=True)
class OpeningHours:
    opening: str  # "HH:MM"
    closing: str

    @property
    def opening_hour(self) -> int:
        return int(self.opening.split(":")[0])

    @property
    def closing_hour(self) -> int:
        return int(self.closing.split(":")[0])


@dataclass
class AgendaSnapshot:
    """1回の描画で使う入力一式（外部データソースから毎回取り直す）"""
    resources: List[Resource] = field(default_factory=list)
    appointments: List[Appointment] = field(default_factory=list)
    business_hours: List[BusinessHourRule] = field(default_factory=list)
    holidays: List[Holiday] = field(default_factory=list)
