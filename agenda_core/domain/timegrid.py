# agenda_core/domain/timegrid.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

SLOT_MINUTES = 15


@dataclass(frozen=True, order=True)
class TimeSlot:
    """15分刻みの1コマ。key="HH:MM"（ゼロ埋め、辞書順=時刻順）"""
    hour: int
    minute: int

    @property
    def key(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    @property
    def minutes(self) -> int:
        return self.hour * 60 + self.minute


def build_grid(start_hour: int, end_hour: int) -> List[TimeSlot]:
    """start_hour:00（含む）〜end_hour:00（含まない）を15分刻みで並べる。範囲不正なら空。"""
    if start_hour >= end_hour or start_hour < 0 or end_hour > 24:
        return []
    return [
        TimeSlot(hour=h, minute=m)
        for h in range(start_hour, end_hour)
        for m in range(0, 60, SLOT_MINUTES)
    ]


def slot_key(hour: int, minute: int) -> str:
    m = (minute // SLOT_MINUTES) * SLOT_MINUTES
    return f"{hour:02d}:{m:02d}"


def slot_key_from_datetime(dt: datetime) -> str:
    return slot_key(dt.hour, dt.minute)


def union_bounds(
    windows: Iterable[Optional[Tuple[int, int]]],
    fallback_opening: int,
    fallback_closing: int,
) -> Tuple[int, int]:
    """
    週表示用：表示日すべての (開店時, 閉店時) の和集合。
    休業日(None)は無視。既定値から出発するので、全日休業なら既定値のまま。
    """
    lo, hi = fallback_opening, fallback_closing
    for w in windows:
        if w is None:
            continue
        lo = min(lo, w[0])
        hi = max(hi, w[1])
    return lo, hi


class TimeGrid:
    """build_grid の結果を包む。1回の描画で使い捨て。"""

    def __init__(self, slots: List[TimeSlot]):
        self._slots: Tuple[TimeSlot, ...] = tuple(slots)
        self._index: Dict[str, int] = {s.key: i for i, s in enumerate(self._slots)}

    @classmethod
    def between(cls, start_hour: int, end_hour: int) -> "TimeGrid":
        return cls(build_grid(start_hour, end_hour))

    @property
    def slots(self) -> Tuple[TimeSlot, ...]:
        return self._slots

    @property
    def keys(self) -> List[str]:
        return [s.key for s in self._slots]

    @property
    def is_empty(self) -> bool:
        return not self._slots

    @property
    def first_minutes(self) -> Optional[int]:
        return self._slots[0].minutes if self._slots else None

    @property
    def end_minutes(self) -> Optional[int]:
        """最終コマの終わり（排他）"""
        return self._slots[-1].minutes + SLOT_MINUTES if self._slots else None

    def index_of(self, key: str) -> Optional[int]:
        return self._index.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[TimeSlot]:
        return iter(self._slots)
