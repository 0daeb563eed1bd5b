# agenda_core/domain/business_hours.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from agenda_core.domain.models import BusinessHourRule, Holiday, OpeningHours
from agenda_core.validation.validator import ValidationWarning, hhmm_to_minutes

logger = logging.getLogger(__name__)


def sunday_based_weekday(d: date) -> int:
    """0=日曜 … 6=土曜（営業時間ルールの曜日番号）"""
    return (d.weekday() + 1) % 7


@dataclass(frozen=True)
class DayWindow:
    """ある日付の営業状態。1回の描画中は不変。"""
    day: date
    is_open: bool
    hours: Optional[OpeningHours] = None
    holiday: Optional[Holiday] = None
    warnings: Tuple[ValidationWarning, ...] = ()

    @property
    def opening_minutes(self) -> Optional[int]:
        return hhmm_to_minutes(self.hours.opening) if self.hours else None

    @property
    def closing_minutes(self) -> Optional[int]:
        return hhmm_to_minutes(self.hours.closing) if self.hours else None

    def hour_bounds(self) -> Optional[Tuple[int, int]]:
        """グリッド用の (開始時, 終了時)。閉店が半端な分なら次の正時まで含める。"""
        if not self.is_open or self.hours is None:
            return None
        opening = self.opening_minutes
        closing = self.closing_minutes
        return opening // 60, -(-closing // 60)

    @property
    def closed_label(self) -> Optional[str]:
        if self.holiday is not None:
            return f"Fechado - {self.holiday.name}"
        if not self.is_open:
            return "Fechado"
        return None


def within_business_hours(window: DayWindow, hour: int, minute: int) -> bool:
    """コアの開始時刻が [開店, 閉店) に入るか"""
    if not window.is_open or window.hours is None:
        return False
    slot_min = hour * 60 + minute
    return window.opening_minutes <= slot_min < window.closing_minutes


class BusinessCalendar:
    """営業時間ルール＋祝日から、日付ごとの営業状態を判定する。"""

    def __init__(self, rules: Iterable[BusinessHourRule], holidays: Iterable[Holiday]):
        self._weekday_rules: Dict[int, BusinessHourRule] = {}
        self._date_rules: Dict[date, BusinessHourRule] = {}
        for rule in rules:
            if rule.specific_date is not None:
                self._date_rules[rule.specific_date] = rule
            elif rule.day_of_week is not None:
                self._weekday_rules[rule.day_of_week] = rule
        self._holidays: Dict[date, Holiday] = {}
        for h in holidays:
            # 同日複数なら先勝ち（表示名は最初のもの）
            self._holidays.setdefault(h.day, h)

    def holiday_on(self, d: date) -> Optional[Holiday]:
        return self._holidays.get(d)

    def rule_for(self, d: date) -> Optional[BusinessHourRule]:
        rule = self._date_rules.get(d)
        if rule is not None:
            return rule
        return self._weekday_rules.get(sunday_based_weekday(d))

    def resolve(self, d: date) -> DayWindow:
        # 1) 祝日は曜日ルールより優先
        holiday = self.holiday_on(d)
        if holiday is not None:
            return DayWindow(day=d, is_open=False, holiday=holiday)

        # 2) 日付上書き → 曜日ルール
        rule = self.rule_for(d)
        if rule is None or rule.is_closed:
            return DayWindow(day=d, is_open=False)

        # 3) 時刻の妥当性（不正なら休業扱い＋警告）
        try:
            opening = hhmm_to_minutes(rule.opening)
            closing = hhmm_to_minutes(rule.closing)
        except ValueError:
            w = ValidationWarning(
                f"営業時間の時刻が不正なため休業扱いにします: {d.isoformat()} ({rule.opening}-{rule.closing})",
                source="business_hours",
            )
            logger.warning(w.message)
            return DayWindow(day=d, is_open=False, warnings=(w,))

        if closing <= opening:
            w = ValidationWarning(
                f"閉店時刻が開店時刻以前のため休業扱いにします: {d.isoformat()} ({rule.opening}-{rule.closing})",
                source="business_hours",
            )
            logger.warning(w.message)
            return DayWindow(day=d, is_open=False, warnings=(w,))

        hours = OpeningHours(
            opening=f"{opening // 60:02d}:{opening % 60:02d}",
            closing=f"{closing // 60:02d}:{closing % 60:02d}",
        )
        return DayWindow(day=d, is_open=True, hours=hours)

    def is_open(self, d: date) -> bool:
        return self.resolve(d).is_open

    def opening_hours(self, d: date) -> Optional[OpeningHours]:
        return self.resolve(d).hours


def resolve_windows(calendar: BusinessCalendar, days: Iterable[date]) -> Dict[date, DayWindow]:
    """1回の描画パス用の日付→営業状態マップ。呼び出し側で使い回し、描画後に捨てる。"""
    out: Dict[date, DayWindow] = {}
    for d in days:
        if d not in out:
            out[d] = calendar.resolve(d)
    return out


def collect_window_warnings(windows: Dict[date, DayWindow]) -> List[ValidationWarning]:
    out: List[ValidationWarning] = []
    for d in sorted(windows):
        out.extend(windows[d].warnings)
    return out
