# agenda_core/validation/validator.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Set, Tuple

from agenda_core.domain.models import AgendaSnapshot


@dataclass(frozen=True)
class ValidationError(Exception):
    message: str


@dataclass(frozen=True)
class ValidationWarning:
    """設定ミス（時刻文字列不正、閉店<=開店 など）。描画は止めずに呼び出し側へ通知する。"""
    message: str
    source: str = ""


def parse_hhmm(text: str) -> Tuple[int, int]:
    """
    "HH:MM" / "HH:MM:SS" / "HH" を (hour, minute) にする。
    分が無い場合は0。時が数値でない、範囲外なら ValueError。
    """
    if text is None:
        raise ValueError("time string is None")
    parts = str(text).strip().split(":")
    if not parts or not parts[0].strip():
        raise ValueError(f"empty time string: {text!r}")
    hh = int(parts[0])
    mm = int(parts[1]) if len(parts) > 1 and parts[1].strip() else 0
    if not (0 <= hh <= 24) or not (0 <= mm < 60) or (hh == 24 and mm != 0):
        raise ValueError(f"time out of range: {text!r}")
    return hh, mm


def hhmm_to_minutes(text: str) -> int:
    hh, mm = parse_hhmm(text)
    return hh * 60 + mm


def parse_cli_date(text: str) -> date:
    try:
        return datetime.strptime(text.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"日付の形式が不正です（YYYY-MM-DD）: {text}")


def validate_snapshot(snapshot: AgendaSnapshot) -> List[ValidationWarning]:
    """描画前の整合性チェック。致命的でないものは警告で返す。"""
    warnings: List[ValidationWarning] = []

    # 担当者IDの重複
    seen: Set[str] = set()
    for r in snapshot.resources:
        if r.id in seen:
            warnings.append(ValidationWarning(f"担当者IDが重複しています: {r.id}", source="resources"))
        seen.add(r.id)

    # 昼休み設定
    for r in snapshot.resources:
        lb = r.lunch_break
        if lb is None or not lb.enabled:
            continue
        try:
            start = hhmm_to_minutes(lb.start)
            end = hhmm_to_minutes(lb.end)
        except ValueError:
            warnings.append(ValidationWarning(
                f"昼休みの時刻が不正です: {r.name} ({lb.start}-{lb.end})", source="lunch_break"
            ))
            continue
        if end <= start:
            warnings.append(ValidationWarning(
                f"昼休みの終了が開始以前です: {r.name} ({lb.start}-{lb.end})", source="lunch_break"
            ))

    # 営業時間ルール
    for rule in snapshot.business_hours:
        if rule.is_closed:
            continue
        label = rule.specific_date.isoformat() if rule.specific_date else f"weekday={rule.day_of_week}"
        try:
            opening = hhmm_to_minutes(rule.opening)
            closing = hhmm_to_minutes(rule.closing)
        except ValueError:
            warnings.append(ValidationWarning(
                f"営業時間の時刻が不正です: {label} ({rule.opening}-{rule.closing})", source="business_hours"
            ))
            continue
        if closing <= opening:
            warnings.append(ValidationWarning(
                f"閉店時刻が開店時刻以前です（休業扱い）: {label} ({rule.opening}-{rule.closing})",
                source="business_hours",
            ))

    # 祝日の重複
    holiday_days: Dict[date, int] = {}
    for h in snapshot.holidays:
        holiday_days[h.day] = holiday_days.get(h.day, 0) + 1
    for d, cnt in holiday_days.items():
        if cnt >= 2:
            warnings.append(ValidationWarning(f"同じ日付の祝日が複数あります: {d.isoformat()}", source="holidays"))

    # 担当者マスタに無い予約（ビューからは除外されるだけ）
    for a in snapshot.appointments:
        if a.resource_id is not None and a.resource_id not in seen:
            warnings.append(ValidationWarning(
                f"予約 {a.id} の担当者IDがマスタにありません: {a.resource_id}", source="appointments"
            ))

    return warnings
