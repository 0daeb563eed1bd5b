# agenda_core/domain/lunch.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from agenda_core.domain.models import Resource
from agenda_core.domain.timegrid import TimeSlot
from agenda_core.validation.validator import ValidationWarning, hhmm_to_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LunchCheck:
    blocked: bool
    warning: Optional[ValidationWarning] = None


def _lunch_window(resource: Resource) -> Tuple[Optional[Tuple[int, int]], Optional[ValidationWarning]]:
    lb = resource.lunch_break
    if lb is None or not lb.enabled or not lb.start or not lb.end:
        return None, None
    try:
        return (hhmm_to_minutes(lb.start), hhmm_to_minutes(lb.end)), None
    except ValueError:
        # 設定ミスは「昼休みではない」として扱う（描画は止めない）
        return None, ValidationWarning(
            f"昼休みの時刻が不正なため無視します: {resource.name} ({lb.start}-{lb.end})",
            source="lunch_break",
        )


def classify_lunch_slot(resource: Resource, hour: int, minute: int) -> LunchCheck:
    window, warning = _lunch_window(resource)
    if window is None:
        return LunchCheck(blocked=False, warning=warning)
    slot_min = hour * 60 + minute
    # 半開区間：13:00終了なら13:00のコマはふさがない
    return LunchCheck(blocked=window[0] <= slot_min < window[1])


def is_lunch_slot(resource: Resource, hour: int, minute: int) -> bool:
    check = classify_lunch_slot(resource, hour, minute)
    if check.warning is not None:
        logger.warning(check.warning.message)
    return check.blocked


def lunch_flags(
    resources: Iterable[Resource],
    slots: Iterable[TimeSlot],
) -> Tuple[Dict[str, Dict[str, bool]], List[ValidationWarning]]:
    """担当者×コアの昼休みフラグ。設定ミスの警告は担当者ごとに1回だけ。"""
    slot_list = list(slots)
    flags: Dict[str, Dict[str, bool]] = {}
    warnings: List[ValidationWarning] = []
    for r in resources:
        window, warning = _lunch_window(r)
        if warning is not None:
            warnings.append(warning)
        if window is None:
            flags[r.id] = {s.key: False for s in slot_list}
            continue
        flags[r.id] = {s.key: window[0] <= s.minutes < window[1] for s in slot_list}
    return flags, warnings
