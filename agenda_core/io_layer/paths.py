# agenda_core/io_layer/paths.py
from dataclasses import dataclass
from typing import Optional

from agenda_core.config import AppConfig


@dataclass(frozen=True)
class InputPaths:
    """
    スナップショットxlsx（1ファイル・4シート）
    resources: 担当者（昼休み設定含む）
    appointments: 予約
    business_hours: 曜日別／日付別の営業時間
    holidays: 祝日（任意）
    """
    snapshot_file: str
    out_file: Optional[str] = None

    # シート名（運用で変えるならここだけ）
    resources_sheet: str = "resources"
    appointments_sheet: str = "appointments"
    business_hours_sheet: str = "business_hours"
    holidays_sheet: str = "holidays"

    @classmethod
    def from_config(cls, cfg: AppConfig, snapshot_file: str, out_file: Optional[str] = None) -> "InputPaths":
        return cls(
            snapshot_file=snapshot_file,
            out_file=out_file,
            resources_sheet=cfg.resources_sheet,
            appointments_sheet=cfg.appointments_sheet,
            business_hours_sheet=cfg.business_hours_sheet,
            holidays_sheet=cfg.holidays_sheet,
        )
