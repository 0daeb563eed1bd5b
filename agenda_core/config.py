# agenda_core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class GridConfig:
    """スロット刻みと表示窓（時単位）"""
    wide_start_hour: int = 7    # 営業時間に絞らない場合の固定窓 07:00〜
    wide_end_hour: int = 23     # 〜23:00（排他）
    fallback_opening_hour: int = 7    # 営業時間ルールが取れない日の既定値
    fallback_closing_hour: int = 21


@dataclass(frozen=True)
class DisplayConfig:
    default_slot_height_px: int = 28
    min_slot_height_px: int = 20
    day_header_height_px: int = 64
    week_header_height_px: int = 56
    indicator_tick_seconds: int = 60  # 現在時刻ラインの再計算間隔（呼び出し側のタイマー）


@dataclass(frozen=True)
class AppConfig:
    timezone_name: str = "America/Sao_Paulo"
    week_starts_on: int = 6  # datetime.weekday() 基準、6=日曜（pt-BRの週）
    business_hours_only: bool = False
    hide_cancelled: bool = True

    # スナップショットxlsxのシート名
    resources_sheet: str = "resources"
    appointments_sheet: str = "appointments"
    business_hours_sheet: str = "business_hours"
    holidays_sheet: str = "holidays"

    grid: GridConfig = field(default_factory=GridConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)


DEFAULT_CONFIG = AppConfig()


def _env_bool(raw: str) -> bool:
    return raw.strip().lower() not in {"0", "false", "no", ""}


def load_config_from_env(dotenv_path: Optional[str] = None, prefix: str = "AGENDA_") -> AppConfig:
    """環境変数（.env可）で DEFAULT_CONFIG を上書きする。既存の環境変数は.envで上書きしない。"""
    load_dotenv(dotenv_path=dotenv_path, override=False)

    cfg = DEFAULT_CONFIG

    tz_name = os.getenv(f"{prefix}TIMEZONE")
    if tz_name:
        cfg = replace(cfg, timezone_name=tz_name.strip())

    bho = os.getenv(f"{prefix}BUSINESS_HOURS_ONLY")
    if bho is not None:
        cfg = replace(cfg, business_hours_only=_env_bool(bho))

    hide = os.getenv(f"{prefix}HIDE_CANCELLED")
    if hide is not None:
        cfg = replace(cfg, hide_cancelled=_env_bool(hide))

    start = os.getenv(f"{prefix}WIDE_START_HOUR")
    end = os.getenv(f"{prefix}WIDE_END_HOUR")
    if start is not None or end is not None:
        try:
            grid = replace(
                cfg.grid,
                wide_start_hour=int(start) if start is not None else cfg.grid.wide_start_hour,
                wide_end_hour=int(end) if end is not None else cfg.grid.wide_end_hour,
            )
        except ValueError as e:
            raise RuntimeError(f"Invalid {prefix}WIDE_START_HOUR/{prefix}WIDE_END_HOUR: expected integer hours") from e
        if not (0 <= grid.wide_start_hour < grid.wide_end_hour <= 24):
            raise RuntimeError(f"{prefix}WIDE_START_HOUR must be < {prefix}WIDE_END_HOUR within 0..24")
        cfg = replace(cfg, grid=grid)

    tick = os.getenv(f"{prefix}INDICATOR_TICK_SECONDS")
    if tick is not None:
        try:
            tick_s = int(tick)
        except ValueError as e:
            raise RuntimeError(f"Invalid {prefix}INDICATOR_TICK_SECONDS value: {tick!r}") from e
        if tick_s < 1:
            raise RuntimeError(f"{prefix}INDICATOR_TICK_SECONDS must be >= 1")
        cfg = replace(cfg, display=replace(cfg.display, indicator_tick_seconds=tick_s))

    return cfg
