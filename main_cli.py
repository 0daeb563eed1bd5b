# main_cli.py
from __future__ import annotations

import argparse
import logging
from dataclasses import replace

from agenda_core.config import load_config_from_env
from agenda_core.io_layer.paths import InputPaths
from agenda_core.io_layer.xlsx_reader import XlsxReader
from agenda_core.reporting.export_xlsx import export_grid_xlsx
from agenda_core.reporting.report import (
    build_day_grid_table,
    build_day_summary,
    build_warning_table,
    build_week_grid_table,
)
from agenda_core.validation.validator import ValidationError, parse_cli_date, validate_snapshot
from agenda_core.views.day_view import build_day_view
from agenda_core.views.week_view import build_week_view


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Agenda: 日表示／週表示のコマ割りを出力する")
    p.add_argument("--input", required=True, help="スナップショット xlsx（resources/appointments/business_hours/holidays）")
    p.add_argument("--date", required=True, help="表示日（例: 2026-01-20）。週表示はその日を含む週")
    p.add_argument("--view", choices=["day", "week"], default="day")
    p.add_argument("--business-hours-only", action="store_true", help="営業時間の範囲だけ表示する")
    p.add_argument("--resource", default=None, help="担当者IDで絞り込む")
    p.add_argument("--timezone", default=None, help="店舗タイムゾーン（例: America/Sao_Paulo）")
    p.add_argument("--out", default="assets/output/agenda.xlsx", help="出力xlsx")
    return p.parse_args(argv)


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def main(argv=None):
    args = parse_args(argv)
    _setup_logging()

    cfg = load_config_from_env()
    if args.timezone:
        cfg = replace(cfg, timezone_name=args.timezone)
    if args.business_hours_only:
        cfg = replace(cfg, business_hours_only=True)

    try:
        day = parse_cli_date(args.date)
        paths = InputPaths.from_config(cfg, args.input, args.out)
        snapshot = XlsxReader(paths=paths).read_snapshot()
    except ValidationError as e:
        print(f"[ERROR] {e.message}")
        return 1

    snapshot_warnings = validate_snapshot(snapshot)
    for w in snapshot_warnings:
        print(f"[WARN] {w.message}")

    if args.view == "week":
        view = build_week_view(snapshot, day, cfg, selected_resource_id=args.resource)
        grid_df = build_week_grid_table(view)
    else:
        view = build_day_view(snapshot, day, cfg, selected_resource_id=args.resource)
        grid_df = build_day_grid_table(view)
        if view.closed_label:
            print(f"[INFO] {day.isoformat()}: {view.closed_label}")

    if view.grid.is_empty:
        print("[RESULT] 表示できるコマがありません")

    summary_df = build_day_summary(view)
    warnings_df = build_warning_table(snapshot_warnings + view.warnings)

    out_path = export_grid_xlsx(paths.out_file, grid_df, summary_df, warnings_df)
    print(f"[RESULT] OK: {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
