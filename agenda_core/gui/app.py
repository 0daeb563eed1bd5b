# agenda_core/gui/app.py
from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import streamlit as st

from agenda_core.config import load_config_from_env
from agenda_core.domain.now_indicator import now_in_timezone
from agenda_core.io_layer.paths import InputPaths
from agenda_core.io_layer.xlsx_reader import XlsxReader
from agenda_core.reporting.export_xlsx import export_grid_bytes
from agenda_core.reporting.report import (
    build_day_grid_table,
    build_day_summary,
    build_warning_table,
    build_week_grid_table,
)
from agenda_core.validation.validator import ValidationError, validate_snapshot
from agenda_core.views.day_view import build_day_view
from agenda_core.views.week_view import build_week_view


def main():
    cfg = load_config_from_env()

    st.title("Agenda")

    st.header("入力")
    snapshot_file = st.text_input("スナップショット xlsx").strip()
    tz_name = st.text_input("タイムゾーン", value=cfg.timezone_name).strip()
    cfg = replace(cfg, timezone_name=tz_name or cfg.timezone_name)

    now = now_in_timezone(cfg.timezone_name)
    day = st.date_input("日付", value=now.date())
    view_kind = st.radio("表示", ["Dia", "Semana"], horizontal=True)
    business_only = st.toggle("営業時間のみ", value=cfg.business_hours_only)
    resource_id = st.text_input("担当者ID（空欄=全員）").strip() or None

    if not snapshot_file:
        st.info("スナップショット xlsx のパスを入力してください。")
        st.stop()

    try:
        snapshot = XlsxReader(paths=InputPaths.from_config(cfg, snapshot_file)).read_snapshot()
    except ValidationError as e:
        st.error(e.message)
        st.stop()

    snapshot_warnings = validate_snapshot(snapshot)
    for w in snapshot_warnings:
        st.warning(w.message)

    # 現在時刻ラインの再計算はこの断片だけを定期的に再実行する（タイマーはStreamlit側が持つ）
    @st.fragment(run_every=timedelta(seconds=cfg.display.indicator_tick_seconds))
    def render_grid():
        current = now_in_timezone(cfg.timezone_name)
        if view_kind == "Semana":
            view = build_week_view(snapshot, day, cfg, now=current,
                                   selected_resource_id=resource_id, business_hours_only=business_only)
            grid_df = build_week_grid_table(view)
        else:
            view = build_day_view(snapshot, day, cfg, now=current,
                                  selected_resource_id=resource_id, business_hours_only=business_only)
            grid_df = build_day_grid_table(view)
            if view.closed_label:
                st.warning(view.closed_label)

        for w in view.warnings:
            st.warning(w.message)

        if view.grid.is_empty:
            st.info("表示できるコマがありません。")
            return

        if view.indicator_offset_px is not None:
            st.caption(f"Agora {current.strftime('%H:%M')} (offset {view.indicator_offset_px:.0f}px)")

        summary_df = build_day_summary(view)
        st.dataframe(grid_df, use_container_width=True, hide_index=True)
        st.dataframe(summary_df, use_container_width=True, hide_index=True)

        st.download_button(
            label="xlsxをダウンロード",
            data=export_grid_bytes(grid_df, summary_df, build_warning_table(snapshot_warnings + view.warnings)),
            file_name="agenda.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

    render_grid()


if __name__ == "__main__":
    main()
