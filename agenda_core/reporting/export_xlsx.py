# agenda_core/reporting/export_xlsx.py
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Optional

import pandas as pd


def _write_sheets(target, grid_df: pd.DataFrame, summary_df: pd.DataFrame, warnings_df: Optional[pd.DataFrame]) -> None:
    with pd.ExcelWriter(target, engine="openpyxl") as w:
        grid_df.to_excel(w, sheet_name="grid", index=False)
        summary_df.to_excel(w, sheet_name="days", index=False)
        if warnings_df is not None and not warnings_df.empty:
            warnings_df.to_excel(w, sheet_name="warnings", index=False)


def export_grid_xlsx(
    out_path: str,
    grid_df: pd.DataFrame,
    summary_df: pd.DataFrame,
    warnings_df: Optional[pd.DataFrame] = None,
) -> str:
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    _write_sheets(out_path, grid_df, summary_df, warnings_df)
    return out_path


def export_grid_bytes(
    grid_df: pd.DataFrame,
    summary_df: pd.DataFrame,
    warnings_df: Optional[pd.DataFrame] = None,
) -> bytes:
    """Streamlitダウンロード用にxlsxをメモリに書き出す。"""
    buf = BytesIO()
    _write_sheets(buf, grid_df, summary_df, warnings_df)
    return buf.getvalue()
