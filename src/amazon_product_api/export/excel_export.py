from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)

PRODUCTS_SHEET = "Products"
DISCOUNTED_SHEET = "Discounted"


@dataclass(frozen=True)
class ExcelExportResult:
    path: Path
    total_rows: int
    discounted_rows: int


def discounted_rows(df: pd.DataFrame) -> pd.DataFrame:
    """Rows with a discount, highest percentage first."""
    if "discount_percentage" not in df.columns or df.empty:
        return df.iloc[0:0].copy()

    pct = pd.to_numeric(df["discount_percentage"], errors="coerce")
    out = df[pct.notna() & (pct > 0)].copy()
    out["_sort_key"] = pct[out.index]
    return out.sort_values("_sort_key", ascending=False).drop(columns="_sort_key")


def export_products_to_excel(
    df: pd.DataFrame,
    *,
    output_path: Optional[Path] = None,
    base_filename: str = "amazon_products",
) -> ExcelExportResult:
    """
    Export a flat-record DataFrame to Excel, under `data/` by default.

    - Sheet "Products": every row
    - Sheet "Discounted": rows with discount_percentage > 0
    """
    if output_path is None:
        data_dir = Path("data")
        data_dir.mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = data_dir / f"{base_filename}_{ts}.xlsx"
    else:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

    df_out = df.copy()
    if "asin" in df_out.columns:
        df_out["asin"] = df_out["asin"].astype(str)
    discounted = discounted_rows(df_out)

    with pd.ExcelWriter(output_path, engine="xlsxwriter") as writer:
        df_out.to_excel(writer, index=False, sheet_name=PRODUCTS_SHEET)
        discounted.to_excel(writer, index=False, sheet_name=DISCOUNTED_SHEET)

        workbook = writer.book
        header_fmt = workbook.add_format({"bold": True, "bg_color": "#E6E6E6", "border": 1})

        def _format_sheet(sheet_name: str, frame: pd.DataFrame) -> None:
            ws = writer.sheets[sheet_name]
            ws.freeze_panes(1, 0)
            ws.autofilter(0, 0, max(0, len(frame)), max(0, len(frame.columns) - 1))

            sample = frame.head(250)
            for col_idx, col in enumerate(frame.columns):
                ws.write(0, col_idx, col, header_fmt)
                max_len = max([len(str(col))] + [len(str(x)) for x in sample[col].tolist()])
                ws.set_column(col_idx, col_idx, min(max(10, max_len + 2), 60))

        _format_sheet(PRODUCTS_SHEET, df_out)
        _format_sheet(DISCOUNTED_SHEET, discounted)

    logger.info(f"Exported {len(df_out)} product(s) to {output_path} ({len(discounted)} discounted)")
    return ExcelExportResult(path=output_path, total_rows=int(len(df_out)), discounted_rows=int(len(discounted)))
