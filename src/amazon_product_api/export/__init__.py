"""Tabular export of product records (pandas DataFrame, Excel)."""

from .excel_export import ExcelExportResult, export_products_to_excel
from .flat_export import (
    FlatProductRecord,
    dataframe_to_records,
    from_flat_record,
    products_to_dataframe,
    to_flat_record,
)

__all__ = [
    "ExcelExportResult",
    "export_products_to_excel",
    "FlatProductRecord",
    "dataframe_to_records",
    "from_flat_record",
    "products_to_dataframe",
    "to_flat_record",
]
