"""Utilities for exporting tailoring documents to Excel workbooks."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from openpyxl import Workbook  # type: ignore[import-untyped]
from openpyxl.styles import Alignment  # type: ignore[import-untyped]
from openpyxl.utils import get_column_letter  # type: ignore[import-untyped]
from openpyxl.worksheet.table import (  # type: ignore[import-untyped]
    Table,
    TableStyleInfo,
)

from xtailor.parser import RuleItem, TailoringDocument

Sheets = Dict[str, List[Dict[str, Any]]]

# Columns of the item sheet, in display order.
ITEM_COLUMNS = ["kind", "idref", "selected", "severity", "value", "comment"]


def _flatten(doc: TailoringDocument) -> Sheets:
    """Flatten a document into tabular sheet data.

    Args:
        doc: Parsed tailoring document.

    Returns:
        Mapping of sheet names to row dictionaries.
    """

    profile_row = {
        "profile_id": doc.profile_id,
        "profile_extends": doc.profile_extends,
        "profile_title": doc.profile_title,
        "profile_description": doc.profile_description,
        "benchmark_href": doc.benchmark_href,
        "version_text": doc.version_text,
    }

    # Rules and variables share one sheet; inapplicable cells stay empty.
    item_rows: List[Dict[str, Any]] = []
    for item in doc.items:
        row: Dict[str, Any] = dict.fromkeys(ITEM_COLUMNS)
        row.update(kind=item.kind, idref=item.idref, comment=item.comment)
        if isinstance(item, RuleItem):
            row.update(selected=item.selected, severity=item.severity)
        else:
            row["value"] = item.value
        item_rows.append(row)

    sheets: Sheets = {"Profile": [profile_row], "Items": item_rows}

    # Drop sheets for which no data was recorded.
    return {name: rows for name, rows in sheets.items() if rows}


def write_workbook(doc: TailoringDocument, path: Path) -> None:
    """Write a tailoring document into an Excel workbook.

    Args:
        doc: Parsed tailoring document.
        path: Destination file path for the workbook.
    """

    data = _flatten(doc)

    workbook = Workbook()

    # Remove the default sheet created by openpyxl when present.
    default_sheet = workbook.active
    if default_sheet is not None:
        workbook.remove(default_sheet)

    for sheet_name, rows in data.items():
        ws = workbook.create_sheet(title=sheet_name)

        # Write header row based on dictionary keys.
        headers = list(rows[0].keys())
        ws.append(headers)

        # Columns holding long text get wrapped and widened.
        long_text_columns: set[int] = set()
        for row in rows:
            values = [row.get(header) for header in headers]
            for idx, cell_value in enumerate(values):
                if isinstance(cell_value, str) and len(cell_value) > 50:
                    long_text_columns.add(idx)
            ws.append(values)

        for col_idx in long_text_columns:
            for col_cells in ws.iter_cols(
                min_col=col_idx + 1,
                max_col=col_idx + 1,
                min_row=1,
                max_row=ws.max_row,
            ):
                for cell in col_cells:
                    cell.alignment = Alignment(wrapText=True)

        for idx in range(len(headers)):
            col_letter = get_column_letter(idx + 1)
            width = 80 if idx in long_text_columns else 14
            ws.column_dimensions[col_letter].width = width

        # Determine table range covering the header and all rows.
        end_column = get_column_letter(len(headers))
        end_row = len(rows) + 1
        table = Table(displayName=sheet_name, ref=f"A1:{end_column}{end_row}")

        # Apply a simple table style with row stripes for readability.
        style = TableStyleInfo(name="TableStyleMedium9", showRowStripes=True)
        table.tableStyleInfo = style

        ws.add_table(table)

    workbook.save(path)
