"""Excel export of the history view.

One sheet, one block per day: entry rows followed by a day-total row, and a
grand-total row at the bottom. Totals are written as values computed in
Python; no Excel formulas are relied upon.
"""

from __future__ import annotations

from pathlib import Path

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from time_tracker.models import History

SHEET_TITLE = "History"
TITLE_ROW = 1
HEADER_ROW = 3
DATA_START_ROW = 4
COLUMNS = ["Date", "Project", "Hours", "Description"]
COLUMN_WIDTHS = [14, 24, 10, 60]
HOURS_COL = 3

THIN_BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin'),
)

HEADER_FONT = Font(name='Calibri', size=11, bold=True)
DATA_FONT = Font(name='Calibri', size=11)
TITLE_FONT = Font(name='Calibri', size=12, bold=True)
TOTAL_FILL = PatternFill(start_color='F2F2F2', end_color='F2F2F2', fill_type='solid')
CENTER_ALIGN = Alignment(horizontal='center', vertical='center')
NUMBER_FORMAT = '#,##0.00'


def generate_history_workbook(history: History, output_path: str | Path) -> Path:
    """Write the grouped history to a fresh workbook and return its path."""
    output_path = Path(output_path)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.merge_cells(start_row=TITLE_ROW, start_column=1, end_row=TITLE_ROW, end_column=len(COLUMNS))
    title_cell = ws.cell(row=TITLE_ROW, column=1)
    if history.month_filter:
        title_cell.value = f"Time entries for {history.month_filter.label()}"
    else:
        title_cell.value = "Time entries"
    title_cell.font = TITLE_FONT
    title_cell.alignment = CENTER_ALIGN

    for col, (name, width) in enumerate(zip(COLUMNS, COLUMN_WIDTHS), start=1):
        cell = ws.cell(row=HEADER_ROW, column=col, value=name)
        cell.font = HEADER_FONT
        cell.border = THIN_BORDER
        cell.alignment = CENTER_ALIGN
        ws.column_dimensions[get_column_letter(col)].width = width

    row = DATA_START_ROW
    for bucket in history.buckets:
        for entry in bucket.entries:
            values = [
                bucket.date.isoformat(),
                entry.project.value,
                float(entry.hours),
                entry.description,
            ]
            for col, value in enumerate(values, start=1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.font = DATA_FONT
                cell.border = THIN_BORDER
            ws.cell(row=row, column=HOURS_COL).number_format = NUMBER_FORMAT
            row += 1

        _write_total_row(ws, row, f"Total {bucket.date.isoformat()}", float(bucket.total))
        row += 1

    _write_total_row(ws, row, "Grand total", float(history.grand_total))

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    return output_path


def _write_total_row(ws, row: int, label: str, total: float) -> None:
    for col in range(1, len(COLUMNS) + 1):
        cell = ws.cell(row=row, column=col)
        cell.font = HEADER_FONT
        cell.fill = TOTAL_FILL
        cell.border = THIN_BORDER
    ws.cell(row=row, column=1, value=label)
    hours_cell = ws.cell(row=row, column=HOURS_COL, value=total)
    hours_cell.number_format = NUMBER_FORMAT
