from collections import Counter
from datetime import datetime
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from task_tracker.exports.formatting import (
    TIMESTAMP_FORMAT,
    clean_description,
    export_filename,
    format_day,
)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

TASK_COLUMNS = [
    ("#", 6),
    ("Date", 15),
    ("Category", 15),
    ("Description", 80),
    ("Created At", 20),
    ("Last Updated", 20),
]
SUMMARY_COLUMNS = [("Metric", 25), ("Value", 15)]


def _write_sheet(ws, columns, rows):
    ws.append([name for name, _ in columns])
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for idx, (_, width) in enumerate(columns, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width
    for row in rows:
        ws.append(row)


def task_rows(tasks):
    for index, task in enumerate(tasks, start=1):
        yield [
            index,
            format_day(task),
            task.category,
            clean_description(task.description),
            task.created_at.strftime(TIMESTAMP_FORMAT),
            task.updated_at.strftime(TIMESTAMP_FORMAT),
        ]


def summary_rows(tasks):
    """Totals, date range and per-category counts.

    ``tasks`` is expected newest first, so the range runs from the last
    entry to the first.
    """
    counts = Counter(task.category for task in tasks)
    date_range = f"{format_day(tasks[-1])} - {format_day(tasks[0])}"
    rows = [
        ["Total Tasks", len(tasks)],
        ["Categories", len(counts)],
        ["Date Range", date_range],
        [None, None],
        ["Tasks by Category", None],
    ]
    rows.extend([category, count] for category, count in counts.items())
    return rows


def build_workbook(tasks) -> Workbook:
    if not tasks:
        raise ValueError("No tasks to export")
    wb = Workbook()
    ws = wb.active
    ws.title = "Tasks"
    _write_sheet(ws, TASK_COLUMNS, task_rows(tasks))
    _write_sheet(wb.create_sheet("Summary"), SUMMARY_COLUMNS, summary_rows(tasks))
    return wb


def export_excel(tasks, now: datetime) -> tuple[bytes, str]:
    """Render ``tasks`` as an XLSX workbook; returns ``(content, filename)``."""
    buf = BytesIO()
    build_workbook(tasks).save(buf)
    return buf.getvalue(), export_filename(now, "xlsx")
