# tests/test_exports.py

from __future__ import annotations

from datetime import date, datetime
from io import BytesIO

import pytest
from openpyxl import load_workbook

from task_tracker.exports.excel_export import build_workbook, export_excel
from task_tracker.exports.formatting import (
    clean_description,
    export_filename,
    long_date,
    long_timestamp,
    ordinal,
)
from task_tracker.exports.pdf_export import (
    FONT,
    TaskPdfRenderer,
    group_by_date,
    stringWidth,
    wrap_text,
)
from task_tracker.models.task_model import Task

NOW = datetime(2026, 10, 18, 14, 5, 9)


def _task(description="Task", date="2026-10-18", category="Work", created=NOW) -> Task:
    return Task(
        id=None,
        description=description,
        date=date,
        category=category,
        created_at=created,
        updated_at=created,
    )


def _summary(ws) -> dict:
    rows = list(ws.iter_rows(values_only=True))
    head = next(i for i, row in enumerate(rows) if row[0] == "Tasks by Category")
    return {
        "metrics": {row[0]: row[1] for row in rows[1:head] if row[0]},
        "categories": {row[0]: row[1] for row in rows[head + 1:]},
    }


@pytest.mark.parametrize("endpoint", ["excel", "pdf"])
def test_export_with_no_tasks_is_404(client, endpoint) -> None:
    resp = client.get(f"/api/tasks/export/{endpoint}")

    assert resp.status_code == 404
    assert resp.get_json() == {"error": "No tasks to export"}


def test_excel_export_rows_and_summary(client, make_task) -> None:
    make_task(description="• Ran 5k\n• Stretched", date="2026-10-17", category="Health")
    make_task(description="Paid rent", date="2026-10-18", category="Finance")
    make_task(description="Sprint review", date="2026-10-18", category="Work")
    make_task(description="Code review", date="2026-09-30", category="Work")

    resp = client.get("/api/tasks/export/excel")

    assert resp.status_code == 200
    assert resp.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    disposition = resp.headers["Content-Disposition"]
    assert disposition.startswith("attachment;")
    assert "task-tracker-" in disposition and ".xlsx" in disposition

    wb = load_workbook(BytesIO(resp.data))
    assert wb.sheetnames == ["Tasks", "Summary"]

    tasks = wb["Tasks"]
    rows = list(tasks.iter_rows(values_only=True))
    assert tasks.max_row == 4 + 1
    assert rows[0] == ("#", "Date", "Category", "Description", "Created At", "Last Updated")
    assert [r[0] for r in rows[1:]] == [1, 2, 3, 4]
    assert rows[1][1] == "Oct 18, 2026"
    assert rows[1][3] == "Sprint review"
    assert rows[3][3] == "Ran 5k Stretched"
    assert rows[4][1] == "Sep 30, 2026"
    assert tasks.column_dimensions["D"].width == 80

    summary = _summary(wb["Summary"])
    assert summary["metrics"]["Total Tasks"] == 4
    assert summary["metrics"]["Categories"] == 3
    assert summary["metrics"]["Date Range"] == "Sep 30, 2026 - Oct 18, 2026"
    assert summary["categories"] == {"Work": 2, "Finance": 1, "Health": 1}
    assert sum(summary["categories"].values()) == 4


def test_pdf_export_response(client, make_task) -> None:
    make_task(description="Plan holiday", date="2026-10-18", category="Personal")

    resp = client.get("/api/tasks/export/pdf")

    assert resp.status_code == 200
    assert resp.mimetype == "application/pdf"
    assert resp.data.startswith(b"%PDF")
    assert ".pdf" in resp.headers["Content-Disposition"]


def test_export_generation_failure_is_500(client, make_task, monkeypatch) -> None:
    make_task()

    def boom(tasks, now):
        raise RuntimeError("renderer broke")

    monkeypatch.setattr("task_tracker.routes.export_routes.export_pdf", boom)

    resp = client.get("/api/tasks/export/pdf")

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to generate PDF file"}


def test_export_excel_filename_uses_generation_time() -> None:
    content, filename = export_excel([_task()], NOW)

    assert filename == "task-tracker-2026-10-18-140509.xlsx"
    assert content[:2] == b"PK"
    assert export_filename(NOW, "pdf") == "task-tracker-2026-10-18-140509.pdf"


def test_build_workbook_requires_tasks() -> None:
    with pytest.raises(ValueError):
        build_workbook([])


def test_clean_description() -> None:
    assert clean_description("• First\n  • Second\t step ") == "First Second step"
    assert clean_description("") == ""


def test_wrap_text_respects_width() -> None:
    text = " ".join(["word"] * 60)
    max_width = 120

    lines = wrap_text(text, max_width, FONT, 11)

    assert len(lines) > 1
    assert " ".join(lines) == text
    assert all(stringWidth(line, FONT, 11) <= max_width for line in lines)


def test_wrap_text_keeps_overlong_word_on_its_own_line() -> None:
    long_word = "x" * 200

    assert wrap_text(f"a {long_word} b", 50, FONT, 11) == ["a", long_word, "b"]


def test_group_by_date_newest_first() -> None:
    tasks = [_task(date="2026-10-01"), _task(date="2026-10-18"), _task(date="2026-10-01")]

    groups = group_by_date(tasks)

    assert list(groups) == ["2026-10-18", "2026-10-01"]
    assert len(groups["2026-10-01"]) == 2


def test_pdf_paginates_long_lists() -> None:
    tasks = [_task(description="Long description " * 20, date=f"2026-10-{d:02d}") for d in range(1, 29)]

    one = TaskPdfRenderer(tasks[:1], NOW)
    many = TaskPdfRenderer(tasks, NOW)
    one_pdf = one.render()
    many_pdf = many.render()

    assert one_pdf.startswith(b"%PDF")
    assert many_pdf.startswith(b"%PDF")
    assert one.page_count == 1
    assert many.page_count > 3


def test_pdf_renderer_requires_tasks() -> None:
    with pytest.raises(ValueError):
        TaskPdfRenderer([], NOW).render()


def test_pdf_stamps_every_page_and_ends_with_total() -> None:
    tasks = [_task(description="Long description " * 20, date=f"2026-10-{d:02d}") for d in range(1, 29)]
    renderer = TaskPdfRenderer(tasks, NOW, compress=False)

    raw = renderer.render()

    total = renderer.page_count
    assert total > 3
    stamps = [raw.index(f"(Page {i} of {total})".encode()) for i in range(1, total + 1)]
    assert stamps == sorted(stamps)
    assert f"(Page {total + 1} of".encode() not in raw
    footer = raw.index(b"(Total Tasks: 28)")
    assert stamps[-2] < footer < stamps[-1]
    assert b"(Generated on October 18th, 2026 2:05 PM)" in raw
    assert b"(October 28th, 2026)" in raw


def test_long_dates_use_ordinals() -> None:
    assert [ordinal(n) for n in (1, 2, 3, 4, 11, 12, 13, 21, 22, 23, 31)] == [
        "1st", "2nd", "3rd", "4th", "11th", "12th", "13th", "21st", "22nd", "23rd", "31st",
    ]
    assert long_date(date(2026, 10, 1)) == "October 1st, 2026"
    assert long_timestamp(datetime(2026, 10, 18, 0, 7)) == "October 18th, 2026 12:07 AM"
    assert long_timestamp(NOW) == "October 18th, 2026 2:05 PM"
