"""PDF rendering of the task list.

Layout works top-down in points measured from the top edge of the page;
``_draw`` converts to reportlab's bottom-left origin.
"""

from datetime import datetime
from io import BytesIO
from typing import Dict, List

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from task_tracker.exports.formatting import (
    clean_description,
    export_filename,
    format_long_day,
    long_timestamp,
)

PDF_MIMETYPE = "application/pdf"

MARGIN = 20 * mm
PAGE_BREAK_GAP = 30 * mm
FOOTER_GAP = 20 * mm
LINE_HEIGHT = 5 * mm
INDENT = 10 * mm

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"

GREY = (100 / 255, 100 / 255, 100 / 255)
LIGHT_GREY = (200 / 255, 200 / 255, 200 / 255)
BLACK = (0, 0, 0)


def wrap_text(text: str, max_width: float, font: str = FONT, size: float = 11) -> List[str]:
    """Break ``text`` into lines no wider than ``max_width`` points.

    Words are added one at a time while the rendered width fits; a single
    word wider than the line is kept on a line of its own.
    """
    lines = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            if current and stringWidth(candidate, font, size) > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        if current:
            lines.append(current)
    return lines


def group_by_date(tasks) -> Dict[str, list]:
    """Group tasks by their date string, newest date first."""
    groups: Dict[str, list] = {}
    for task in tasks:
        groups.setdefault(task.date, []).append(task)
    return {day: groups[day] for day in sorted(groups, reverse=True)}


class NumberedCanvas(canvas.Canvas):
    """Canvas that holds pages back until save() so it can stamp "Page i of n"."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []
        self.page_count = 0

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_page_number(total)
            super().showPage()
        # restoring page states rewinds page_count too
        self.page_count = total
        super().save()

    def _draw_page_number(self, total):
        width, _ = self._pagesize
        self.setFont(FONT, 9)
        self.setFillColorRGB(*BLACK)
        self.drawCentredString(width / 2, 10 * mm, f"Page {self._pageNumber} of {total}")


class TaskPdfRenderer:
    def __init__(self, tasks, generated_at: datetime, title: str = "Task Tracker", compress: bool = True):
        self.tasks = list(tasks)
        self.generated_at = generated_at
        self.title = title
        # uncompressed output keeps page text readable in the raw bytes
        self.compress = compress
        self.page_width, self.page_height = A4
        self.content_width = self.page_width - 2 * MARGIN
        self.page_count = 0
        self._canvas = None
        self._y = MARGIN

    def _draw(self, x, text, font, size, color=BLACK, align="left"):
        c = self._canvas
        c.setFont(font, size)
        c.setFillColorRGB(*color)
        baseline = self.page_height - self._y
        if align == "center":
            c.drawCentredString(x, baseline, text)
        else:
            c.drawString(x, baseline, text)

    def _rule(self, width, color=BLACK):
        c = self._canvas
        c.setLineWidth(width * mm)
        c.setStrokeColorRGB(*color)
        baseline = self.page_height - self._y
        c.line(MARGIN, baseline, self.page_width - MARGIN, baseline)

    def _ensure_room(self, gap=PAGE_BREAK_GAP):
        if self._y > self.page_height - gap:
            self._canvas.showPage()
            self._y = MARGIN

    def _header(self):
        center = self.page_width / 2
        self._draw(center, self.title, FONT_BOLD, 24, align="center")
        self._y += 10 * mm
        stamp = long_timestamp(self.generated_at)
        self._draw(center, f"Generated on {stamp}", FONT, 12, align="center")
        self._y += 20 * mm

    def _task(self, number, task, last):
        self._ensure_room()
        self._draw(MARGIN, f"{number}.", FONT_BOLD, 11)

        lines = wrap_text(clean_description(task.description), self.content_width - INDENT, FONT, 11)
        for i, line in enumerate(lines):
            if i:
                self._y += LINE_HEIGHT
                self._ensure_room()
            self._draw(MARGIN + INDENT, line, FONT, 11)
        self._y += LINE_HEIGHT + 4 * mm

        self._ensure_room()
        self._draw(MARGIN + INDENT, f"Category: {task.category}", FONT_ITALIC, 9, GREY)
        self._y += 6 * mm

        if not last:
            self._y += 2 * mm
            self._rule(0.2, LIGHT_GREY)
            self._y += 6 * mm

    def _date_group(self, day, tasks):
        self._ensure_room()
        label = format_long_day(tasks[0])
        self._draw(MARGIN, label, FONT_BOLD, 16)
        self._y += 8 * mm
        self._rule(0.3)
        self._y += 8 * mm
        for i, task in enumerate(tasks):
            self._task(i + 1, task, last=i == len(tasks) - 1)
        self._y += 5 * mm

    def _footer(self):
        self._ensure_room(FOOTER_GAP)
        self._y += 10 * mm
        self._draw(MARGIN, f"Total Tasks: {len(self.tasks)}", FONT_ITALIC, 10, GREY)

    def render(self) -> bytes:
        if not self.tasks:
            raise ValueError("No tasks to export")
        buf = BytesIO()
        self._canvas = NumberedCanvas(buf, pagesize=A4, pageCompression=1 if self.compress else 0)
        self._canvas.setTitle(self.title)
        self._y = MARGIN

        self._header()
        for day, tasks in group_by_date(self.tasks).items():
            self._date_group(day, tasks)
        self._footer()

        self._canvas.showPage()
        self._canvas.save()
        self.page_count = self._canvas.page_count
        return buf.getvalue()


def export_pdf(tasks, now: datetime) -> tuple[bytes, str]:
    """Render ``tasks`` as a PDF; returns ``(content, filename)``."""
    return TaskPdfRenderer(tasks, now).render(), export_filename(now, "pdf")
