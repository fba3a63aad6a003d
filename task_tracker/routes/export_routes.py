from io import BytesIO

from flask import Blueprint, current_app, jsonify, send_file
from pymongo.errors import PyMongoError

from task_tracker.exports.excel_export import XLSX_MIMETYPE, export_excel
from task_tracker.exports.pdf_export import PDF_MIMETYPE, export_pdf
from task_tracker.models.task_model import fetch_tasks, utcnow
from task_tracker.utils.db import get_db


exports_bp = Blueprint("exports", __name__)


def _export(render, mimetype, label):
    try:
        tasks = fetch_tasks(get_db().tasks)
    except PyMongoError:
        current_app.logger.exception("Error fetching tasks for %s export", label)
        return jsonify(error=f"Failed to generate {label} file"), 500
    if not tasks:
        return jsonify(error="No tasks to export"), 404

    try:
        content, filename = render(tasks, utcnow())
    except Exception:  # noqa: BLE001
        current_app.logger.exception("Error generating %s export", label)
        return jsonify(error=f"Failed to generate {label} file"), 500

    current_app.logger.info("Exported %d tasks to %s", len(tasks), filename)
    return send_file(
        BytesIO(content),
        mimetype=mimetype,
        as_attachment=True,
        download_name=filename,
    )


@exports_bp.get("/excel")
def export_tasks_excel():
    return _export(export_excel, XLSX_MIMETYPE, "Excel")


@exports_bp.get("/pdf")
def export_tasks_pdf():
    return _export(export_pdf, PDF_MIMETYPE, "PDF")
