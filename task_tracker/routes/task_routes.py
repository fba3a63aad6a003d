from flask import Blueprint, current_app, jsonify, request
from pymongo.errors import PyMongoError

from task_tracker.models.task_model import (
    CATEGORIES,
    ConcurrentUpdateError,
    Task,
    fetch_tasks,
    new_task_doc,
    parse_day,
    update_description,
)
from task_tracker.utils.db import get_db, to_object_id


tasks_bp = Blueprint("tasks", __name__)


def _text(payload, key):
    value = payload.get(key)
    if not isinstance(value, str):
        return ""
    return value.strip()


@tasks_bp.get("/categories")
def list_categories():
    return jsonify(categories=CATEGORIES), 200


@tasks_bp.get("")
def list_tasks():
    day = (request.args.get("date") or "").strip() or None
    parsed = parse_day(day) if day else None
    if parsed is not None:
        day = parsed.isoformat()
    try:
        tasks = fetch_tasks(get_db().tasks, day)
    except PyMongoError:
        current_app.logger.exception("Error fetching tasks")
        return jsonify(error="Failed to fetch tasks"), 500
    return jsonify(tasks=[t.to_dict() for t in tasks]), 200


@tasks_bp.post("")
def create_task():
    payload = request.get_json(silent=True) or {}
    description = _text(payload, "description")
    day = _text(payload, "date")
    category = _text(payload, "category")
    if not description or not day or not category:
        return jsonify(error="Description, date, and category are required"), 400
    parsed = parse_day(day)
    if parsed is None:
        return jsonify(error="Invalid date format, expected YYYY-MM-DD"), 400
    day = parsed.isoformat()

    doc = new_task_doc(description, day, category)
    try:
        res = get_db().tasks.insert_one(doc)
        created = get_db().tasks.find_one({"_id": res.inserted_id})
    except PyMongoError:
        current_app.logger.exception("Error creating task")
        return jsonify(error="Failed to create task"), 500
    current_app.logger.info("Created task %s for %s", res.inserted_id, day)
    return jsonify(task=Task.from_doc(created).to_dict()), 201


@tasks_bp.put("/<task_id>")
def update_task(task_id):
    payload = request.get_json(silent=True) or {}
    description = _text(payload, "description")
    if not description:
        return jsonify(error="Description is required"), 400

    oid = to_object_id(task_id)
    if oid is None:
        return jsonify(error="Task not found"), 404

    try:
        res = update_description(get_db().tasks, oid, description)
    except (PyMongoError, ConcurrentUpdateError):
        current_app.logger.exception("Error updating task %s", task_id)
        return jsonify(error="Failed to update task"), 500
    if not res:
        return jsonify(error="Task not found"), 404
    return jsonify(task=Task.from_doc(res).to_dict()), 200


@tasks_bp.delete("/<task_id>")
def delete_task(task_id):
    oid = to_object_id(task_id)
    if oid is None:
        return jsonify(error="Task not found"), 404
    try:
        res = get_db().tasks.delete_one({"_id": oid})
    except PyMongoError:
        current_app.logger.exception("Error deleting task %s", task_id)
        return jsonify(error="Failed to delete task"), 500
    if res.deleted_count == 0:
        return jsonify(error="Task not found"), 404
    return jsonify(status="deleted", id=task_id), 200
