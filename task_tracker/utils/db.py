from bson import ObjectId
from bson.errors import InvalidId
from flask import current_app
from pymongo import DESCENDING, MongoClient
from pymongo.errors import PyMongoError


def init_app(app):
    """Attach a MongoDB client to ``app`` and prepare the tasks collection.

    A ``MONGO_CLIENT`` config value (for example a mongomock client) takes
    precedence over ``MONGO_URI``. The connection is checked up front so the
    health route can report the real status, but a failed check does not
    stop the app from starting.
    """
    client = app.config.get("MONGO_CLIENT")
    if client is None:
        client = MongoClient(
            app.config["MONGO_URI"],
            serverSelectionTimeoutMS=app.config.get("MONGO_TIMEOUT_MS", 2000),
        )
    app.extensions["mongo_client"] = client

    db = client[app.config["MONGO_DB_NAME"]]
    try:
        client.admin.command("ping")
        db.tasks.create_index([("date", DESCENDING), ("created_at", DESCENDING)])
        status = {"ok": True, "message": "MongoDB connected"}
    except PyMongoError as exc:
        app.logger.warning("MongoDB is not reachable at startup: %s", exc)
        status = {"ok": False, "message": f"MongoDB connection failed: {exc}"}
    app.extensions["mongo_status"] = status


def get_db():
    client = current_app.extensions["mongo_client"]
    return client[current_app.config["MONGO_DB_NAME"]]


def get_db_status():
    return current_app.extensions.get("mongo_status", {"ok": False, "message": "not initialized"})


def to_object_id(value):
    """Return an ObjectId for ``value``, or None when it is not a valid id."""
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None
