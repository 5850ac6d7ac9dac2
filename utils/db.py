"""
utils/db.py
-----------------
This module initializes and manages the MongoDB connection
for the entire Flask application, plus the small helpers every
controller needs to move documents in and out of JSON.
"""

from datetime import datetime

from bson import ObjectId
from bson.errors import InvalidId
from flask import request
from flask_pymongo import PyMongo

from utils.errors import ValidationError

# Create a global MongoDB instance
mongo = PyMongo()


def init_db_connection(app):
    """
    Initialize MongoDB connection with Flask app.
    Loads settings from the app config (MONGO_URI).
    """
    mongo.init_app(app)
    app.logger.info("MongoDB connection initialized for %s", app.config.get("MONGO_URI"))
    return mongo


def to_object_id(value):
    """Return an ObjectId for `value`, or None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    if not value:
        return None
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def serialize(value):
    """Convert a Mongo document (or anything inside one) into JSON-friendly data."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items() if k != "password"}
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    return value


def json_body():
    """The request's JSON object; an empty dict when there is no body."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def parse_date(value):
    """Parse an ISO date / datetime string. Returns None when it cannot be parsed."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    # Stored datetimes are naive UTC, same as datetime.utcnow()
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
    return parsed
