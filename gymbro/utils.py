# utils.py

import math
from datetime import datetime, timezone

from bson.objectid import ObjectId
from flask import request


# FUNCTION isoformat
def isoformat(value):
    if value is None:
        return None
    return value.isoformat(timespec='milliseconds') + 'Z'


# FUNCTION find_by_id
def find_by_id(model, object_id):
    """Return the document with this id, or None when it is missing or the id is malformed."""
    if not ObjectId.is_valid(object_id):
        return None
    return model.objects(id=object_id).first()


# FUNCTION get_pagination
def get_pagination(default_limit=10, max_limit=100):
    page = request.args.get('page', 1, type=int) or 1
    limit = request.args.get('limit', default_limit, type=int) or default_limit

    page = max(page, 1)
    limit = min(max(limit, 1), max_limit)

    return page, limit, (page - 1) * limit


# FUNCTION total_pages
def total_pages(total, limit):
    return math.ceil(total / limit) if limit else 0


# FUNCTION utcnow
def utcnow():
    """Naive UTC now, the form mongoengine stores and loads."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
