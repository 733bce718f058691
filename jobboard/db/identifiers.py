"""
Object identifiers for users, jobs and applicants.

Identifiers are BSON ObjectIds rendered as 24 lowercase hex characters; the
leading timestamp makes them sort roughly by creation time.
"""
from bson import ObjectId


def new_object_id() -> str:
    """Generate a new identifier."""
    return str(ObjectId())


def is_valid_object_id(value) -> bool:
    """Return True if value is a well-formed identifier."""
    return isinstance(value, str) and ObjectId.is_valid(value)
