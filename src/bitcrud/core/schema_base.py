"""
Base schema model for request bodies.

Provides the common pydantic configuration shared by every CRUD body and
the datetime serialization used when rendering records.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict


def serialize_datetime(dt: datetime | None) -> str | None:
    """
    Serialize datetime to ISO 8601 format with UTC timezone indicator.

    Timezone-aware values are converted to UTC first; naive values are
    assumed to already be UTC.

    Args:
        dt: The datetime to serialize

    Returns:
        ISO 8601 string with 'Z' suffix (e.g., "2025-12-18T14:30:00Z")
        or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)

    return dt.isoformat() + "Z"


class BodyModel(BaseModel):
    """
    Base model for all CRUD request bodies.

    Unknown keys are ignored, so one payload can carry both the base
    fields and any custom fields read by a subclass.
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
    )
