import hashlib
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to aware UTC.

    SQLite hands back naive datetimes even for timezone=True columns, so
    naive values are treated as already being UTC.

    Args:
        dt: Datetime to normalize (may be None)

    Returns:
        Aware UTC datetime, or None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class ContentFingerprinter:
    """
    Pure logic for creating deterministic fingerprints of scoring inputs.
    """

    @staticmethod
    def calculate(payload: Any) -> str:
        """
        Create a deterministic hash of a JSON-serializable payload.
        Formula: SHA256(canonical JSON with sorted keys)[:32]
        """
        raw_string = json.dumps(payload, sort_keys=True, default=str)
        return hashlib.sha256(raw_string.encode('utf-8')).hexdigest()[:32]

    @staticmethod
    def normalize_location(location: Any) -> str:
        """
        Normalize location data which can be a dict, string, or None.

        Returns the lowercase city portion ("Berlin, DE" -> "berlin").
        """
        location_text = ""
        if isinstance(location, dict):
            location_text = location.get('city') or location.get('country') or ""
        elif isinstance(location, str):
            location_text = location
        return str(location_text).split(',')[0].strip().lower()


def to_uuid(value: Any) -> Optional[uuid.UUID]:
    """Coerce an id from headers or JSON into a UUID; None if it is not one."""
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None
