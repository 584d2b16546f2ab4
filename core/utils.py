# core/utils.py

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID


def sanitize(data: dict) -> dict:
    """
    Prepare a payload for PostgREST:
    - Empty / whitespace strings → None
    - Strip string whitespace
    - Enums → their value, UUID → str, Decimal → float
    - Preserve booleans, numbers and None

    Strings are never coerced to numbers; phone numbers and
    coordinates must keep their leading zeros and formatting.
    """
    clean = {}

    for k, v in data.items():
        if isinstance(v, str) and not isinstance(v, Enum):
            stripped = v.strip()
            clean[k] = stripped or None
        elif isinstance(v, Enum):
            clean[k] = v.value
        elif isinstance(v, UUID):
            clean[k] = str(v)
        elif isinstance(v, Decimal):
            clean[k] = float(v)
        else:
            clean[k] = v

    return clean


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
