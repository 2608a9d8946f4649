"""JSON encoding helpers that tolerate values the json module rejects."""

from __future__ import annotations

import json
import math
from datetime import date, datetime
from pathlib import Path


def safe_json(value):
    """Return a copy of ``value`` containing only JSON-safe primitives."""
    if isinstance(value, dict):
        return {str(key): safe_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [safe_json(item) for item in value]
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if value is None or isinstance(value, (str, int, bool)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def safe_json_dumps(value, **kwargs):
    return json.dumps(safe_json(value), ensure_ascii=False, allow_nan=False, **kwargs)
