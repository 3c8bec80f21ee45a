"""Decide whether a local record is stale compared to a remote snapshot."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .storage import INDEX_FILE, load_json


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; returns None when it cannot be parsed.

    A trailing "Z" is accepted and naive values are taken as UTC so that
    all results compare with each other.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def read_baseline(record_dir: Path) -> Optional[Dict[str, Any]]:
    """Return the stored list-view snapshot, or None if missing or unreadable."""
    try:
        data = load_json(Path(record_dir) / INDEX_FILE)
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def should_update(entity: Dict[str, Any], record_dir: Path) -> bool:
    """True when the remote snapshot is strictly newer than the local baseline.

    Without a usable baseline (no file, bad JSON, missing or unparseable
    updated_at) the record always needs updating. Equal timestamps do not.
    """
    baseline = read_baseline(record_dir)
    if baseline is None:
        return True
    local_updated = parse_timestamp(baseline.get("updated_at"))
    if local_updated is None:
        return True
    remote_updated = parse_timestamp(entity.get("updated_at"))
    if remote_updated is None:
        return False
    return remote_updated > local_updated
