from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from .schemas import VisitRecord

LOGGER = logging.getLogger(__name__)

TRIPS_KEY = "travel-footprints:trips"
TAGS_KEY = "travel-footprints:tags"

_RECORDS = TypeAdapter(List[VisitRecord])


class ImportFormatError(ValueError):
    """Raised when an import payload is not a list of visit records."""


class KeyValueStore:
    """String-keyed store persisted as a single JSON object on disk."""

    def __init__(self, path: Path):
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (ValueError, OSError) as exc:
            LOGGER.warning("Ignoring unreadable store %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


def parse_records(raw: str) -> List[VisitRecord]:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ImportFormatError(f"Not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ImportFormatError("Expected a JSON array of visit records")
    try:
        return _RECORDS.validate_python(data)
    except ValidationError as exc:
        raise ImportFormatError(f"Invalid visit record: {exc}") from exc


def dump_records(records: Sequence[VisitRecord], indent: Optional[int] = None) -> str:
    return json.dumps(
        [record.to_json() for record in records], indent=indent, ensure_ascii=False
    )


def load_records(store: KeyValueStore) -> List[VisitRecord]:
    raw = store.get(TRIPS_KEY)
    if not raw:
        return []
    try:
        return parse_records(raw)
    except ImportFormatError as exc:
        LOGGER.warning("Discarding stored records: %s", exc)
        return []


def save_records(store: KeyValueStore, records: Sequence[VisitRecord]) -> None:
    store.set(TRIPS_KEY, dump_records(records))


def load_tags(store: KeyValueStore, default: Sequence[str]) -> List[str]:
    raw = store.get(TAGS_KEY)
    if not raw:
        return list(default)
    try:
        data = json.loads(raw)
    except ValueError:
        return list(default)
    if not isinstance(data, list):
        return list(default)
    tags = [tag for tag in data if isinstance(tag, str) and tag]
    return tags or list(default)


def save_tags(store: KeyValueStore, tags: Sequence[str]) -> None:
    store.set(TAGS_KEY, json.dumps(list(tags), ensure_ascii=False))


def export_records(records: Sequence[VisitRecord], path: Path) -> Path:
    """Write records as pretty-printed JSON suitable for download or backup."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_records(records, indent=2), encoding="utf-8")
    LOGGER.info("Exported %d records to %s", len(records), path)
    return path


def import_records(path: Path) -> List[VisitRecord]:
    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ImportFormatError(f"Not a UTF-8 text file: {path}") from exc
    return parse_records(raw)
