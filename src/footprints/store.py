from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .schemas import VisitRecord

LOGGER = logging.getLogger(__name__)

DEFAULT_TAG = "Me"


def by_tag(records: Iterable[VisitRecord], tag: str) -> List[VisitRecord]:
    """Records carrying ``tag``, in backing-store order (most recent first)."""
    return [record for record in records if record.tag == tag]


def sorted_by_date_desc(records: Iterable[VisitRecord]) -> List[VisitRecord]:
    # ISO 8601 dates compare correctly as strings; sorted() is stable.
    return sorted(records, key=lambda record: record.date, reverse=True)


def distinct_country_codes(records: Iterable[VisitRecord]) -> Set[str]:
    return {
        record.place.country_iso2.upper()
        for record in records
        if record.place.country_iso2
    }


def exists_duplicate(
    records: Iterable[VisitRecord], tag: str, name: str, country_iso2: str
) -> Optional[VisitRecord]:
    """Existing record with the same tag, display name and country, if any."""
    country = (country_iso2 or "").upper()
    for record in records:
        if (
            record.tag == tag
            and record.place.name == name
            and record.place.country_iso2 == country
        ):
            return record
    return None


def flag_emoji(country_iso2: str) -> str:
    if not country_iso2:
        return ""
    return "".join(chr(0x1F1A5 + ord(char)) for char in country_iso2.upper())


@dataclass(frozen=True)
class TagSummary:
    tag: str
    footprints: int
    country_codes: Tuple[str, ...]

    @property
    def countries(self) -> int:
        return len(self.country_codes)

    @property
    def flags(self) -> str:
        return " ".join(flag_emoji(code) for code in self.country_codes)


def summarize(records: Iterable[VisitRecord], tag: str) -> TagSummary:
    current = by_tag(records, tag)
    codes: List[str] = []
    for record in current:
        code = record.place.country_iso2.upper()
        if code and code not in codes:
            codes.append(code)
    return TagSummary(tag=tag, footprints=len(current), country_codes=tuple(codes))


@dataclass
class VisitLog:
    """In-memory reducer over visit records and the ordered tag list."""

    records: List[VisitRecord] = field(default_factory=list)
    tags: List[str] = field(default_factory=lambda: [DEFAULT_TAG])

    def __post_init__(self) -> None:
        unique: List[str] = []
        for tag in self.tags:
            if tag and tag not in unique:
                unique.append(tag)
        self.tags = unique or [DEFAULT_TAG]

    def add(self, record: VisitRecord) -> None:
        self.records.insert(0, record)

    def get(self, record_id: str) -> Optional[VisitRecord]:
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def remove(self, record_id: str) -> Optional[VisitRecord]:
        record = self.get(record_id)
        if record is not None:
            self.records = [item for item in self.records if item.id != record_id]
        return record

    def remove_tag_records(self, tag: str) -> int:
        keep = [record for record in self.records if record.tag != tag]
        removed = len(self.records) - len(keep)
        self.records = keep
        return removed

    def replace_records(self, records: Sequence[VisitRecord]) -> None:
        self.records = list(records)

    def add_tag(self, name: str) -> Optional[str]:
        value = name.strip()
        if not value or value in self.tags:
            return None
        self.tags.append(value)
        return value

    def rename_tag(self, old: str, new: str) -> Optional[str]:
        """Relabel ``old`` as ``new`` on the tag list and on every record."""
        value = new.strip()
        if old not in self.tags or not value or value == old or value in self.tags:
            return None
        self.tags = [value if tag == old else tag for tag in self.tags]
        self.records = [
            record.model_copy(update={"tag": value}) if record.tag == old else record
            for record in self.records
        ]
        LOGGER.info("Renamed tag %s to %s", old, value)
        return value

    def delete_tag(self, name: str) -> bool:
        if name not in self.tags:
            return False
        self.tags = [tag for tag in self.tags if tag != name] or [DEFAULT_TAG]
        return True
