from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Iterable, Optional, Set

from .normalize import normalize_cn_province, normalize_us_state
from .schemas import Candidate, PlaceRef, Scope, VisitRecord
from .store import by_tag, distinct_country_codes

LOGGER = logging.getLogger(__name__)

TAIWAN_KEY = "CN-TW"

# Visits reported in these countries are stored as CN provinces.
CN_SUBSTITUTIONS = {"HK": "Hong Kong", "MO": "Macau"}


def ingest(
    candidate: Candidate,
    tag: str,
    visit_date: Optional[str] = None,
    record_id: Optional[str] = None,
) -> VisitRecord:
    """Build the stored record for a confirmed candidate."""
    country = candidate.country_iso2
    admin1 = candidate.admin1
    if country in CN_SUBSTITUTIONS:
        LOGGER.debug("Storing %s visit %s under CN", country, candidate.display_name)
        admin1 = CN_SUBSTITUTIONS[country]
        country = "CN"
    place = PlaceRef(
        name=candidate.display_name,
        lat=candidate.lat,
        lon=candidate.lon,
        country_iso2=country,
        admin1=admin1,
    )
    return VisitRecord(
        id=record_id or uuid.uuid4().hex,
        date=visit_date or date.today().isoformat(),
        tag=tag,
        place=place,
    )


def _admin1(record: VisitRecord) -> str:
    return (record.place.admin1 or "").strip()


def matches_scope(record: VisitRecord, scope: Scope) -> bool:
    country = record.place.country_iso2.upper()
    if scope is Scope.WORLD:
        return bool(country)
    return country == scope.country and bool(_admin1(record))


def resolve(records: Iterable[VisitRecord], tag: str, scope: Scope) -> Set[str]:
    """Region keys to highlight for ``tag``'s visits in ``scope``.

    CN and US keys over-include: every plausible spelling is offered and the
    layer filter keeps only those that name a real feature.
    """
    current = by_tag(records, tag)

    if scope is Scope.WORLD:
        keys = distinct_country_codes(current)
        if "CN" in keys:
            keys.add(TAIWAN_KEY)
        return keys

    candidates: Set[str] = set()
    for record in current:
        if not matches_scope(record, scope):
            continue
        raw = _admin1(record)
        candidates.add(raw)
        if scope is Scope.CN:
            candidates.update(normalize_cn_province(raw))
        else:
            state = normalize_us_state(raw)
            if state:
                candidates.add(state)
    return candidates
