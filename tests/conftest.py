from __future__ import annotations

from typing import Optional

import pytest

from footprints.persistence import KeyValueStore
from footprints.schemas import Candidate, PlaceRef, VisitRecord
from footprints.session import FootprintsSession


def make_record(
    record_id: str,
    tag: str = "Me",
    country: str = "JP",
    admin1: Optional[str] = None,
    name: Optional[str] = None,
    date: str = "2024-05-01",
    lat: float = 35.0,
    lon: float = 139.0,
) -> VisitRecord:
    return VisitRecord(
        id=record_id,
        date=date,
        tag=tag,
        place=PlaceRef(
            name=name or f"Place {record_id}",
            lat=lat,
            lon=lon,
            country_iso2=country,
            admin1=admin1,
        ),
    )


def make_candidate(
    name: str, country: str, admin1: Optional[str] = None, lat: float = 10.0, lon: float = 20.0
) -> Candidate:
    return Candidate(display_name=name, lat=lat, lon=lon, country_iso2=country, admin1=admin1)


@pytest.fixture
def store(tmp_path) -> KeyValueStore:
    return KeyValueStore(tmp_path / "footprints.json")


@pytest.fixture
def session(store) -> FootprintsSession:
    return FootprintsSession(store, ["Me", "Couple"])
