import json

import pytest

from conftest import make_record
from footprints.persistence import (
    TAGS_KEY,
    TRIPS_KEY,
    ImportFormatError,
    export_records,
    import_records,
    load_records,
    load_tags,
    parse_records,
    save_records,
    save_tags,
)


def test_missing_store_loads_defaults(store) -> None:
    assert load_records(store) == []
    assert load_tags(store, ["Me", "Couple"]) == ["Me", "Couple"]


def test_records_and_tags_survive_reload(store) -> None:
    records = [make_record("1", country="CN", admin1="Zhejiang"), make_record("2")]
    save_records(store, records)
    save_tags(store, ["Me", "Solo"])
    assert load_records(store) == records
    assert load_tags(store, ["x"]) == ["Me", "Solo"]


def test_records_use_camel_case_keys(store) -> None:
    save_records(store, [make_record("1", country="JP")])
    stored = json.loads(store.get(TRIPS_KEY))
    assert stored[0]["place"]["countryIso2"] == "JP"


def test_corrupt_store_falls_back(store) -> None:
    store.path.write_text("{not json", encoding="utf-8")
    assert load_records(store) == []
    assert load_tags(store, ["Me"]) == ["Me"]


def test_partial_entries_fall_back(store) -> None:
    store.set(TRIPS_KEY, json.dumps([{"id": "1"}]))
    store.set(TAGS_KEY, json.dumps({"Me": 1}))
    assert load_records(store) == []
    assert load_tags(store, ["Me"]) == ["Me"]


def test_export_is_pretty_printed(tmp_path) -> None:
    path = export_records([make_record("1")], tmp_path / "out" / "trips.json")
    text = path.read_text(encoding="utf-8")
    assert text.startswith("[\n  {")
    assert import_records(path) == [make_record("1")]


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        "{}",
        '"text"',
        '[{"id": "1", "date": "2024-01-01", "tag": "Me"}]',
        '[{"id": "1", "date": "last summer", "tag": "Me", "place": {"name": "x", "lat": 0, "lon": 0}}]',
        '[{"id": "1", "date": "2024-02-30", "tag": "Me", "place": {"name": "x", "lat": 0, "lon": 0}}]',
        '[{"id": "1", "date": "2024-01-01", "tag": "", "place": {"name": "x", "lat": 0, "lon": 0}}]',
        '[{"id": "", "date": "2024-01-01", "tag": "Me", "place": {"name": "x", "lat": 0, "lon": 0}}]',
        '[{"id": "1", "date": "2024-01-01", "tag": "Me", "place": {"name": "x", "lat": 91, "lon": 0}}]',
    ],
)
def test_parse_records_rejects_malformed_payloads(payload: str) -> None:
    with pytest.raises(ImportFormatError):
        parse_records(payload)


def test_import_accepts_original_field_names(tmp_path) -> None:
    path = tmp_path / "trips.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "abc",
                    "date": "2024-02-03",
                    "tag": "Me",
                    "place": {"name": "Kyoto", "lat": 35.0, "lon": 135.7, "countryIso2": "jp", "admin1": None},
                }
            ]
        ),
        encoding="utf-8",
    )
    (record,) = import_records(path)
    assert record.place.country_iso2 == "JP"
