from typing import Any, Dict, List, Optional

import pytest
import requests

from footprints.config import GeocoderConfig
from footprints.geocode import NominatimGeocoder, admin1_for, parse_results


class _FakeResponse:
    def __init__(self, payload: Any = None, status: int = 200, body_error: bool = False) -> None:
        self.payload = payload
        self.status_code = status
        self.body_error = body_error

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> Any:
        if self.body_error:
            raise ValueError("Expecting value")
        return self.payload


class _FakeSession:
    def __init__(self, response: Optional[_FakeResponse] = None, error: Optional[Exception] = None) -> None:
        self.headers: Dict[str, str] = {}
        self.response = response
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


NOMINATIM_RESULTS = [
    {
        "display_name": "Hangzhou, Zhejiang, China",
        "lat": "30.27",
        "lon": "120.15",
        "address": {"country_code": "cn", "state": "Zhejiang Province"},
    },
    {
        "display_name": "Austin, Texas, United States",
        "lat": "30.27",
        "lon": "-97.74",
        "address": {"country_code": "us", "state": "Texas", "ISO3166-2-lvl4": "US-TX"},
    },
    {"display_name": "Nowhere", "lat": "1", "lon": "2", "address": {}},
    {"display_name": "Broken", "lat": "abc", "lon": "2", "address": {"country_code": "fr"}},
]


def _geocoder(session: _FakeSession) -> NominatimGeocoder:
    return NominatimGeocoder(GeocoderConfig(base_url="https://geo.example/"), session=session)


def test_lookup_parses_candidates() -> None:
    session = _FakeSession(_FakeResponse(NOMINATIM_RESULTS))
    candidates = _geocoder(session).lookup("  hangzhou ")

    assert [c.country_iso2 for c in candidates] == ["CN", "US"]
    assert candidates[0].admin1 == "Zhejiang Province"
    assert candidates[1].admin1 == "TX"
    assert session.calls[0]["url"] == "https://geo.example/search"
    assert session.calls[0]["params"]["q"] == "hangzhou"
    assert session.calls[0]["params"]["accept-language"] == "en"
    assert session.headers["User-Agent"] == "travel-footprints"


def test_blank_query_skips_request() -> None:
    session = _FakeSession(_FakeResponse([]))
    assert _geocoder(session).lookup("   ") == []
    assert session.calls == []


@pytest.mark.parametrize(
    "session",
    [
        _FakeSession(_FakeResponse(status=503)),
        _FakeSession(_FakeResponse(body_error=True)),
        _FakeSession(_FakeResponse({"error": "bad"})),
        _FakeSession(error=requests.ConnectionError("offline")),
    ],
)
def test_lookup_failures_yield_no_results(session: _FakeSession) -> None:
    assert _geocoder(session).lookup("tokyo") == []


def test_admin1_rules() -> None:
    assert admin1_for("US", {"state_code": "ca", "state": "California"}) == "CA"
    assert admin1_for("US", {"state": "California"}) == "California"
    assert admin1_for("us", {}) is None
    assert admin1_for("CN", {"province": "Sichuan"}) == "Sichuan"
    assert admin1_for("JP", {"state": "Tokyo"}) is None
    assert admin1_for("US", None) is None


def test_parse_results_skips_non_mappings() -> None:
    assert parse_results(["x", 3, None]) == []
