from __future__ import annotations

import logging
import math
import re
from typing import Any, List, Optional

import requests
from pydantic import ValidationError

from .config import GeocoderConfig
from .schemas import Candidate

LOGGER = logging.getLogger(__name__)

_STATE_CODE = re.compile(r"^[A-Z]{2}$")


def admin1_for(country_iso2: str, address: Any) -> Optional[str]:
    """Pick the first-level division text the resolver will see for a result."""
    if not isinstance(address, dict):
        return None
    country = country_iso2.upper()

    if country == "US":
        code = str(address.get("state_code") or "").strip().upper()
        if _STATE_CODE.match(code):
            return code
        iso = str(address.get("ISO3166-2-lvl4") or "").strip().upper()
        if iso.startswith("US-") and _STATE_CODE.match(iso[3:]):
            return iso[3:]
        state = str(address.get("state") or "").strip()
        return state or None

    if country == "CN":
        province = str(address.get("state") or address.get("province") or "").strip()
        return province or None

    return None


def _finite(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_results(payload: Any) -> List[Candidate]:
    if not isinstance(payload, list):
        LOGGER.warning("Unexpected geocoder payload of type %s", type(payload).__name__)
        return []

    candidates: List[Candidate] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        address = item.get("address") or {}
        country = str(address.get("country_code") or "").upper() if isinstance(address, dict) else ""
        if not country:
            continue
        lat, lon = _finite(item.get("lat")), _finite(item.get("lon"))
        if lat is None or lon is None:
            continue
        try:
            candidates.append(
                Candidate(
                    display_name=str(item.get("display_name") or ""),
                    lat=lat,
                    lon=lon,
                    country_iso2=country,
                    admin1=admin1_for(country, address),
                )
            )
        except ValidationError as exc:
            LOGGER.debug("Skipping malformed geocoder entry: %s", exc)
    return candidates


class NominatimGeocoder:
    """Free-text place search against a Nominatim endpoint."""

    def __init__(self, config: GeocoderConfig, session: Optional[requests.Session] = None):
        self.config = config
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = config.user_agent

    def lookup(self, text: str) -> List[Candidate]:
        query = (text or "").strip()
        if not query:
            return []
        params = {
            "q": query,
            "format": "jsonv2",
            "addressdetails": "1",
            "limit": str(self.config.limit),
            "accept-language": self.config.language,
        }
        url = f"{self.config.base_url.rstrip('/')}/search"
        try:
            response = self._session.get(url, params=params, timeout=self.config.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            LOGGER.warning("Geocoder lookup for %r failed: %s", query, exc)
            return []
        except ValueError as exc:
            LOGGER.warning("Geocoder returned a malformed body for %r: %s", query, exc)
            return []

        candidates = parse_results(payload)
        LOGGER.info("Geocoder returned %d candidates for %r", len(candidates), query)
        return candidates
