"""Popular destinations that can be added without a geocoder lookup."""

from __future__ import annotations

from typing import List, Optional

from .schemas import Candidate

HOT_CITIES: List[Candidate] = [
    Candidate(display_name="Beijing, China", lat=39.904, lon=116.407, country_iso2="CN", admin1="Beijing"),
    Candidate(display_name="Shenzhen, China", lat=22.5455, lon=114.068, country_iso2="CN", admin1="Guangdong"),
    Candidate(display_name="Hong Kong, China", lat=22.319, lon=114.169, country_iso2="CN", admin1="Hong Kong"),
    Candidate(display_name="Tokyo, Japan", lat=35.689, lon=139.691, country_iso2="JP", admin1="Tokyo"),
    Candidate(display_name="New York, USA", lat=40.712, lon=-74.006, country_iso2="US", admin1="New York"),
    Candidate(display_name="Los Angeles, USA", lat=34.052, lon=-118.243, country_iso2="US", admin1="California"),
    Candidate(display_name="London, UK", lat=51.507, lon=-0.127, country_iso2="GB", admin1="England"),
    Candidate(display_name="Paris, France", lat=48.856, lon=2.352, country_iso2="FR", admin1="Île-de-France"),
    Candidate(display_name="Singapore", lat=1.352, lon=103.819, country_iso2="SG", admin1="Singapore"),
    Candidate(display_name="Sydney, Australia", lat=-33.868, lon=151.209, country_iso2="AU", admin1="New South Wales"),
]


def find_preset(name: str) -> Optional[Candidate]:
    """Match a preset by full display name or by its city part, case-insensitively."""
    wanted = name.strip().lower()
    for candidate in HOT_CITIES:
        city = candidate.display_name.split(",")[0].strip().lower()
        if wanted in (candidate.display_name.lower(), city):
            return candidate
    return None
