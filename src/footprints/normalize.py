"""Turn geocoder admin1 text into the keys each scope's vector data uses.

All functions are total: unmappable input yields ``None`` or an empty set.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Set

from .regions import CN_EN_TO_ZH, DC_SPELLINGS, DISTRICT_OF_COLUMBIA, us_state_names

LOGGER = logging.getLogger(__name__)

_US_PREFIX = re.compile(r"^commonwealth of\s+", re.IGNORECASE)
_US_SUFFIXES = (
    re.compile(r",\s*united states.*$", re.IGNORECASE),
    re.compile(r",\s*usa.*$", re.IGNORECASE),
    re.compile(r"\s+state$", re.IGNORECASE),
    re.compile(r"\s+commonwealth$", re.IGNORECASE),
)
_TWO_LETTERS = re.compile(r"^[A-Za-z]{2}$")
_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[^\w\s]")

_CN_SUFFIXES = re.compile(
    r"(?:\s+(?:province|city|autonomous region|ar|sar))+$", re.IGNORECASE
)


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def normalize_us_state(raw: str | None) -> Optional[str]:
    """Return the full state name for ``raw``, or ``None`` when it cannot be mapped."""
    if not raw:
        return None
    text = raw.strip()
    if not text:
        return None

    text = _US_PREFIX.sub("", text)
    for pattern in _US_SUFFIXES:
        text = pattern.sub("", text)
    text = _collapse(text)

    shout = _collapse(_PUNCTUATION.sub(" ", text.upper()))
    if shout in DC_SPELLINGS:
        return DISTRICT_OF_COLUMBIA

    if _TWO_LETTERS.match(text):
        name = us_state_names().get(text.upper())
        if name is None:
            LOGGER.debug("Unknown US state abbreviation %s", text)
        return name

    return text or None


def clean_cn_province(raw: str | None) -> str:
    """Strip administrative suffixes: ``"Zhejiang Province"`` -> ``"Zhejiang"``."""
    if not raw:
        return ""
    return _collapse(_CN_SUFFIXES.sub("", raw.strip()))


def normalize_cn_province(raw: str | None) -> Set[str]:
    """Alternative match keys for a Chinese province name.

    The province layer may name its features in English or Chinese and the
    geocoder text may or may not already be clean, so the raw text, the cleaned
    English name and the Chinese equivalent are all offered.
    """
    if not raw or not raw.strip():
        return set()
    text = raw.strip()
    cleaned = clean_cn_province(text)
    chinese = CN_EN_TO_ZH.get(cleaned, "")
    if not chinese:
        LOGGER.debug("No Chinese name for province %r", cleaned)
    return {key for key in (text, cleaned, chinese) if key}
