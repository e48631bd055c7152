from __future__ import annotations

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Scope(str, Enum):
    WORLD = "world"
    CN = "cn"
    US = "us"

    @property
    def country(self) -> Optional[str]:
        """Country code a scope is restricted to, ``None`` for the world view."""
        return {Scope.CN: "CN", Scope.US: "US"}.get(self)

    @classmethod
    def for_country(cls, country_iso2: str | None) -> "Scope":
        code = (country_iso2 or "").upper()
        if code == "CN":
            return cls.CN
        if code == "US":
            return cls.US
        return cls.WORLD


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PlaceRef(_Model):
    name: str
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    country_iso2: str = Field(default="", alias="countryIso2")
    admin1: Optional[str] = None

    @field_validator("country_iso2", mode="before")
    @classmethod
    def _upper_country(cls, value: str | None) -> str:
        return (value or "").strip().upper()


class VisitRecord(_Model):
    id: str = Field(min_length=1)
    date: str
    tag: str = Field(min_length=1)
    place: PlaceRef

    @field_validator("date")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        # Lexicographic order of YYYY-MM-DD strings is date order.
        try:
            return datetime.date.fromisoformat(value).isoformat()
        except ValueError as exc:
            raise ValueError(f"date must be YYYY-MM-DD, got {value!r}") from exc

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


class Candidate(_Model):
    display_name: str = Field(alias="displayName")
    lat: float
    lon: float
    country_iso2: str = Field(default="", alias="countryIso2")
    admin1: Optional[str] = None

    @field_validator("country_iso2", mode="before")
    @classmethod
    def _upper_country(cls, value: str | None) -> str:
        return (value or "").strip().upper()
