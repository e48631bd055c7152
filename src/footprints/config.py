from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    path: Path = Path("data/footprints.json")
    default_tags: List[str] = Field(default_factory=lambda: ["Me", "Couple"])


class GeocoderConfig(BaseModel):
    base_url: str = "https://nominatim.openstreetmap.org"
    language: str = "en"
    limit: int = 8
    timeout: float = 10.0
    user_agent: str = "travel-footprints"
    debounce_ms: int = 300
    min_query_length: int = 2


class ThemeConfig(BaseModel):
    background_color: str = "#0b1220"
    base_fill: str = "#152238"
    base_line: str = "#2b3a55"
    highlight_fill: str = "#45769c"
    highlight_outline: str = "#729bb9"
    highlight_opacity: float = 1.0
    point_color: str = "#29dff2"
    title_color: str = "#f8fafc"
    title_font_family: str = "Inter, Arial, sans-serif"


class SourcesConfig(BaseModel):
    countries: str = "geo/countries.geojson"
    cn_provinces: str = "geo/cn-provinces.geojson"
    us_states: str = "geo/us-states.geojson"


class RendererConfig(BaseModel):
    output_dir: Path = Path("output")
    theme: ThemeConfig = Field(default_factory=ThemeConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    maplibre_version: str = "4.7.1"


class AppConfig(BaseModel):
    storage: StorageConfig = Field(default_factory=StorageConfig)
    geocoder: GeocoderConfig = Field(default_factory=GeocoderConfig)
    renderer: RendererConfig = Field(default_factory=RendererConfig)

    @classmethod
    def load(cls, path: Optional[Path]) -> "AppConfig":
        if path is None:
            return cls()
        with Path(path).expanduser().open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle)
        return cls.model_validate(raw or {})
