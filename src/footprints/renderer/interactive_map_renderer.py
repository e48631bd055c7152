from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from ..config import RendererConfig
from .surface import MapState

LOGGER = logging.getLogger(__name__)


class InteractiveMapRenderer:
    """Render a MapState as a standalone MapLibre GL page."""

    def __init__(self, config: RendererConfig):
        self.config = config

    def render(
        self,
        state: MapState,
        output_path: Path | None = None,
        title: Optional[str] = None,
    ) -> Path:
        """Write static HTML and JSON state files for the interactive map.

        Args:
            state: the settled rendering state (layers, filters, camera, points).
            output_path: optional explicit output path. Defaults to
                `<output_dir>/footprints.html`.
            title: heading shown over the map.
        """
        output_dir = self.config.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        if output_path is None:
            output_path = output_dir / "footprints.html"
        output_path.parent.mkdir(parents=True, exist_ok=True)

        json_path = output_path.with_suffix(".json")
        json_path.write_text(
            json.dumps(state.to_json(), indent=2, ensure_ascii=False), encoding="utf-8"
        )

        html = self._build_html(json_path.name, title or "Travel Footprints")
        output_path.write_text(html, encoding="utf-8")
        LOGGER.info("Rendered %s", output_path)
        return output_path

    def _build_html(self, data_file: str, title: str) -> str:
        theme = self.config.theme
        sources = self.config.sources
        version = self.config.maplibre_version

        return f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{title}</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <script src="https://unpkg.com/maplibre-gl@{version}/dist/maplibre-gl.js"></script>
    <link href="https://unpkg.com/maplibre-gl@{version}/dist/maplibre-gl.css" rel="stylesheet" />
    <style>
      html, body {{
        margin: 0;
        height: 100%;
        background: {theme.background_color};
      }}
      #map {{
        position: absolute;
        inset: 0;
      }}
      .card {{
        position: absolute;
        top: 14px;
        left: 14px;
        padding: 16px;
        border-radius: 20px;
        background: rgba(15, 23, 42, 0.6);
        border: 1px solid rgba(255, 255, 255, 0.1);
        color: {theme.title_color};
        font-family: {theme.title_font_family};
        backdrop-filter: blur(12px);
        z-index: 2;
      }}
      .card h1 {{
        font-size: 16px;
        margin: 0;
      }}
    </style>
  </head>
  <body>
    <div id="map"></div>
    <div class="card"><h1>{title}</h1></div>
    <script>
      const theme = {{
        baseFill: "{theme.base_fill}",
        baseLine: "{theme.base_line}",
        hiFill: "{theme.highlight_fill}",
        hiOutline: "{theme.highlight_outline}",
        hiOpacity: {theme.highlight_opacity},
        pointColor: "{theme.point_color}",
      }};
      const sources = {{
        countries: "{sources.countries}",
        "cn-provinces": "{sources.cn_provinces}",
        "us-states": "{sources.us_states}",
      }};
      const prefixes = {{ countries: "countries", cn: "cn-provinces", us: "us-states" }};

      fetch("{data_file}")
        .then((response) => response.json())
        .then((state) => {{
          const map = new maplibregl.Map({{
            container: "map",
            style: {{
              version: 8,
              sources: {{}},
              layers: [{{ id: "bg", type: "background", paint: {{ "background-color": "{theme.background_color}" }} }}],
            }},
            center: state.camera.center,
            zoom: state.camera.zoom,
            minZoom: state.zoomRange[0],
            maxZoom: state.zoomRange[1],
            maxBounds: state.maxBounds,
            attributionControl: false,
          }});
          map.addControl(new maplibregl.NavigationControl({{ showCompass: false }}), "top-right");
          map.dragRotate.disable();

          map.on("load", () => {{
            Object.entries(sources).forEach(([id, url]) => map.addSource(id, {{ type: "geojson", data: url }}));
            Object.entries(prefixes).forEach(([prefix, source]) => {{
              map.addLayer({{ id: `${{prefix}}-base-fill`, type: "fill", source, paint: {{ "fill-color": theme.baseFill }} }});
              map.addLayer({{ id: `${{prefix}}-base-line`, type: "line", source, paint: {{ "line-color": theme.baseLine }} }});
              map.addLayer({{ id: `${{prefix}}-hi`, type: "fill", source, paint: {{ "fill-color": theme.hiFill, "fill-opacity": theme.hiOpacity }} }});
              map.addLayer({{ id: `${{prefix}}-hi-line`, type: "line", source, paint: {{ "line-color": theme.hiOutline, "line-width": 1.5 }} }});
            }});
            map.addSource("trip-points", {{ type: "geojson", data: state.points }});
            map.addLayer({{
              id: "trip-points-layer",
              type: "circle",
              source: "trip-points",
              paint: {{
                "circle-color": theme.pointColor,
                "circle-radius": ["interpolate", ["linear"], ["zoom"], 1, 2, 6, 4],
                "circle-opacity": 1,
              }},
            }});

            Object.entries(state.visibility).forEach(([layer, visible]) => {{
              if (map.getLayer(layer)) map.setLayoutProperty(layer, "visibility", visible ? "visible" : "none");
            }});
            Object.entries(state.filters).forEach(([layer, filter]) => {{
              if (map.getLayer(layer)) map.setFilter(layer, filter);
            }});
          }});
        }})
        .catch((error) => {{
          console.error("Error loading map state:", error);
        }});
    </script>
  </body>
</html>
"""
