import json
from pathlib import Path
from typing import List

import pytest
from typer.testing import CliRunner

from conftest import make_candidate
from footprints import cli
from footprints.geocode import NominatimGeocoder
from footprints.schemas import Candidate

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        f"storage:\n  path: {tmp_path / 'data.json'}\nrenderer:\n  output_dir: {tmp_path / 'out'}\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def fake_geocoder(monkeypatch: pytest.MonkeyPatch) -> List[str]:
    queries: List[str] = []

    def lookup(self, text: str) -> List[Candidate]:
        queries.append(text)
        return [
            make_candidate("Chengdu, Sichuan, China", "CN", admin1="Sichuan", lat=30.66, lon=104.06),
            make_candidate("Chengdu, Somewhere", "US", admin1="NV", lat=36.0, lon=-115.0),
        ]

    monkeypatch.setattr(NominatimGeocoder, "lookup", lookup)
    return queries


def _invoke(*args: str, input: str = None):
    result = runner.invoke(cli.app, list(args), input=input)
    assert result.exception is None or isinstance(result.exception, SystemExit), result.output
    return result


def test_search_lists_candidates(config_path: Path, fake_geocoder: List[str]) -> None:
    result = _invoke("search", "chengdu", "-c", str(config_path))
    assert result.exit_code == 0
    assert "Sichuan" in result.output
    assert fake_geocoder == ["chengdu"]


def test_add_then_regions(config_path: Path) -> None:
    assert _invoke("add", "chengdu", "--pick", "0", "-c", str(config_path)).exit_code == 0
    result = _invoke("regions", "--scope", "cn", "-c", str(config_path))
    assert "四川省" in result.output

    duplicate = _invoke("add", "chengdu", "-c", str(config_path))
    assert "already recorded" in duplicate.output


def test_add_rejects_bad_pick(config_path: Path) -> None:
    result = _invoke("add", "chengdu", "--pick", "5", "-c", str(config_path))
    assert result.exit_code == 1


def test_preset_stats_and_render(config_path: Path, tmp_path: Path) -> None:
    assert _invoke("add-preset", "Tokyo", "-c", str(config_path)).exit_code == 0
    stats = _invoke("stats", "-c", str(config_path))
    assert "1 Countries" in stats.output

    output = tmp_path / "map.html"
    result = _invoke("render", "--scope", "world", "-o", str(output), "-c", str(config_path))
    assert result.exit_code == 0
    state = json.loads(output.with_suffix(".json").read_text(encoding="utf-8"))
    assert state["filters"]["countries-hi"][2] == ["literal", ["JP"]]
    assert state["visibility"]["countries-hi"] is True
    assert state["camera"]["center"] == [0.0, 20.0]
    assert "maplibre-gl" in output.read_text(encoding="utf-8")


def test_render_defaults_to_configured_output_dir(config_path: Path, tmp_path: Path) -> None:
    _invoke("add-preset", "Beijing", "-c", str(config_path))
    result = _invoke("render", "--scope", "cn", "-c", str(config_path))
    assert result.exit_code == 0
    output = tmp_path / "out" / "footprints.html"
    assert output.exists()
    state = json.loads(output.with_suffix(".json").read_text(encoding="utf-8"))
    assert state["camera"]["center"] == [104.0, 28.0]


def test_tags_rename_and_delete(config_path: Path) -> None:
    _invoke("add-preset", "Paris", "-c", str(config_path))
    assert _invoke("tags", "rename", "Me", "Solo", "-c", str(config_path)).exit_code == 0
    listing = _invoke("list", "--tag", "Solo", "-c", str(config_path))
    assert "Paris" in listing.output

    declined = _invoke("tags", "delete", "Solo", "-c", str(config_path), input="n\n")
    assert "Deleted" not in declined.output
    deleted = _invoke("tags", "delete", "Solo", "--yes", "-c", str(config_path))
    assert "tags are now Couple" in deleted.output


def test_import_rejects_bad_payload(config_path: Path, tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{}", encoding="utf-8")
    result = _invoke("import", str(bad), "--yes", "-c", str(config_path))
    assert result.exit_code == 1
    assert "Import rejected" in result.output


def test_export_import_round_trip(config_path: Path, tmp_path: Path) -> None:
    _invoke("add-preset", "Sydney", "-c", str(config_path))
    backup = tmp_path / "backup.json"
    assert _invoke("export", str(backup), "-c", str(config_path)).exit_code == 0
    _invoke("clear", "--yes", "-c", str(config_path))
    result = _invoke("import", str(backup), "--yes", "-c", str(config_path))
    assert "Imported 1 records" in result.output
