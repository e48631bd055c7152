from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import AppConfig
from .geocode import NominatimGeocoder
from .persistence import ImportFormatError
from .presets import HOT_CITIES, find_preset
from .renderer.interactive_map_renderer import InteractiveMapRenderer
from .schemas import Candidate, Scope
from .search import SearchSession
from .session import AddOutcome, FootprintsSession
from .store import summarize

app = typer.Typer(add_completion=False, help="travel footprints command line interface")
tags_app = typer.Typer(add_completion=False, help="Manage traveler tags")
app.add_typer(tags_app, name="tags")
console = Console()

ConfigOption = typer.Option(None, "--config", "-c", exists=True, help="Path to YAML config")
TagOption = typer.Option(None, "--tag", "-t", help="Traveler tag (defaults to the first tag)")
VerboseOption = typer.Option(False, "--verbose", "-v")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _open(config_path: Optional[Path], tag: Optional[str], verbose: bool) -> FootprintsSession:
    _setup_logging(verbose)
    config = AppConfig.load(config_path)
    session = FootprintsSession.from_config(config)
    if tag:
        try:
            session.select_tag(tag)
        except ValueError as exc:
            console.print(f"[red]{exc}[/red] (known tags: {', '.join(session.tags)})")
            raise typer.Exit(code=1)
    return session


def _confirmer(assume_yes: bool):
    if assume_yes:
        return lambda _message: True
    return lambda message: typer.confirm(message, default=False)


def _candidate_table(candidates: List[Candidate]) -> Table:
    table = Table("#", "Place", "Country", "Admin1", "Lat", "Lon")
    for idx, candidate in enumerate(candidates):
        table.add_row(
            str(idx),
            candidate.display_name,
            candidate.country_iso2,
            candidate.admin1 or "",
            f"{candidate.lat:.3f}",
            f"{candidate.lon:.3f}",
        )
    return table


def _report(outcome: AddOutcome) -> None:
    if outcome.created:
        console.print(f"[green]{outcome.notice}[/green] ({outcome.record.id})")
    else:
        place = outcome.record.place
        console.print(f"[yellow]{outcome.notice}[/yellow] at {place.lat:.3f}, {place.lon:.3f}")


def _lookup(config: AppConfig, query: str) -> List[Candidate]:
    geocoder = NominatimGeocoder(config.geocoder)
    search = SearchSession(
        geocoder.lookup,
        debounce_ms=config.geocoder.debounce_ms,
        min_length=config.geocoder.min_query_length,
    )
    search.type(query)
    search.flush()
    return search.results


@app.command("search")
def search_places(
    query: str = typer.Argument(..., help="Free-text place name"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Look up candidate places for a query."""
    _setup_logging(verbose)
    candidates = _lookup(AppConfig.load(config_path), query)
    if not candidates:
        console.print("No results.")
        return
    console.print(_candidate_table(candidates))


@app.command("add")
def add_visit(
    query: str = typer.Argument(..., help="Free-text place name"),
    pick: int = typer.Option(0, "--pick", "-p", help="Index of the search result to record"),
    visit_date: Optional[str] = typer.Option(None, "--date", help="Visit date, YYYY-MM-DD"),
    tag: Optional[str] = TagOption,
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Search for a place and record a visit to one of the results."""
    parsed_date = _parse_date(visit_date)
    session = _open(config_path, tag, verbose)
    candidates = _lookup(session.config, query)
    if not candidates:
        console.print("[red]No results.[/red]")
        raise typer.Exit(code=1)
    if not 0 <= pick < len(candidates):
        console.print(_candidate_table(candidates))
        console.print(f"[red]--pick must be between 0 and {len(candidates) - 1}[/red]")
        raise typer.Exit(code=1)
    _report(session.add_visit(candidates[pick], parsed_date))


@app.command("add-preset")
def add_preset(
    name: str = typer.Argument(..., help="Preset city, e.g. Tokyo"),
    visit_date: Optional[str] = typer.Option(None, "--date", help="Visit date, YYYY-MM-DD"),
    tag: Optional[str] = TagOption,
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Record a visit to one of the curated preset cities."""
    candidate = find_preset(name)
    if candidate is None:
        console.print(f"[red]Unknown preset {name!r}[/red]")
        raise typer.Exit(code=1)
    session = _open(config_path, tag, verbose)
    _report(session.add_visit(candidate, _parse_date(visit_date)))


@app.command("presets")
def list_presets() -> None:
    """Show the curated preset cities."""
    console.print(_candidate_table(HOT_CITIES))


@app.command("list")
def list_visits(
    tag: Optional[str] = TagOption,
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """List a tag's visits, newest first."""
    session = _open(config_path, tag, verbose)
    table = Table("Date", "Place", "Country", "Admin1", "Id", title=f"Footprints: {session.tag}")
    for record in session.history():
        table.add_row(
            record.date,
            record.place.name,
            record.place.country_iso2,
            record.place.admin1 or "",
            record.id,
        )
    console.print(table)


@app.command("remove")
def remove_visit(
    record_id: str = typer.Argument(...),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Delete a single visit by id."""
    session = _open(config_path, None, verbose)
    record = session.remove_visit(record_id)
    if record is None:
        console.print(f"[red]No visit with id {record_id}[/red]")
        raise typer.Exit(code=1)
    console.print(f"Removed {record.place.name}")


@app.command("clear")
def clear_visits(
    tag: Optional[str] = TagOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Delete every visit recorded for a tag."""
    session = _open(config_path, tag, verbose)
    removed = session.clear_tag(_confirmer(yes))
    console.print(f"Removed {removed} footprints for {session.tag}.")


@app.command("stats")
def show_stats(
    tag: Optional[str] = TagOption,
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show country and footprint counts for a tag."""
    session = _open(config_path, tag, verbose)
    summary = summarize(session.records, session.tag)
    console.print(f"[bold]{summary.tag}[/bold]: {summary.countries} Countries · {summary.footprints} Footprints")
    if summary.country_codes:
        console.print(summary.flags)


@app.command("regions")
def show_regions(
    scope: Scope = typer.Option(Scope.WORLD, "--scope", "-s", case_sensitive=False),
    tag: Optional[str] = TagOption,
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Print the region keys highlighted for a tag in a scope."""
    session = _open(config_path, tag, verbose)
    session.select_scope(scope)
    keys = sorted(session.regions())
    if not keys:
        console.print("No highlighted regions.")
        return
    for key in keys:
        console.print(key)


@app.command("render")
def render_map(
    scope: Scope = typer.Option(Scope.WORLD, "--scope", "-s", case_sensitive=False),
    tag: Optional[str] = TagOption,
    output_html: Optional[Path] = typer.Option(
        None,
        "--output-html",
        "-o",
        help="Path for the interactive HTML map output (defaults to output/footprints.html)",
    ),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Render the highlighted map as a standalone MapLibre HTML page."""
    session = _open(config_path, tag, verbose)
    session.select_scope(scope)
    session.surface.settle()
    summary = summarize(session.records, session.tag)
    title = f"{summary.tag}: {summary.countries} Countries · {summary.footprints} Footprints"
    renderer = InteractiveMapRenderer(session.config.renderer)
    output_path = renderer.render(session.surface, output_html, title)
    console.print(f"Rendered {scope.value} map to {output_path}")


@app.command("export")
def export_visits(
    path: Path = typer.Argument(..., help="Destination JSON file"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Write every visit record to a JSON file."""
    session = _open(config_path, None, verbose)
    session.export(path)
    console.print(f"Exported {len(session.records)} records to {path}")


@app.command("import")
def import_visits(
    path: Path = typer.Argument(..., exists=True, help="JSON file produced by export"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Replace all visit records with the contents of a JSON file."""
    session = _open(config_path, None, verbose)
    try:
        count = session.import_from(path, _confirmer(yes))
    except ImportFormatError as exc:
        console.print(f"[red]Import rejected:[/red] {exc}")
        raise typer.Exit(code=1)
    if count is None:
        console.print("Import cancelled.")
        return
    console.print(f"Imported {count} records.")


@tags_app.command("list")
def list_tags(
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show all tags with their footprint counts."""
    session = _open(config_path, None, verbose)
    table = Table("Tag", "Countries", "Footprints")
    for tag in session.tags:
        summary = summarize(session.records, tag)
        table.add_row(tag, str(summary.countries), str(summary.footprints))
    console.print(table)


@tags_app.command("add")
def add_tag(
    name: str = typer.Argument(...),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Create a new tag."""
    session = _open(config_path, None, verbose)
    tag = session.add_tag(name)
    if tag is None:
        console.print(f"[red]Tag {name!r} is empty or already exists[/red]")
        raise typer.Exit(code=1)
    console.print(f"Added tag {tag}")


@tags_app.command("rename")
def rename_tag(
    old: str = typer.Argument(...),
    new: str = typer.Argument(...),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Rename a tag and repoint its visits."""
    session = _open(config_path, None, verbose)
    tag = session.rename_tag(old, new)
    if tag is None:
        console.print(f"[red]Cannot rename {old!r} to {new!r}[/red]")
        raise typer.Exit(code=1)
    console.print(f"Renamed {old} to {tag}")


@tags_app.command("delete")
def delete_tag(
    name: str = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Delete a tag; its visits are kept."""
    session = _open(config_path, None, verbose)
    if name not in session.tags:
        console.print(f"[red]Unknown tag {name!r}[/red]")
        raise typer.Exit(code=1)
    if session.delete_tag(name, _confirmer(yes)):
        console.print(f"Deleted tag {name}; tags are now {', '.join(session.tags)}")


def _parse_date(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        console.print(f"[red]Invalid date {value!r}, expected YYYY-MM-DD[/red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
