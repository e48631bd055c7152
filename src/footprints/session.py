from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from .config import AppConfig
from .persistence import (
    KeyValueStore,
    export_records,
    import_records,
    load_records,
    load_tags,
    save_records,
    save_tags,
)
from .renderer.surface import MapState
from .resolver import ingest, resolve
from .schemas import Candidate, Scope, VisitRecord
from .store import VisitLog, by_tag, exists_duplicate, sorted_by_date_desc
from .view import ALL_LAYERS, POINTS_LAYER, ViewContext, ViewController

LOGGER = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


@dataclass(frozen=True)
class AddOutcome:
    record: VisitRecord
    created: bool

    @property
    def notice(self) -> str:
        if self.created:
            return f"Added {self.record.place.name}"
        return f"{self.record.place.name} is already recorded for {self.record.tag}"


class FootprintsSession:
    """Visit log, active tag and scope, kept in sync with a map surface and a store."""

    def __init__(
        self,
        store: KeyValueStore,
        default_tags: Optional[List[str]] = None,
        surface: Optional[MapState] = None,
        config: Optional[AppConfig] = None,
    ):
        self.store = store
        self.config = config or AppConfig()
        tags = load_tags(store, default_tags or ["Me"])
        self.log = VisitLog(records=load_records(store), tags=tags)
        self.tag = self.log.tags[0]
        self.scope = Scope.WORLD
        self.surface = surface or MapState(ALL_LAYERS + [POINTS_LAYER])
        self.controller = ViewController(self.surface)
        self.controller.enter(self.context)

    @classmethod
    def from_config(cls, config: AppConfig) -> "FootprintsSession":
        return cls(
            KeyValueStore(config.storage.path), config.storage.default_tags, config=config
        )

    @property
    def records(self) -> List[VisitRecord]:
        return self.log.records

    @property
    def tags(self) -> List[str]:
        return self.log.tags

    @property
    def context(self) -> ViewContext:
        return ViewContext.of(self.log.records, self.tag, self.scope)

    def regions(self) -> set:
        return resolve(self.log.records, self.tag, self.scope)

    def history(self) -> List[VisitRecord]:
        return sorted_by_date_desc(by_tag(self.log.records, self.tag))

    # persistence is best effort; the in-memory log stays authoritative until restart
    def _persist_records(self) -> None:
        try:
            save_records(self.store, self.log.records)
        except OSError as exc:
            LOGGER.warning("Could not save records: %s", exc)

    def _persist_tags(self) -> None:
        try:
            save_tags(self.store, self.log.tags)
        except OSError as exc:
            LOGGER.warning("Could not save tags: %s", exc)

    def select_scope(self, scope: Scope) -> None:
        self.scope = scope
        self.controller.enter(self.context)

    def select_tag(self, tag: str) -> None:
        if tag not in self.log.tags:
            raise ValueError(f"Unknown tag: {tag}")
        self.tag = tag
        self.controller.refresh(self.context)

    def add_visit(self, candidate: Candidate, visit_date: Optional[str] = None) -> AddOutcome:
        record = ingest(candidate, self.tag, visit_date)
        existing = exists_duplicate(
            self.log.records, record.tag, record.place.name, record.place.country_iso2
        )
        if existing is not None:
            LOGGER.warning("Duplicate visit %s for tag %s", existing.place.name, existing.tag)
            self.controller.fly_to(existing)
            return AddOutcome(record=existing, created=False)

        self.log.add(record)
        self._persist_records()
        self.scope = self.controller.focus_new_visit(self.context, record)
        LOGGER.info("Added visit %s (%s) for %s", record.place.name, record.id, record.tag)
        return AddOutcome(record=record, created=True)

    def remove_visit(self, record_id: str) -> Optional[VisitRecord]:
        record = self.log.remove(record_id)
        if record is not None:
            self._persist_records()
            self.controller.refresh(self.context)
        return record

    def clear_tag(self, confirm: Confirm) -> int:
        if not confirm(f"Clear ALL footprints for tag {self.tag!r}?"):
            return 0
        removed = self.log.remove_tag_records(self.tag)
        self._persist_records()
        self.controller.refresh(self.context)
        return removed

    def add_tag(self, name: str) -> Optional[str]:
        tag = self.log.add_tag(name)
        if tag is not None:
            self._persist_tags()
            self.select_tag(tag)
        return tag

    def rename_tag(self, old: str, new: str) -> Optional[str]:
        tag = self.log.rename_tag(old, new)
        if tag is None:
            return None
        self._persist_tags()
        self._persist_records()
        if self.tag == old:
            self.tag = tag
        self.controller.refresh(self.context)
        return tag

    def delete_tag(self, name: str, confirm: Confirm) -> bool:
        if name not in self.log.tags or not confirm(f"Delete tag {name!r}?"):
            return False
        self.log.delete_tag(name)
        self._persist_tags()
        if self.tag == name or self.tag not in self.log.tags:
            self.tag = self.log.tags[0]
        self.controller.refresh(self.context)
        return True

    def export(self, path: Path) -> Path:
        return export_records(self.log.records, path)

    def import_from(self, path: Path, confirm: Confirm) -> Optional[int]:
        """Replace every record with the file's contents; ``None`` when declined."""
        records = import_records(path)
        if not confirm(f"Replace {len(self.log.records)} records with {len(records)} from {path}?"):
            return None
        self.log.replace_records(records)
        self._persist_records()
        self.controller.refresh(self.context)
        return len(records)
