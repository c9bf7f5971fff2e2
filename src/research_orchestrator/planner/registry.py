"""Durable index of planning artifacts, kept inside the document store.

The planner sub-agent writes one metadata document per topic
(``{dir}/{slug}_paths.json``). After each planning run those documents are
folded into a registry document (``{dir}/index.json``) keyed by slug, and the
most recently registered entry is also cached in a pointer document
(``{dir}/current_paths.json``) so "the current plan" resolves without a scan.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from research_orchestrator.planner.documents import decode_document, utc_now
from research_orchestrator.planner.paths import METADATA_SUFFIX, PLANNER_DIR

logger = logging.getLogger(__name__)

POINTER_FILENAME = "current_paths.json"
REGISTRY_FILENAME = "index.json"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


class PlannerPathsRecord(_CamelModel):
    """The artifact paths a registry entry points at."""

    slug: str
    analysis: str
    scope: str
    plan: str
    metadata: str
    optimized: str | None = None
    dir: str | None = None

    def required(self) -> list[str]:
        """Paths that artifact-dependent sub-agents need present."""
        return [self.analysis, self.scope, self.plan]


class PlannerMetadata(_CamelModel):
    """Per-topic metadata document written by the planner.

    Unknown keys are ignored. ``warnings`` and ``timestamps`` are normalized:
    non-string values are dropped rather than failing the document.
    """

    topic: str | None = None
    context: str | None = None
    warnings: list[str] = Field(default_factory=list)
    paths: PlannerPathsRecord
    timestamps: dict[str, str] = Field(default_factory=dict)

    @field_validator("topic", "context", mode="before")
    @classmethod
    def _optional_string(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("warnings", mode="before")
    @classmethod
    def _string_list(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]

    @field_validator("timestamps", mode="before")
    @classmethod
    def _string_record(cls, value: Any) -> dict[str, str]:
        if not isinstance(value, dict):
            return {}
        return {key: item for key, item in value.items() if isinstance(item, str)}


class PlannerRegistryEntry(_CamelModel):
    """One registered planning run."""

    slug: str
    topic: str | None = None
    context: str | None = None
    metadata_path: str
    paths: PlannerPathsRecord
    timestamps: dict[str, str] | None = None
    warnings: list[str] | None = None
    updated_at: str

    @classmethod
    def from_metadata(
        cls,
        metadata_path: str,
        metadata: PlannerMetadata,
        *,
        updated_at: str | None = None,
    ) -> PlannerRegistryEntry:
        """Build an entry from a decoded metadata document.

        ``updated_at`` falls back to the plan timestamp, then to now.
        """
        timestamps = metadata.timestamps or None
        return cls(
            slug=metadata.paths.slug,
            topic=metadata.topic,
            context=metadata.context,
            metadata_path=metadata_path,
            paths=metadata.paths,
            timestamps=timestamps,
            warnings=metadata.warnings or None,
            updated_at=(timestamps or {}).get("plan") or updated_at or utc_now(),
        )


class PlannerRegistry(_CamelModel):
    """All registered planning runs, keyed by slug."""

    active_slug: str = ""
    updated_at: str = ""
    entries: dict[str, PlannerRegistryEntry] = Field(default_factory=dict)

    def active_entry(self) -> PlannerRegistryEntry | None:
        """Return the active entry, else the first entry, else None."""
        if self.active_slug and self.active_slug in self.entries:
            return self.entries[self.active_slug]
        return next(iter(self.entries.values()), None)

    def upsert(self, entry: PlannerRegistryEntry) -> None:
        """Insert or fully replace the entry for ``entry.slug`` and make it active."""
        self.entries[entry.slug] = entry
        self.active_slug = entry.slug
        self.updated_at = entry.updated_at


def decode_registry(content: str | None) -> PlannerRegistry | None:
    """Decode a registry document, skipping individually invalid entries."""
    if content is None:
        return None
    try:
        raw = json.loads(content)
    except json.JSONDecodeError:
        return None
    if not isinstance(raw, dict):
        return None

    raw_entries = raw.get("entries")
    entries: dict[str, PlannerRegistryEntry] = {}
    if isinstance(raw_entries, dict):
        for slug, raw_entry in raw_entries.items():
            try:
                entries[slug] = PlannerRegistryEntry.model_validate(raw_entry)
            except ValidationError:
                logger.warning("Dropping invalid planner registry entry '%s'", slug)

    active_slug = raw.get("activeSlug")
    updated_at = raw.get("updatedAt")
    return PlannerRegistry(
        active_slug=active_slug if isinstance(active_slug, str) else "",
        updated_at=updated_at if isinstance(updated_at, str) else "",
        entries=entries,
    )


class PlannerArtifactIndex:
    """Reads and maintains the planner registry and pointer documents.

    Example::

        index = PlannerArtifactIndex()
        entry = index.apply_update(previous_documents, merged_documents)
        index.missing_artifacts(merged_documents, entry)  # []

    Args:
        directory: Directory prefix holding planner documents.
    """

    def __init__(self, directory: str = PLANNER_DIR) -> None:
        self.directory = directory.rstrip("/")
        self.pointer_path = f"{self.directory}/{POINTER_FILENAME}"
        self.registry_path = f"{self.directory}/{REGISTRY_FILENAME}"

    def __repr__(self) -> str:
        return f"PlannerArtifactIndex(directory={self.directory!r})"

    def is_metadata_path(self, path: str) -> bool:
        """Return True for per-topic metadata documents.

        The pointer document shares the metadata suffix but is never metadata.
        """
        return path.endswith(METADATA_SUFFIX) and path not in (
            self.pointer_path,
            self.registry_path,
        )

    def entry_from_metadata(
        self,
        metadata_path: str,
        content: str | None,
        *,
        previous: PlannerRegistryEntry | None = None,
    ) -> PlannerRegistryEntry | None:
        """Decode a metadata document into a registry entry, or None if invalid.

        When the metadata carries no plan timestamp and ``previous`` describes
        the same run, the previous ``updated_at`` is kept so that re-applying
        identical input yields identical documents.
        """
        metadata = decode_document(content, PlannerMetadata)
        if metadata is None:
            return None

        entry = PlannerRegistryEntry.from_metadata(metadata_path, metadata)
        if (
            previous is not None
            and "plan" not in metadata.timestamps
            and previous.model_dump(exclude={"updated_at"})
            == entry.model_dump(exclude={"updated_at"})
        ):
            return previous
        return entry

    def resolve_active_entry(self, documents: Mapping[str, str]) -> PlannerRegistryEntry | None:
        """Resolve the current planning entry.

        Priority: the pointer document, then the registry's active (or first)
        entry, then the first valid metadata document found by scanning.
        """
        pointer = decode_document(documents.get(self.pointer_path), PlannerRegistryEntry)
        if pointer is not None:
            return pointer

        registry = decode_registry(documents.get(self.registry_path))
        if registry is not None:
            active = registry.active_entry()
            if active is not None:
                return active

        for path, content in documents.items():
            if not self.is_metadata_path(path):
                continue
            entry = self.entry_from_metadata(path, content)
            if entry is not None:
                return entry
        return None

    @staticmethod
    def missing_artifacts(
        documents: Mapping[str, str],
        entry: PlannerRegistryEntry,
    ) -> list[str]:
        """Return the entry's required artifact paths absent from ``documents``."""
        return [path for path in entry.paths.required() if path not in documents]

    def apply_update(
        self,
        previous_documents: Mapping[str, str],
        new_documents: MutableMapping[str, str],
    ) -> PlannerRegistryEntry | None:
        """Fold metadata documents into the registry and refresh the pointer.

        Invalid metadata documents are skipped. Each valid entry fully replaces
        any entry with the same slug. When at least one entry is registered,
        the registry and pointer documents are written into ``new_documents``.

        Args:
            previous_documents: Documents before the planning run.
            new_documents: Documents after the planning run; mutated in place.

        Returns:
            The last registered entry, or None if nothing valid was found.
        """
        metadata_paths = [path for path in new_documents if self.is_metadata_path(path)]
        if not metadata_paths:
            return None
        # Documents written by this run go last so the pointer names one of them
        metadata_paths.sort(key=lambda path: previous_documents.get(path) != new_documents[path])

        registry_source = new_documents.get(self.registry_path)
        if registry_source is None:
            registry_source = previous_documents.get(self.registry_path)
        registry = decode_registry(registry_source) or PlannerRegistry()

        latest: PlannerRegistryEntry | None = None
        for path in metadata_paths:
            entry = self.entry_from_metadata(
                path,
                new_documents[path],
                previous=registry.entries.get(_slug_hint(new_documents[path])),
            )
            if entry is None:
                logger.warning("Skipping invalid planner metadata document %s", path)
                continue
            registry.upsert(entry)
            latest = entry

        if latest is None:
            return None

        new_documents[self.registry_path] = registry.to_json()
        new_documents[self.pointer_path] = latest.to_json()
        logger.info(
            "Registered planner artifacts for '%s' (%d topics)",
            latest.slug,
            len(registry.entries),
        )
        return latest


def _slug_hint(content: str) -> str:
    metadata = decode_document(content, PlannerMetadata)
    return metadata.paths.slug if metadata is not None else ""
