"""Virtual document store shared between nested agent runs.

Documents are plain ``path -> content`` strings. There are no directory
entities: a "directory" is only a key prefix, and listing is a prefix filter.
Writes fully overwrite and nothing is ever deleted.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping


def merge_documents(parent: Mapping[str, str], child: Mapping[str, str] | None) -> dict[str, str]:
    """Overlay a child's documents onto the parent's.

    Paths absent from ``child`` keep the parent's value; paths present in both
    take the child's value. Neither input is modified.

    Args:
        parent: Documents visible before the child ran.
        child: Documents returned by the child, or None.

    Returns:
        A new merged mapping.
    """
    merged = dict(parent)
    if child:
        merged.update(child)
    return merged


class DocumentStore(Mapping[str, str]):
    """Ordered path-to-content map standing in for a filesystem.

    Iteration follows first-write order, so snapshots and merges are
    deterministic.

    Example::

        store = DocumentStore({"/notes.md": "draft"})
        store.write("/research/plans/a_plan.json", "{}")
        store.list("/research/plans/")  # ['/research/plans/a_plan.json']
    """

    def __init__(self, documents: Mapping[str, str] | None = None) -> None:
        self._documents: dict[str, str] = dict(documents or {})

    def __getitem__(self, path: str) -> str:
        return self._documents[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __repr__(self) -> str:
        return f"DocumentStore(documents={len(self._documents)})"

    def write(self, path: str, content: str) -> None:
        """Create or fully overwrite a document."""
        self._documents[path] = content

    def list(self, prefix: str = "") -> list[str]:
        """Return document paths starting with ``prefix``, sorted."""
        return sorted(path for path in self._documents if path.startswith(prefix))

    def merge(self, documents: Mapping[str, str] | None) -> None:
        """Overlay ``documents`` onto this store in place."""
        if documents:
            self._documents.update(documents)

    def snapshot(self) -> dict[str, str]:
        """Return a shallow copy of the current documents."""
        return dict(self._documents)

    def copy(self) -> DocumentStore:
        """Return an independent store with the same documents."""
        return DocumentStore(self._documents)
