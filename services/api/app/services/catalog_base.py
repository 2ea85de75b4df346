from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol


class CatalogSourceError(Exception):
    """Base class for realtime catalog source errors."""


class CatalogSourceMissingError(CatalogSourceError):
    def __init__(self, package: str, group: str) -> None:
        super().__init__(
            f"{package} is not installed. Install the optional group:\n"
            f"  pip install -e '.[{group}]'"
        )
        self.package = package


class CatalogListenError(CatalogSourceError):
    def __init__(self, collection: str, reason: str) -> None:
        super().__init__(f"Listening to {collection!r} failed: {reason}")
        self.collection = collection


@dataclass(frozen=True, slots=True)
class SourceDocument:
    document_id: str | None
    data: dict[str, Any]


@dataclass(frozen=True, slots=True)
class CatalogDelivery:
    """One full replacement of a collection's contents."""

    documents: list[SourceDocument] = field(default_factory=list)
    # Monotonic per subscription when the source can provide one.
    sequence: int | None = None


class ListenerRegistration(Protocol):
    def remove(self) -> None: ...


SnapshotCallback = Callable[[CatalogDelivery], None]
ErrorCallback = Callable[[Exception], None]


class RealtimeCatalogSource(Protocol):
    name: str

    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> ListenerRegistration: ...

    def fetch(self, collection: str) -> CatalogDelivery: ...
