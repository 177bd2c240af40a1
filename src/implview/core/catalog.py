from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from .registry import ImplementorRegistry


ImplementorGroup = Mapping[str, Sequence[str]]


@dataclass(frozen=True)
class SubjectTable:
    """One generated data table together with the subject it belongs to.

    `subject` is the path-like name of the data file without extension, e.g.
    `core/fmt/trait.Binary`. `groups` maps a namespace (crate) name to its
    rendered implementor descriptors. Namespaces with no implementors map to
    an empty sequence.
    """

    subject: str
    groups: ImplementorGroup = field(default_factory=dict)

    def implementor_count(self) -> int:
        return sum(len(v) for v in self.groups.values())


class ImplementorCatalog:
    """Latest table per subject, fed by an `ImplementorRegistry`."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._tables: dict[str, SubjectTable] = {}
        self._global_revision = 0

    def attach(self, registry: ImplementorRegistry[SubjectTable]) -> None:
        registry.register_consumer(self.consume)

    def consume(self, table: SubjectTable) -> None:
        with self._lock:
            # Each data file is self-contained: a newer table replaces the old one.
            self._tables[table.subject] = table
            self._global_revision += 1

    def get(self, subject: str) -> SubjectTable | None:
        with self._lock:
            return self._tables.get(subject)

    def subjects(self) -> list[str]:
        with self._lock:
            return sorted(self._tables)

    def tables(self) -> list[SubjectTable]:
        with self._lock:
            return [self._tables[s] for s in sorted(self._tables)]

    def namespaces(self, subject: str) -> list[str]:
        with self._lock:
            table = self._tables.get(subject)
            if table is None:
                raise KeyError(subject)
            return sorted(table.groups)

    def global_revision(self) -> int:
        with self._lock:
            return self._global_revision

    def reset(self) -> None:
        with self._lock:
            self._tables.clear()
            self._global_revision += 1
