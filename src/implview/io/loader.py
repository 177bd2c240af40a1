from __future__ import annotations

import logging
from pathlib import Path

from ..core.catalog import SubjectTable
from ..core.registry import ImplementorRegistry
from .jsdata import load_implementors_file, subject_from_path


logger = logging.getLogger(__name__)


def iter_implementor_files(root: str | Path) -> list[Path]:
    root_path = Path(root)
    if not root_path.is_dir():
        raise FileNotFoundError(f"Implementors directory not found: {root_path}")
    return sorted(p for p in root_path.rglob("*.js") if p.is_file())


def load_implementors_dir(root: str | Path, registry: ImplementorRegistry[SubjectTable]) -> int:
    """Submit one `SubjectTable` per data file under `root`.

    Files are submitted in sorted path order. Returns the number submitted.
    """

    files = iter_implementor_files(root)
    for path in files:
        table = SubjectTable(subject=subject_from_path(path, root), groups=load_implementors_file(path))
        registry.submit(table)
        logger.debug("submitted %s (%d namespaces)", table.subject, len(table.groups))

    logger.info("loaded %d implementor table(s) from %s", len(files), root)
    return len(files)
