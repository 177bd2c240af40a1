from __future__ import annotations

import os
from pathlib import Path

from fastapi import FastAPI

from ..api import create_api_app
from ..core.catalog import ImplementorCatalog, SubjectTable
from ..core.registry import ImplementorRegistry
from ..io.loader import load_implementors_dir
from .web import mount_docs


def create_app(
    *,
    docs_root: str | Path | None = None,
    implementors_root: str | Path | None = None,
    catalog: ImplementorCatalog | None = None,
    registry: ImplementorRegistry[SubjectTable] | None = None,
) -> FastAPI:
    """Create the full app: API + (optional) static documentation site.

    Data tables found under `implementors_root` (default:
    `<docs_root>/implementors` when it exists) are submitted before the
    catalog attaches, so they are replayed through the registry exactly like
    scripts that load ahead of the page.
    """

    if docs_root is None:
        docs_root = os.getenv("IMPLVIEW_DOCS_ROOT") or None

    catalog = catalog if catalog is not None else ImplementorCatalog()
    registry = registry if registry is not None else ImplementorRegistry()

    if implementors_root is None and docs_root is not None:
        candidate = Path(docs_root) / "implementors"
        if candidate.is_dir():
            implementors_root = candidate

    if implementors_root is not None:
        load_implementors_dir(implementors_root, registry)

    # Raises ConsumerAlreadyRegisteredError if `registry` already feeds another consumer.
    catalog.attach(registry)

    app = create_api_app(catalog, registry)

    # Mounted last: it catches every path the API does not handle.
    if docs_root is not None:
        mount_docs(app, docs_root)

    return app
