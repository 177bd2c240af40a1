from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles


def mount_docs(app: FastAPI, docs_root: str | Path) -> None:
    """Serve a generated documentation site from the same FastAPI app.

    The site is mounted at `/` after every API route, so `/api/...`, `/healthz`
    and the re-rendered `/implementors/...` data files take precedence over
    files on disk.
    """

    root = Path(docs_root).resolve()
    if not root.is_dir():
        raise FileNotFoundError(f"Documentation root not found: {root}")

    app.mount("/", StaticFiles(directory=str(root), html=True), name="docs")
