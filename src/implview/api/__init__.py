from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import Response

from ..core.catalog import ImplementorCatalog, SubjectTable
from ..core.registry import ImplementorRegistry
from ..io.jsdata import render_implementors_js, subject_display_name


def _table_summary(table: SubjectTable) -> dict:
    return {
        "subject": table.subject,
        "name": subject_display_name(table.subject),
        "namespaceCount": len(table.groups),
        "implementorCount": table.implementor_count(),
    }


def _parse_groups(raw: object) -> dict[str, list[str]]:
    if not isinstance(raw, dict):
        raise ValueError("implementors must be an object mapping namespace -> list of descriptors")
    groups: dict[str, list[str]] = {}
    for ns, descs in raw.items():
        if not isinstance(descs, list):
            raise ValueError(f"implementors[{ns!r}] must be a list")
        if not all(isinstance(d, str) for d in descs):
            raise ValueError(f"implementors[{ns!r}] must contain only strings")
        groups[ns] = list(descs)
    return groups


def _parse_subject(raw: object) -> str:
    if not isinstance(raw, str):
        raise ValueError("subject must be a string")
    subject = raw.strip().strip("/")
    if not subject:
        raise ValueError("subject is required")
    return subject


def create_api_app(catalog: ImplementorCatalog, registry: ImplementorRegistry[SubjectTable]) -> FastAPI:
    app = FastAPI(title="implview", version="0.1.0")
    app.state.catalog = catalog
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/api/events")
    def events() -> dict[str, int]:
        # Minimal polling endpoint.
        return {"globalRevision": catalog.global_revision()}

    @app.get("/api/implementors")
    def list_implementors() -> list[dict]:
        return [_table_summary(t) for t in catalog.tables()]

    @app.get("/api/implementors/{subject:path}")
    def get_implementors(subject: str) -> dict:
        table = catalog.get(subject)
        if table is None:
            raise HTTPException(status_code=404, detail=f"Unknown subject: {subject}")
        return {
            "subject": table.subject,
            "name": subject_display_name(table.subject),
            "implementors": {ns: list(descs) for ns, descs in table.groups.items()},
        }

    @app.post("/api/implementors")
    def submit_implementors(body: dict) -> dict:
        try:
            subject = _parse_subject(body.get("subject"))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if "implementors" not in body:
            raise HTTPException(status_code=400, detail="Missing field: implementors")
        try:
            groups = _parse_groups(body.get("implementors"))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        registry.submit(SubjectTable(subject=subject, groups=groups))
        return {"ok": True, "subject": subject, "delivered": registry.is_active}

    @app.post("/api/reset")
    def reset_catalog() -> dict[str, bool]:
        catalog.reset()
        return {"ok": True}

    @app.get("/implementors/{path:path}", include_in_schema=False)
    def implementors_js(path: str) -> Response:
        if not path.endswith(".js"):
            raise HTTPException(status_code=404, detail="Not found")
        table = catalog.get(path[: -len(".js")])
        if table is None:
            raise HTTPException(status_code=404, detail=f"Unknown subject: {path}")
        return Response(content=render_implementors_js(table.groups), media_type="application/javascript")

    return app
