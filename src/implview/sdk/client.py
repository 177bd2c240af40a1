from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence
from urllib.parse import quote

from ..io.jsdata import load_implementors_file, subject_from_path


class ImplviewClient:
    """HTTP client for submitting implementor tables to a running implview server.

    Contract (current):
    - POST /api/implementors                 (JSON: {"subject", "implementors"})
    - GET  /api/implementors                 (subject summaries)
    - GET  /api/implementors/{subject}       (one table)
    - POST /api/reset
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8000") -> None:
        self.base_url = base_url.rstrip("/")

    def submit(
        self,
        subject: str,
        implementors: Mapping[str, Sequence[str]],
        *,
        timeout_s: float = 10.0,
    ) -> dict[str, Any]:
        import httpx

        body = {
            "subject": subject,
            "implementors": {str(ns): [str(d) for d in descs] for ns, descs in implementors.items()},
        }
        with httpx.Client(base_url=self.base_url, timeout=timeout_s) as client:
            res = client.post("/api/implementors", json=body)
            if res.status_code >= 400:
                raise RuntimeError(f"Submit failed: {res.status_code} {res.text}")
            return res.json()

    def submit_file(self, path: str | Path, root: str | Path, *, timeout_s: float = 10.0) -> str:
        """Parse a generated `trait.*.js` file and submit it. Returns the subject."""

        subject = subject_from_path(path, root)
        self.submit(subject, load_implementors_file(path), timeout_s=timeout_s)
        return subject

    def list_subjects(self, *, timeout_s: float = 10.0) -> list[dict[str, Any]]:
        import httpx

        with httpx.Client(base_url=self.base_url, timeout=timeout_s) as client:
            res = client.get("/api/implementors")
            if res.status_code >= 400:
                raise RuntimeError(f"Failed to list subjects: {res.status_code} {res.text}")
            return list(res.json())

    def get_implementors(self, subject: str, *, timeout_s: float = 10.0) -> dict[str, list[str]]:
        import httpx

        with httpx.Client(base_url=self.base_url, timeout=timeout_s) as client:
            res = client.get(f"/api/implementors/{quote(subject.strip('/'))}")
            if res.status_code == 404:
                raise KeyError(subject)
            if res.status_code >= 400:
                raise RuntimeError(f"Failed to get implementors: {res.status_code} {res.text}")
            data = res.json()
            return {str(k): list(v) for k, v in dict(data.get("implementors") or {}).items()}

    def reset(self, *, timeout_s: float = 10.0) -> None:
        import httpx

        with httpx.Client(base_url=self.base_url, timeout=timeout_s) as client:
            res = client.post("/api/reset")
            if res.status_code >= 400:
                raise RuntimeError(f"Reset failed: {res.status_code} {res.text}")
