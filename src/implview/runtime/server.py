from __future__ import annotations

import contextlib
import os
import socket
import threading
import time
import webbrowser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence

import uvicorn

from ..sdk.client import ImplviewClient
from .app import create_app


@dataclass(frozen=True)
class ImplviewServer:
    host: str
    port: int
    url: str
    _server: uvicorn.Server | None = field(default=None, repr=False, compare=False)
    _thread: threading.Thread | None = field(default=None, repr=False, compare=False)

    def shutdown(self, *, timeout_s: float = 5.0) -> None:
        """Stop the background uvicorn server and wait for its thread to exit."""
        if self._server is None or self._thread is None:
            return
        self._server.should_exit = True
        self._thread.join(timeout_s)
        if self._thread.is_alive():
            raise RuntimeError(f"Server did not stop within {timeout_s:.1f}s")

    def _as_client(self) -> ImplviewClient:
        return ImplviewClient(self.url.rstrip("/"))

    def submit(
        self,
        subject: str,
        implementors: Mapping[str, Sequence[str]],
        *,
        timeout_s: float = 10.0,
    ) -> None:
        """Submit one implementor table to this server."""
        self._as_client().submit(subject, implementors, timeout_s=timeout_s)

    def list_subjects(self, *, timeout_s: float = 10.0) -> list[dict]:
        return self._as_client().list_subjects(timeout_s=timeout_s)

    def get_implementors(self, subject: str, *, timeout_s: float = 10.0) -> dict[str, list[str]]:
        return self._as_client().get_implementors(subject, timeout_s=timeout_s)


def _find_free_port(host: str) -> int:
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return int(s.getsockname()[1])


def _normalize_base_url(url: str) -> str:
    url = url.strip()
    if not url:
        return ""
    # Allow passing just host:port.
    if "://" not in url:
        url = "http://" + url
    return url.rstrip("/")


def _is_server_alive(base_url: str, *, timeout_s: float = 0.2) -> bool:
    """Best-effort probe to determine if an implview server is reachable."""

    import httpx

    try:
        with httpx.Client(base_url=base_url, timeout=timeout_s) as client:
            r = client.get("/healthz")
            if r.status_code != 200:
                return False
            data = r.json()
            return bool(data.get("ok"))
    except (httpx.HTTPError, ValueError):
        return False


def _wait_started(server: uvicorn.Server, *, timeout_s: float) -> None:
    deadline = time.monotonic() + timeout_s
    while not server.started:
        if time.monotonic() > deadline:
            raise RuntimeError(f"Server did not start within {timeout_s:.1f}s")
        time.sleep(0.01)


def run(
    *,
    host: str = "127.0.0.1",
    port: int = 0,
    docs_root: str | Path | None = None,
    implementors_root: str | Path | None = None,
    open_browser: bool = True,
    log_level: str = "info",
    access_log: bool = False,
    new_server: bool = False,
    connect_timeout_s: float = 0.2,
    startup_timeout_s: float = 10.0,
) -> ImplviewServer | ImplviewClient:
    """Start implview (API + documentation site) with a single Python call.

    Behavior:
    - If IMPLVIEW_URL is set, we *attach* to that existing server (client mode) unless
      `new_server=True`.
    - Otherwise, if `port != 0` and a server is already reachable at http://{host}:{port},
      we attach to it (client mode) unless `new_server=True`.
    - Otherwise we start a new local server (server mode) and return an `ImplviewServer`.

    Notes:
    - `port=0` means "pick a free port", so there's nothing to attach to.
    - Uvicorn's per-request access log is off by default because the documentation
      pages poll `/api/events`.
    """

    env_url = _normalize_base_url(os.getenv("IMPLVIEW_URL", ""))

    # 1) Try attaching to an explicitly provided server.
    if env_url and not new_server:
        if _is_server_alive(env_url, timeout_s=connect_timeout_s):
            if open_browser:
                webbrowser.open(env_url + "/")
            return ImplviewClient(env_url)

    # 2) Try attaching to host/port if they are explicitly chosen.
    if port != 0 and not new_server:
        default_url = _normalize_base_url(f"http://{host}:{port}")
        if _is_server_alive(default_url, timeout_s=connect_timeout_s):
            if open_browser:
                webbrowser.open(default_url + "/")
            return ImplviewClient(default_url)

    # 3) Start a fresh server.
    if port == 0:
        port = _find_free_port(host)

    app = create_app(docs_root=docs_root, implementors_root=implementors_root)

    config = uvicorn.Config(app, host=host, port=port, log_level=log_level, access_log=access_log)
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()
    _wait_started(server, timeout_s=startup_timeout_s)

    url = f"http://{host}:{port}/"
    if open_browser:
        webbrowser.open(url)

    return ImplviewServer(host=host, port=port, url=url, _server=server, _thread=thread)
