from __future__ import annotations

from pathlib import Path

import pytest

import implview
from implview.io import render_implementors_js
from implview.runtime.server import ImplviewServer
from implview.sdk.client import ImplviewClient


@pytest.fixture
def start_server():
    started: list[ImplviewServer] = []

    def _start(**kwargs) -> ImplviewServer:
        srv = implview.run(host="127.0.0.1", port=0, open_browser=False, new_server=True, log_level="warning", **kwargs)
        assert isinstance(srv, ImplviewServer)
        started.append(srv)
        return srv

    yield _start

    for srv in started:
        srv.shutdown()


def test_attached_client_sees_tables_of_running_server(start_server) -> None:
    server = start_server()
    server.submit("std/io/trait.Seek", {"sdl2": ["impl Seek for RWops"]})

    attached = implview.run(host=server.host, port=server.port, open_browser=False)

    assert isinstance(attached, ImplviewClient)
    assert attached.base_url == f"http://{server.host}:{server.port}"
    assert attached.get_implementors("std/io/trait.Seek") == {"sdl2": ["impl Seek for RWops"]}


def test_env_url_attaches_unless_new_server(start_server, monkeypatch) -> None:
    s1 = start_server()
    monkeypatch.setenv("IMPLVIEW_URL", f"{s1.host}:{s1.port}")

    attached = implview.run(open_browser=False)
    assert isinstance(attached, ImplviewClient)
    assert attached.base_url == f"http://{s1.host}:{s1.port}"

    s2 = start_server()
    assert s2.port != s1.port


def test_shutdown_releases_port_for_a_fresh_server(start_server) -> None:
    first = start_server()
    first.submit("rand/trait.Rng", {"rand": []})
    first.shutdown()

    second = implview.run(host=first.host, port=first.port, open_browser=False, log_level="warning")
    try:
        # Nothing answered on the port, so a new server was started with an empty catalog.
        assert isinstance(second, ImplviewServer)
        assert second.list_subjects() == []
    finally:
        if isinstance(second, ImplviewServer):
            second.shutdown()


def test_client_round_trip_against_running_server(start_server, tmp_path: Path) -> None:
    server = start_server()
    client = ImplviewClient(server.url)

    client.submit("rand/trait.Rng", {"rand": ["impl Rng for StdRng"], "arrayvec": []})
    assert client.get_implementors("rand/trait.Rng") == {"rand": ["impl Rng for StdRng"], "arrayvec": []}

    data_file = tmp_path / "core" / "fmt" / "trait.Binary.js"
    data_file.parent.mkdir(parents=True)
    data_file.write_text(render_implementors_js({"png": ["impl Binary for Transformations"]}), encoding="utf-8")
    assert client.submit_file(data_file, tmp_path) == "core/fmt/trait.Binary"

    subjects = [s["subject"] for s in client.list_subjects()]
    assert subjects == ["core/fmt/trait.Binary", "rand/trait.Rng"]

    client.reset()
    assert client.list_subjects() == []

    with pytest.raises(KeyError):
        client.get_implementors("rand/trait.Rng")
