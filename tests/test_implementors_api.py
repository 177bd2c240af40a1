from __future__ import annotations

from pathlib import Path


def _skip(msg: str) -> None:  # pragma: no cover
    try:
        import pytest  # type: ignore

        pytest.skip(msg)
    except Exception:
        raise RuntimeError(msg)


def _client(app):
    try:
        from fastapi.testclient import TestClient
    except Exception as e:  # pragma: no cover
        _skip(f"TestClient not available ({e!r}); install test extras to run this test")
        return None
    return TestClient(app)


def test_submit_list_and_get() -> None:
    from implview.runtime.app import create_app

    client = _client(create_app())

    assert client.get("/healthz").json() == {"ok": True}
    assert client.get("/api/events").json() == {"globalRevision": 0}

    res = client.post(
        "/api/implementors",
        json={"subject": "core/fmt/trait.Binary", "implementors": {"png": ["impl Binary for T"], "gl": []}},
    )
    assert res.status_code == 200
    assert res.json() == {"ok": True, "subject": "core/fmt/trait.Binary", "delivered": True}

    listing = client.get("/api/implementors").json()
    assert listing == [
        {
            "subject": "core/fmt/trait.Binary",
            "name": "core::fmt::Binary",
            "namespaceCount": 2,
            "implementorCount": 1,
        }
    ]

    one = client.get("/api/implementors/core/fmt/trait.Binary")
    assert one.status_code == 200
    assert one.json()["implementors"] == {"png": ["impl Binary for T"], "gl": []}
    assert client.get("/api/events").json() == {"globalRevision": 1}


def test_submit_validation_errors() -> None:
    from implview.runtime.app import create_app

    client = _client(create_app())

    assert client.post("/api/implementors", json={"implementors": {}}).status_code == 400
    assert client.post("/api/implementors", json={"subject": "a/trait.A"}).status_code == 400
    assert client.post("/api/implementors", json={"subject": "a/trait.A", "implementors": []}).status_code == 400
    bad_list = client.post("/api/implementors", json={"subject": "a/trait.A", "implementors": {"x": "y"}})
    assert bad_list.status_code == 400

    for subject in (None, 5, {"x": 1}, "  /  "):
        res = client.post("/api/implementors", json={"subject": subject, "implementors": {"a": []}})
        assert res.status_code == 400, subject

    for descs in ([None], [1], ["ok", {"x": 1}]):
        res = client.post("/api/implementors", json={"subject": "a/trait.A", "implementors": {"a": descs}})
        assert res.status_code == 400, descs

    # Nothing above reached the catalog.
    assert client.get("/api/implementors").json() == []
    assert client.get("/api/events").json() == {"globalRevision": 0}


def test_unknown_subject_is_404() -> None:
    from implview.runtime.app import create_app

    client = _client(create_app())
    assert client.get("/api/implementors/nope/trait.Nope").status_code == 404
    assert client.get("/implementors/nope/trait.Nope.js").status_code == 404


def test_data_file_rerendered(tmp_path: Path) -> None:
    from implview.io import parse_implementors_js, render_implementors_js
    from implview.runtime.app import create_app

    impl_root = tmp_path / "implementors"
    (impl_root / "rand").mkdir(parents=True)
    (impl_root / "rand" / "trait.Rng.js").write_text(
        render_implementors_js({"rand": ["impl Rng for XorShift"], "arrayvec": []}), encoding="utf-8"
    )

    client = _client(create_app(implementors_root=impl_root))
    res = client.get("/implementors/rand/trait.Rng.js")
    assert res.status_code == 200
    assert "javascript" in res.headers.get("content-type", "")
    assert parse_implementors_js(res.text) == {"arrayvec": [], "rand": ["impl Rng for XorShift"]}


def test_docs_root_served_with_implementors(tmp_path: Path) -> None:
    from implview.io import render_implementors_js
    from implview.runtime.app import create_app

    (tmp_path / "index.html").write_text("<html><body>docs</body></html>", encoding="utf-8")
    impl_dir = tmp_path / "implementors" / "std" / "io"
    impl_dir.mkdir(parents=True)
    (impl_dir / "trait.Seek.js").write_text(render_implementors_js({"sdl2": ["impl Seek"]}), encoding="utf-8")

    client = _client(create_app(docs_root=tmp_path))

    index = client.get("/")
    assert index.status_code == 200
    assert "docs" in index.text

    subjects = [s["subject"] for s in client.get("/api/implementors").json()]
    assert subjects == ["std/io/trait.Seek"]


def test_create_app_rejects_registry_with_other_consumer() -> None:
    import pytest

    from implview.core import ConsumerAlreadyRegisteredError, ImplementorRegistry
    from implview.runtime.app import create_app

    registry = ImplementorRegistry()
    registry.register_consumer(lambda table: None)

    with pytest.raises(ConsumerAlreadyRegisteredError):
        create_app(registry=registry)


def test_create_app_replays_injected_registry() -> None:
    from implview.core import ImplementorCatalog, ImplementorRegistry, SubjectTable
    from implview.runtime.app import create_app

    registry = ImplementorRegistry()
    registry.submit(SubjectTable("rand/trait.Rng", {"rand": []}))
    catalog = ImplementorCatalog()

    client = _client(create_app(catalog=catalog, registry=registry))
    assert [s["subject"] for s in client.get("/api/implementors").json()] == ["rand/trait.Rng"]


def test_reset_clears_catalog() -> None:
    from implview.runtime.app import create_app

    client = _client(create_app())
    client.post("/api/implementors", json={"subject": "a/trait.A", "implementors": {"x": []}})
    assert client.post("/api/reset").json() == {"ok": True}
    assert client.get("/api/implementors").json() == []
