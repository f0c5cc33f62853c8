"""
Tests API FastAPI — surface d'édition des pages (SQLite temporaire, stockage mocké).
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from page_blocks.app import app
from page_blocks.assets import ObjectStorage
from page_blocks.database import init_db
from page_blocks.router import get_sessions
from page_blocks.session import SessionRegistry

BASE = "https://store.example/storage/v1"
PNG = b"\x89PNG fake bytes"


@pytest.fixture
def http():
    m = MagicMock()
    m.post.return_value = MagicMock(status_code=200, text="")
    m.delete.return_value = MagicMock(status_code=200, text="")
    return m


@pytest.fixture
def client(tmp_path, http):
    init_db(str(tmp_path / "t.db"))
    registry = SessionRegistry(
        storage_factory=lambda: ObjectStorage(base_url=BASE, api_key="k", session=http),
        runner=lambda fn: fn(),
    )
    app.dependency_overrides[get_sessions] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


def _add(client, block_type, page="p1"):
    r = client.post(f"/pages/{page}/blocks", json={"type": block_type})
    assert r.status_code == 201
    return r.json()


# ── Catalogue ─────────────────────────────────────────────────────────────

def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_catalog(client):
    blocks = client.get("/pages/catalog").json()["blocks"]
    assert len(blocks) == 7
    assert blocks[0]["label"] == "Text Block"


# ── CRUD blocs ────────────────────────────────────────────────────────────

def test_add_block_returns_default(client):
    blk = _add(client, "text")
    assert blk["type"] == "text"
    assert blk["order"] == 0
    assert blk["config"] == {"content": "", "alignment": "left", "fontSize": "medium"}


def test_add_unknown_type_rejected(client):
    r = client.post("/pages/p1/blocks", json={"type": "video"})
    assert r.status_code == 422


def test_update_block(client):
    blk = _add(client, "gallery")
    r = client.put(f"/pages/p1/blocks/{blk['id']}", json={"config": {"title": "Photos", "gridView": 4}})
    assert r.status_code == 200
    assert r.json()["config"]["gridView"] == 4


def test_update_unknown_block_404(client):
    _add(client, "text")
    r = client.put("/pages/p1/blocks/nope", json={"config": {"content": "x"}})
    assert r.status_code == 404


def test_update_invalid_config_422(client):
    blk = _add(client, "text")
    r = client.put(f"/pages/p1/blocks/{blk['id']}", json={"config": {"content": "x", "alignment": "justify"}})
    assert r.status_code == 422
    listed = client.get("/pages/p1/blocks").json()["blocks"]
    assert listed[0]["config"]["alignment"] == "left"


def test_delete_and_move(client):
    a = _add(client, "text")
    b = _add(client, "cta")
    c = _add(client, "stats")

    seq = client.post("/pages/p1/blocks/2/move-up").json()["blocks"]
    assert [x["id"] for x in seq] == [a["id"], c["id"], b["id"]]

    seq = client.delete(f"/pages/p1/blocks/{c['id']}").json()["blocks"]
    assert [x["id"] for x in seq] == [a["id"], b["id"]]
    assert [x["order"] for x in seq] == [0, 1]

    assert client.delete(f"/pages/p1/blocks/{c['id']}").status_code == 404


def test_move_boundary_is_noop(client):
    a = _add(client, "text")
    seq = client.post("/pages/p1/blocks/0/move-up").json()["blocks"]
    assert [x["id"] for x in seq] == [a["id"]]


# ── Sauvegarde / affichage ────────────────────────────────────────────────

def test_save_and_view(client):
    t = _add(client, "text")
    client.put(f"/pages/p1/blocks/{t['id']}", json={"config": {"content": "Hello club"}})

    r = client.post("/pages/p1/save")
    assert r.json() == {"saved": True, "version": 1, "blocks": 1}

    html = client.get("/pages/p1").text
    assert "Hello club" in html
    assert 'class="block block--text"' in html


def test_save_version_conflict(client):
    _add(client, "text")
    assert client.post("/pages/p1/save", json={"expected_version": 0}).json()["version"] == 1
    r = client.post("/pages/p1/save", json={"expected_version": 0})
    assert r.status_code == 409
    assert client.post("/pages/p1/save", json={"expected_version": 1}).json()["version"] == 2


def test_view_unsaved_page_is_empty(client):
    _add(client, "text", page="draft")
    html = client.get("/pages/draft").text
    assert "block--text" not in html


def test_editor_html(client):
    assert "No sections added yet" in client.get("/pages/p2/editor").text
    _add(client, "cta", page="p2")
    html = client.get("/pages/p2/editor").text
    assert "block-editor--cta" in html
    assert "Required: title, link" in html


# ── Uploads ───────────────────────────────────────────────────────────────

def test_upload_image_into_gallery(client, http):
    g = _add(client, "gallery")
    client.put(f"/pages/p1/blocks/{g['id']}", json={"config": {"title": "Photos", "images": [""]}})

    r = client.post(
        f"/pages/p1/blocks/{g['id']}/slots/0/upload",
        files={"file": ("p.png", PNG, "image/png")},
    )
    assert r.status_code == 202
    assert r.json()["status"] == "idle"
    http.post.assert_called_once()

    images = client.get("/pages/p1/blocks").json()["blocks"][0]["config"]["images"]
    assert images[0].startswith(f"{BASE}/object/public/cca-assets/blocks/")
    assert client.get("/pages/p1/uploads").json() == {"slots": []}


def test_upload_rejected_type(client, http):
    g = _add(client, "gallery")
    client.put(f"/pages/p1/blocks/{g['id']}", json={"config": {"title": "Photos", "images": [""]}})
    r = client.post(
        f"/pages/p1/blocks/{g['id']}/slots/0/upload",
        files={"file": ("a.gif", b"GIF89a", "image/gif")},
    )
    assert r.status_code == 400
    http.post.assert_not_called()


def test_upload_unknown_block(client):
    r = client.post("/pages/p1/blocks/nope/slots/0/upload", files={"file": ("p.png", PNG, "image/png")})
    assert r.status_code == 404
