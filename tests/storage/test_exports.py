"""Tests for exported story storage."""

import json

from liminal import storage


def _export(name="Ada", archetype="Undefined", time="2026-10-17T09:30:00.000Z"):
    return json.dumps({"playerName": name, "archetype": archetype, "exportTime": time, "fullLog": []}, indent=2)


def test_save_and_get():
    slug = storage.save_export("Ada 3f9a1c2e", _export())
    assert slug == "ada-3f9a1c2e"
    data = storage.get_export(slug)
    assert data["playerName"] == "Ada"


def test_export_stored_verbatim():
    story_json = _export()
    slug = storage.save_export("Ada", story_json)
    assert (storage.exports_dir() / f"{slug}.json").read_text() == story_json


def test_slug_collision():
    assert storage.save_export("Ada", _export()) == "ada"
    assert storage.save_export("Ada", _export()) == "ada-2"
    assert storage.save_export("Ada", _export()) == "ada-3"


def test_list_exports():
    storage.save_export("Bob", _export(name="Bob", archetype="Agent of Chaos"))
    storage.save_export("Ada", _export())
    assert storage.list_exports() == [
        {"slug": "ada", "playerName": "Ada", "archetype": "Undefined", "exportTime": "2026-10-17T09:30:00.000Z"},
        {"slug": "bob", "playerName": "Bob", "archetype": "Agent of Chaos", "exportTime": "2026-10-17T09:30:00.000Z"},
    ]


def test_list_exports_empty():
    assert storage.list_exports() == []


def test_get_missing():
    assert storage.get_export("nope") is None


def test_delete_export():
    slug = storage.save_export("Ada", _export())
    assert storage.delete_export(slug) is True
    assert storage.get_export(slug) is None
    assert storage.delete_export(slug) is False
