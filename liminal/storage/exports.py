"""Exported story snapshots, one JSON file per export."""

import json
from typing import Any

from .core import exports_dir, slugify


def _unique_slug(base: str) -> str:
    slug = base
    n = 2
    while (exports_dir() / f"{slug}.json").exists():
        slug = f"{base}-{n}"
        n += 1
    return slug


def save_export(slug_source: str, story_json: str) -> str:
    """Persist an export string verbatim. Returns the slug it was stored under."""
    slug = _unique_slug(slugify(slug_source))
    (exports_dir() / f"{slug}.json").write_text(story_json)
    return slug


def list_exports() -> list[dict[str, Any]]:
    """Summaries of every stored export, newest file name last."""
    result = []
    for path in sorted(exports_dir().glob("*.json")):
        data = json.loads(path.read_text())
        result.append({
            "slug": path.stem,
            "playerName": data.get("playerName"),
            "archetype": data.get("archetype"),
            "exportTime": data.get("exportTime"),
        })
    return result


def get_export(slug: str) -> dict[str, Any] | None:
    path = exports_dir() / f"{slug}.json"
    if not path.is_file():
        return None
    return json.loads(path.read_text())


def delete_export(slug: str) -> bool:
    path = exports_dir() / f"{slug}.json"
    if not path.is_file():
        return False
    path.unlink()
    return True
