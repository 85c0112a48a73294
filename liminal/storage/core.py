"""Storage initialization, path helpers, and slug utilities."""

import re
import unicodedata
from pathlib import Path

_data_dir: Path | None = None


def slugify(title: str) -> str:
    """Convert a title to a filesystem-safe slug.

    "Ada Lovelace 2026-10-17T09:30" → "ada-lovelace-2026-10-17t09-30"
    """
    text = unicodedata.normalize("NFKD", title)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"['\"]", "", text)
    text = re.sub(r"[^a-z0-9]+", "-", text)
    text = text.strip("-")
    return text or "untitled"


def init_storage(data_dir: Path) -> None:
    global _data_dir
    _data_dir = Path(data_dir)
    _data_dir.mkdir(parents=True, exist_ok=True)
    exports_dir().mkdir(exist_ok=True)


def data_dir() -> Path:
    assert _data_dir is not None, "Call init_storage() before using storage"
    return _data_dir


def exports_dir() -> Path:
    return data_dir() / "exports"
