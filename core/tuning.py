"""core/tuning.py — Data-driven tuning constants.

The runtime-tunable numbers (player speed, sight radius, viewport,
fog, world seed...) live in ``data/tuning.toml`` and are loaded once
at startup.  Every call site carries its own default, so the engine
runs unchanged when the file is missing or a key is absent::

    from core import tuning
    speed = tuning.get("engine", "player_speed", 128.0)
    player_cfg = tuning.section("player")

Hot-reload: call ``reload()`` to re-read the file.  In-game, press F5.
"""

from __future__ import annotations
from pathlib import Path

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib

DEFAULT_PATH = Path(__file__).resolve().parent.parent / "data" / "tuning.toml"

_data: dict = {}
_path: Path | None = None


def load(path: str | Path | None = None) -> None:
    """Load (or reload) tuning constants from *path* (default data/tuning.toml)."""
    global _data, _path
    _path = Path(path) if path is not None else DEFAULT_PATH

    if not _path.exists():
        print(f"[TUNING] {_path} not found, using defaults")
        _data = {}
        return

    with open(_path, "rb") as f:
        _data = tomllib.load(f)
    print(f"[TUNING] Loaded {_count_leaves(_data)} values from {_path}")


def reload() -> None:
    """Re-read the tuning file from disk (hot-reload)."""
    load(_path)


def clear() -> None:
    """Forget every loaded value so callers fall back to their defaults."""
    global _data
    _data = {}


def _walk(section_path: str) -> dict | None:
    """The table at dotted *section_path*, or None."""
    node = _data
    for part in section_path.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    return node if isinstance(node, dict) else None


def get(section: str, key: str, default=None):
    """Read a tuning value.

    *section* uses dot-notation for nested tables, e.g. ``"world.densities"``
    looks up ``[world.densities]``.

    >>> get("engine", "visibility_radius", 8)
    8
    """
    table = _walk(section)
    if table is None:
        return default
    return table.get(key, default)


def section(section_path: str) -> dict:
    """A shallow copy of a whole table, or an empty dict."""
    table = _walk(section_path)
    return dict(table) if table is not None else {}


def _count_leaves(d: dict) -> int:
    return sum(_count_leaves(v) if isinstance(v, dict) else 1 for v in d.values())
