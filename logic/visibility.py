"""logic/visibility.py — Fog-of-war for the current map.

A ``height × width`` boolean grid of "visible" flags, reset whenever
the current map changes.  ``reveal()`` marks every tile within a
Euclidean radius of the player's tile both visible and discovered.

Visibility is monotonic within a map session: tiles that leave the
radius are *not* reset, so anything seen once stays lit until the
player changes map.  Discovered flags live on the tiles themselves and
survive map changes.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from components.maps import GameMap


class VisibilityTracker:
    def __init__(self, width: int = 0, height: int = 0):
        self.width = width
        self.height = height
        self.grid: list[list[bool]] = [[False] * width for _ in range(height)]

    # ── lifecycle ───────────────────────────────────────────────────

    def reset(self, game_map: GameMap) -> None:
        """Clear the grid for *game_map* (all False) and its tile flags."""
        self.width = game_map.width
        self.height = game_map.height
        self.grid = [[False] * self.width for _ in range(self.height)]
        for row in game_map.tiles:
            for tile in row:
                tile.visible = False

    # ── queries ─────────────────────────────────────────────────────

    def is_visible(self, x: int, y: int) -> bool:
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.grid[y][x]
        return False

    def any_visible(self) -> bool:
        return any(any(row) for row in self.grid)

    def visible_count(self) -> int:
        return sum(sum(row) for row in self.grid)

    # ── update ──────────────────────────────────────────────────────

    def reveal(self, game_map: GameMap, cx: int, cy: int, radius: int) -> int:
        """Mark tiles within *radius* of tile *(cx, cy)* visible + discovered.

        Returns the number of tiles discovered for the first time.
        """
        r_sq = radius * radius
        newly = 0
        for y in range(max(0, cy - radius), min(self.height, cy + radius + 1)):
            dy = y - cy
            row = self.grid[y]
            tiles = game_map.tiles[y]
            for x in range(max(0, cx - radius), min(self.width, cx + radius + 1)):
                dx = x - cx
                if dx * dx + dy * dy > r_sq:
                    continue
                row[x] = True
                tile = tiles[x]
                tile.visible = True
                if not tile.discovered:
                    tile.discovered = True
                    newly += 1
        return newly

    # ── persistence ─────────────────────────────────────────────────

    def rows(self) -> list[str]:
        """The grid as ``"0"``/``"1"`` strings, one per row."""
        return ["".join("1" if v else "0" for v in row) for row in self.grid]

    def restore(self, game_map: GameMap, rows: list[str] | None) -> None:
        """Reset for *game_map*, then relight the tiles flagged in *rows*."""
        self.reset(game_map)
        for y, flags in enumerate((rows or [])[:self.height]):
            row = self.grid[y]
            tiles = game_map.tiles[y]
            for x, flag in enumerate(flags[:self.width]):
                if flag == "1":
                    row[x] = True
                    tiles[x].visible = True
