"""core/zone.py — Map registry and the connection graph between maps.

The registry owns every named map.  Blueprints (data/generate_zones.py)
are cheap and read up front; tile grids are generated on the first
``get(map_id)`` and memoised for the rest of the process:

    registry = MapRegistry(catalog, seed=42)
    registry.has("dead_marsh")        # known id? (no generation)
    game_map = registry.get("dead_marsh")
    registry.generate_all()           # eager, if you want it

Connections are authored per map as directional records.  At
construction they are folded into a ConnectionGraph and checked for
symmetry: "A east → B" needs "B west → A".  Problems are logged; with
``strict=True`` they raise AsymmetricConnection instead.

Building interiors are not blueprints.  Whenever an outdoor map is
generated or installed, each of its entrances registers the id
``<building_id>_interior``; that room is generated on its first
``get`` like any other map.  Interiors sit outside the connection graph.
"""
from __future__ import annotations
import random
from typing import Callable, Iterable, TYPE_CHECKING

from core import tuning
from core.constants import OPPOSITE
from components.maps import GameMap
from logic.worldgen import ZoneBlueprint, generate_map
from logic.interiors import (
    InteriorLibrary, InteriorLink, find_entrances, generate_interior, load_interiors,
)

if TYPE_CHECKING:
    from core.data import Catalog


class AsymmetricConnection(ValueError):
    """The authored connections do not form a symmetric graph."""

    def __init__(self, problems: list[str]):
        super().__init__("; ".join(problems))
        self.problems = problems


# ── Connection graph ─────────────────────────────────────────────────

class ConnectionGraph:
    """map id → {direction: target map id}."""

    def __init__(self):
        self._edges: dict[str, dict[str, str]] = {}

    @classmethod
    def from_blueprints(cls, blueprints: Iterable[ZoneBlueprint]) -> "ConnectionGraph":
        graph = cls()
        for bp in blueprints:
            graph._edges.setdefault(bp.id, {})
            for conn in bp.connections:
                graph.add(bp.id, conn.direction, conn.target_map_id)
        return graph

    def add(self, map_id: str, direction: str, target: str):
        self._edges.setdefault(map_id, {})[direction] = target

    def target(self, map_id: str, direction: str) -> str | None:
        return self._edges.get(map_id, {}).get(direction)

    def neighbours(self, map_id: str) -> dict[str, str]:
        return dict(self._edges.get(map_id, {}))

    def nodes(self) -> list[str]:
        return list(self._edges)

    def problems(self) -> list[str]:
        """Every dangling or one-way connection, as readable strings."""
        out: list[str] = []
        for map_id, edges in self._edges.items():
            for direction, target in edges.items():
                if target not in self._edges:
                    out.append(f"{map_id} {direction} → unknown map {target!r}")
                    continue
                back = self.target(target, OPPOSITE[direction])
                if back != map_id:
                    out.append(f"{map_id} {direction} → {target}, but "
                               f"{target} {OPPOSITE[direction]} → {back}")
        return out

    def validate(self, strict: bool = False) -> list[str]:
        problems = self.problems()
        for p in problems:
            print(f"[ZONE] WARNING connection: {p}")
        if problems and strict:
            raise AsymmetricConnection(problems)
        return problems

    def reachable(self, start: str) -> set[str]:
        seen = {start}
        stack = [start]
        while stack:
            for target in self._edges.get(stack.pop(), {}).values():
                if target in self._edges and target not in seen:
                    seen.add(target)
                    stack.append(target)
        return seen


# ── Registry ─────────────────────────────────────────────────────────

BlueprintSource = Callable[[], ZoneBlueprint] | ZoneBlueprint


class MapRegistry:
    """Id-keyed arena of generated maps.

    ``seed`` derives one ``random.Random`` per map id, so a seeded world
    is the same whatever order the maps are visited in.  ``rng`` shares
    one source across all maps instead.  With neither, every generation
    is fresh and unreproducible.
    """

    def __init__(self, catalog: Catalog,
                 blueprints: dict[str, BlueprintSource] | None = None,
                 *, seed: int | None = None,
                 rng: random.Random | None = None,
                 strict: bool | None = None,
                 interiors: InteriorLibrary | None = None):
        if blueprints is None:
            from data.generate_zones import ZONE_BLUEPRINTS
            blueprints = ZONE_BLUEPRINTS
        if strict is None:
            strict = bool(tuning.get("world", "strict_connections", False))

        self.catalog = catalog
        self.seed = seed
        self._rng = rng
        self._blueprints: dict[str, ZoneBlueprint] = {}
        for map_id, source in blueprints.items():
            bp = source() if callable(source) else source
            self._blueprints[map_id] = bp

        self.interiors = interiors if interiors is not None else load_interiors()
        self._links: dict[str, InteriorLink] = {}
        self._maps: list[GameMap] = []
        self._index: dict[str, int] = {}

        self.graph = ConnectionGraph.from_blueprints(self._blueprints.values())
        self.problems = self.graph.validate(strict)
        print(f"[ZONE] Registry: {len(self._blueprints)} maps, "
              f"{len(self.problems)} connection problems")

    # ── lookup ───────────────────────────────────────────────────────

    def has(self, map_id: str) -> bool:
        return (map_id in self._blueprints or map_id in self._links
                or map_id in self._index)

    def is_generated(self, map_id: str) -> bool:
        return map_id in self._index

    def ids(self) -> list[str]:
        return list(self._blueprints)

    def blueprint(self, map_id: str) -> ZoneBlueprint:
        return self._blueprints[map_id]

    def interior_link(self, map_id: str) -> InteriorLink | None:
        return self._links.get(map_id)

    def interior_ids(self) -> list[str]:
        """Interiors reachable from the outdoor maps generated so far."""
        return list(self._links)

    def _known(self, map_id: str) -> bool:
        return map_id in self._blueprints or map_id in self._links

    def get(self, map_id: str) -> GameMap:
        """The map for *map_id*, generating it on first access.

        Raises KeyError for an id the registry does not know.
        """
        idx = self._index.get(map_id)
        if idx is not None:
            return self._maps[idx]
        if not self._known(map_id):
            raise KeyError(map_id)
        return self._store(self._generate(map_id))

    def __contains__(self, map_id: str) -> bool:
        return self.has(map_id)

    def __len__(self) -> int:
        return len(self._blueprints)

    # ── generation ───────────────────────────────────────────────────

    def rng_for(self, map_id: str) -> random.Random:
        if self.seed is not None:
            return random.Random(f"{self.seed}:{map_id}")
        if self._rng is not None:
            return self._rng
        return random.Random()

    def _generate(self, map_id: str) -> GameMap:
        link = self._links.get(map_id)
        if link is not None and map_id not in self._blueprints:
            return generate_interior(self.interiors.template_for(link.kind), link,
                                     self.catalog.items, self.rng_for(map_id))
        return generate_map(self._blueprints[map_id], self.catalog,
                            self.rng_for(map_id))

    def _store(self, game_map: GameMap) -> GameMap:
        idx = self._index.get(game_map.id)
        if idx is None:
            self._index[game_map.id] = len(self._maps)
            self._maps.append(game_map)
        else:
            self._maps[idx] = game_map
        if not game_map.is_interior:
            for link in find_entrances(game_map):
                self._links[link.map_id] = link
        return game_map

    def generate_all(self) -> list[GameMap]:
        return [self.get(map_id) for map_id in self._blueprints]

    def regenerate(self, map_id: str) -> GameMap:
        """Throw away the memoised map and build it again."""
        if not self._known(map_id):
            raise KeyError(map_id)
        return self._store(self._generate(map_id))

    def put(self, game_map: GameMap) -> GameMap:
        """Install an already-built map (e.g. one restored from a save)."""
        return self._store(game_map)
