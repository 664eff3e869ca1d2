"""Mini README: Weighted A* search around no-fly zones.

Structure:
    * SearchNode - arena entry holding costs and the parent's arena index.
    * AStarPathfinder - 16-direction, fixed-step search returning waypoints.
    * PathCache - run-scoped memo of (start, end) -> waypoints.

The heuristic is the straight-line distance scaled by 1.5. That makes the
search greedy enough to stay fast over city-scale distances at the price of
optimality. The goal test is proximity: the returned path ends within one
move of the target rather than on it. Running out of nodes or iterations
returns an empty list, which callers treat as "unreachable".
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..geometry import (
    COMPASS_ANGLES,
    MOVE_DISTANCE,
    Position,
    Region,
    distance,
    is_close,
    line_intersects_region,
    next_position,
    point_in_region,
    validate_region,
)
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

HEURISTIC_WEIGHT = 1.5
MAX_ITERATIONS = 100_000
_PROGRESS_INTERVAL = 10_000

PositionKey = Tuple[int, int]


@dataclass(slots=True)
class SearchNode:
    """Search state for one position; ``parent`` indexes the node arena."""

    position: Position
    g: float
    h: float
    f: float
    parent: Optional[int] = None


@dataclass(frozen=True, slots=True)
class _Obstacle:
    """A validated no-fly region with its bounding box."""

    region: Region
    min_lng: float
    min_lat: float
    max_lng: float
    max_lat: float

    @classmethod
    def from_region(cls, region: Region) -> "_Obstacle":
        validate_region(region)
        lngs = [vertex.lng for vertex in region.vertices]
        lats = [vertex.lat for vertex in region.vertices]
        return cls(region, min(lngs), min(lats), max(lngs), max(lats))

    def blocks(self, start: Position, end: Position) -> bool:
        """True if ``end`` is inside/on the region or start-end crosses an edge."""

        # Neither test can succeed unless the move's box overlaps the region's box.
        if (
            max(start.lng, end.lng) < self.min_lng
            or min(start.lng, end.lng) > self.max_lng
            or max(start.lat, end.lat) < self.min_lat
            or min(start.lat, end.lat) > self.max_lat
        ):
            return False
        return point_in_region(end, self.region) or line_intersects_region(start, end, self.region)


class AStarPathfinder:
    """Weighted A* over fixed-length moves in the 16 compass directions."""

    def __init__(self, *, max_iterations: int = MAX_ITERATIONS) -> None:
        if max_iterations <= 0:
            raise ValueError("max_iterations must be positive")
        self.max_iterations = max_iterations

    def find_path(
        self, start: Position, end: Position, no_fly_zones: Iterable[Region]
    ) -> List[Position]:
        """Return waypoints from ``start`` to within one move of ``end``.

        An empty list means no path was found before the open set ran dry
        or the iteration cap was reached.
        """

        obstacles = [_Obstacle.from_region(zone) for zone in no_fly_zones]
        LOGGER.info("A* starting path from %s to %s", start, end)

        start_h = distance(start, end) * HEURISTIC_WEIGHT
        arena: List[SearchNode] = [SearchNode(start, 0.0, start_h, start_h)]
        open_index: Dict[PositionKey, int] = {start.key(): 0}
        closed: set = set()
        counter = itertools.count()
        heap: List[Tuple[float, int, int]] = [(start_h, next(counter), 0)]

        iterations = 0
        while heap and iterations < self.max_iterations:
            f_cost, _, index = heapq.heappop(heap)
            node = arena[index]
            key = node.position.key()
            if key in closed or f_cost != node.f:
                continue  # stale heap entry

            iterations += 1
            if iterations % _PROGRESS_INTERVAL == 0:
                LOGGER.info(
                    "A* iteration %s, open set size: %s, closed set size: %s",
                    iterations,
                    len(open_index),
                    len(closed),
                )

            del open_index[key]
            if is_close(node.position, end):
                LOGGER.info("A* found path in %s iterations", iterations)
                return self._reconstruct(arena, index)

            closed.add(key)
            for angle in COMPASS_ANGLES:
                neighbour = next_position(node.position, angle)
                neighbour_key = neighbour.key()
                if neighbour_key in closed:
                    continue
                if any(obstacle.blocks(node.position, neighbour) for obstacle in obstacles):
                    continue

                tentative_g = node.g + MOVE_DISTANCE
                existing = open_index.get(neighbour_key)
                if existing is None:
                    h_cost = distance(neighbour, end) * HEURISTIC_WEIGHT
                    arena.append(
                        SearchNode(neighbour, tentative_g, h_cost, tentative_g + h_cost, parent=index)
                    )
                    open_index[neighbour_key] = len(arena) - 1
                    heapq.heappush(heap, (tentative_g + h_cost, next(counter), len(arena) - 1))
                elif tentative_g < arena[existing].g:
                    candidate = arena[existing]
                    candidate.parent = index
                    candidate.g = tentative_g
                    candidate.f = tentative_g + candidate.h
                    heapq.heappush(heap, (candidate.f, next(counter), existing))

        if iterations >= self.max_iterations:
            LOGGER.warning(
                "A* exceeded max iterations (%s) from %s to %s", self.max_iterations, start, end
            )
        else:
            LOGGER.warning(
                "A* could not find path from %s to %s (exhausted search space after %s iterations)",
                start,
                end,
                iterations,
            )
        return []

    @staticmethod
    def _reconstruct(arena: Sequence[SearchNode], index: Optional[int]) -> List[Position]:
        path: List[Position] = []
        while index is not None:
            node = arena[index]
            path.append(node.position)
            index = node.parent
        path.reverse()
        return path


class PathCache:
    """Memo of computed paths keyed by the endpoints' lattice keys.

    One cache belongs to one planning call; empty "no path" results are cached
    too so an unreachable pair is searched only once.
    """

    def __init__(self) -> None:
        self._paths: Dict[Tuple[PositionKey, PositionKey], List[Position]] = {}
        self.hits = 0
        self.misses = 0

    def get_or_compute(
        self,
        start: Position,
        end: Position,
        compute: Callable[[Position, Position], List[Position]],
    ) -> List[Position]:
        cache_key = (start.key(), end.key())
        if cache_key in self._paths:
            self.hits += 1
            return self._paths[cache_key]
        self.misses += 1
        path = list(compute(start, end))
        self._paths[cache_key] = path
        return path

    def __len__(self) -> int:
        return len(self._paths)
