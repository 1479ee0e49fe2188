"""
A* Search Core.

Shared by the way-point graph and occupancy grid planners; only the
neighbor generator, step cost and heuristic differ between them.

The open set is a binary heap keyed by (f, tie_key(location)). Entries made
stale by a later g-score improvement are skipped when popped. Closed
locations are never reopened, which keeps results optimal for consistent
heuristics (Euclidean on graphs, Manhattan on 4-connected grids).
"""

from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Tuple
from dataclasses import dataclass, field
import heapq
import logging

logger = logging.getLogger(__name__)


Location = Hashable
NeighborFn = Callable[[Location], Iterable[Tuple[Location, float]]]
HeuristicFn = Callable[[Location], float]
TieKeyFn = Callable[[Location], Any]


@dataclass
class SearchNode:
    """
    Per-location search bookkeeping (created lazily, discarded after search).

    Attributes:
        location: Graph node id or grid cell
        g_score: Cost of the best known path from start
        h_score: Heuristic estimate to goal
        came_from: Predecessor on the best known path
    """

    location: Location
    g_score: float
    h_score: float
    came_from: Optional[Location] = None

    @property
    def f_score(self) -> float:
        return self.g_score + self.h_score


@dataclass
class SearchResult:
    """
    Outcome of an A* search.

    Attributes:
        path: Locations from start to goal inclusive (empty if no path)
        cost: Total g-score of the path (inf if no path)
        expansions: Number of locations closed
    """

    path: List[Location] = field(default_factory=list)
    cost: float = float('inf')
    expansions: int = 0

    @property
    def found(self) -> bool:
        return len(self.path) > 0


def reconstruct_path(
    nodes: Dict[Location, SearchNode],
    start: Location,
    goal: Location,
) -> List[Location]:
    """
    Walk came_from links from goal back to start.

    Stops early if the chain breaks or would revisit a location, so a
    malformed chain cannot loop forever.

    Returns:
        Path from start to goal inclusive
    """
    path = [goal]
    visited = {goal}
    location = goal

    while location != start:
        previous = nodes[location].came_from
        if previous is None or previous in visited:
            logger.warning("Broken came_from chain at %r", location)
            break
        path.append(previous)
        visited.add(previous)
        location = previous

    if path[-1] != start:
        path.append(start)

    path.reverse()
    return path


def astar_search(
    start: Location,
    goal: Location,
    neighbors: NeighborFn,
    heuristic: HeuristicFn,
    tie_key: Optional[TieKeyFn] = None,
) -> SearchResult:
    """
    Find a minimum-cost path with A*.

    Args:
        start: Start location
        goal: Goal location
        neighbors: location -> iterable of (neighbor, step_cost)
        heuristic: location -> admissible estimate of remaining cost
        tie_key: location -> sortable key used to break equal f-scores
            (defaults to the location itself)

    Returns:
        SearchResult; path is empty if the open set is exhausted
    """
    if tie_key is None:
        tie_key = lambda location: location

    nodes: Dict[Location, SearchNode] = {start: SearchNode(start, 0.0, heuristic(start))}
    closed = set()
    counter = 0
    open_heap = [(nodes[start].f_score, tie_key(start), counter, start)]
    expansions = 0

    while open_heap:
        f_score, _, _, current = heapq.heappop(open_heap)

        if current in closed:
            continue

        current_node = nodes[current]
        if f_score > current_node.f_score:
            continue  # stale

        if current == goal:
            return SearchResult(
                path=reconstruct_path(nodes, start, goal),
                cost=current_node.g_score,
                expansions=expansions,
            )

        closed.add(current)
        expansions += 1

        for neighbor, step_cost in neighbors(current):
            if neighbor in closed:
                continue

            tentative_g = current_node.g_score + step_cost
            neighbor_node = nodes.get(neighbor)

            if neighbor_node is None:
                neighbor_node = SearchNode(neighbor, tentative_g, heuristic(neighbor), current)
                nodes[neighbor] = neighbor_node
            elif tentative_g < neighbor_node.g_score:
                neighbor_node.g_score = tentative_g
                neighbor_node.came_from = current
            else:
                continue

            counter += 1
            heapq.heappush(
                open_heap, (neighbor_node.f_score, tie_key(neighbor), counter, neighbor)
            )

    return SearchResult(expansions=expansions)
