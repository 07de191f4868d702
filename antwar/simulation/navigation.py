"""Pheromone-guided ant navigation.

Ants do not plan a route. Each round an ant looks at its six neighbours and
steps onto the walkable one with the best score:

    score = eta(distance change to the enemy base) * own pheromone

where eta favours getting closer (1.25) over staying level (1.00) over
backing off (0.75). Ants never immediately reverse their last step.

Tie-breaking is explicit: higher score, then higher raw pheromone, then
the lowest direction index. No randomness is involved.
"""

from __future__ import annotations

from antwar.config import BASE_POSITIONS, NAVIGATION_ETA
from antwar.simulation.entities import Ant
from antwar.simulation.hexmap import (
    DIRECTIONS,
    distance,
    is_path,
    neighbor,
    opposite_direction,
)
from antwar.simulation.pheromone import PheromoneField


def next_move(ant: Ant, pheromone: PheromoneField) -> int | None:
    """Direction the ant should take this round, or None if boxed in.

    Args:
        ant: The moving ant.
        pheromone: The shared pheromone field; only the ant's own layer is read.
    """
    target_x, target_y = BASE_POSITIONS[1 - ant.player]
    cur_dist = distance(ant.x, ant.y, target_x, target_y)
    back = opposite_direction(ant.path[-1]) if ant.path else None

    best_key: tuple[float, float, int] | None = None
    best_direction: int | None = None

    for direction in DIRECTIONS:
        if direction == back:
            continue
        x, y = neighbor(ant.x, ant.y, direction)
        if not is_path(x, y):
            continue

        delta = distance(x, y, target_x, target_y) - cur_dist
        raw = pheromone.get(ant.player, x, y)
        weighted = NAVIGATION_ETA[delta + 1] * raw
        # Negated index so that, all else equal, the lower index wins
        key = (weighted, raw, -direction)
        if best_key is None or key > best_key:
            best_key = key
            best_direction = direction

    return best_direction
