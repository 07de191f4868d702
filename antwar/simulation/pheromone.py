"""Per-player pheromone (scent) field.

Each player owns one layer of MAP_SIZE x MAP_SIZE intensities. Ants of that
player are attracted by high values. Every round the whole field decays
toward PHEROMONE_INIT, then the paths of ants that just died or arrived are
reinforced (success) or penalized (killed, too old).

The initial noise comes from a 48-bit multiplicative generator seeded by the
judger, so every participant starts from an identical field.
"""

from __future__ import annotations

from antwar.config import (
    BASE_POSITIONS,
    MAP_SIZE,
    PHEROMONE_ATTENUATING_RATIO,
    PHEROMONE_INIT,
    PHEROMONE_MIN,
    PHEROMONE_TAU,
)
from antwar.simulation.entities import Ant
from antwar.simulation.hexmap import neighbor

_MASK_48 = (1 << 48) - 1
_MULTIPLIER = 25214903917
_NOISE_SCALE = 2.0 ** -46
_NOISE_OFFSET = 8.0


class Random:
    """Deterministic noise generator. Each call advances the seed."""

    def __init__(self, seed: int) -> None:
        self.seed = seed & 0xFFFFFFFFFFFFFFFF

    def get(self) -> int:
        self.seed = (_MULTIPLIER * self.seed) & _MASK_48
        return self.seed


class PheromoneField:
    """Two layers of pheromone, indexed values[player][x][y]."""

    def __init__(self, seed: int = 0) -> None:
        random = Random(seed)
        self.values: list[list[list[float]]] = [
            [
                [random.get() * _NOISE_SCALE + _NOISE_OFFSET for _y in range(MAP_SIZE)]
                for _x in range(MAP_SIZE)
            ]
            for _player in range(2)
        ]

    def get(self, player: int, x: int, y: int) -> float:
        return self.values[player][x][y]

    def attenuate(self) -> None:
        """Decay every cell of both layers toward PHEROMONE_INIT."""
        keep = PHEROMONE_ATTENUATING_RATIO
        drift = (1 - PHEROMONE_ATTENUATING_RATIO) * PHEROMONE_INIT
        for layer in self.values:
            for column in layer:
                for y in range(MAP_SIZE):
                    column[y] = keep * column[y] + drift

    def update_for_ant(self, ant: Ant) -> None:
        """Apply a dead ant's state delta along its recorded path.

        The walk starts at the owner's base and replays the path. Every
        distinct cell is adjusted exactly once, including the final cell.
        Alive and frozen ants leave no trace.
        """
        if ant.is_alive:
            return

        tau = PHEROMONE_TAU[ant.state]
        layer = self.values[ant.player]
        x, y = BASE_POSITIONS[ant.player]
        visited: set[tuple[int, int]] = set()

        for direction in ant.path:
            if (x, y) not in visited:
                visited.add((x, y))
                layer[x][y] = max(layer[x][y] + tau, PHEROMONE_MIN)
            x, y = neighbor(x, y, direction)

        assert (x, y) == (ant.x, ant.y), (
            f"Ant {ant.ant_id} path ends at {(x, y)}, ant is at {(ant.x, ant.y)}"
        )
        if (x, y) not in visited:
            layer[x][y] = max(layer[x][y] + tau, PHEROMONE_MIN)
