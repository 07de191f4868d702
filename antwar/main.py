"""Ant War local self-play.

Usage:
    Play a full game:      python -m antwar.main
    Short game, seeded:    python -m antwar.main --rounds 100 --seed 7
    Write a transcript:    python -m antwar.main --transcript game.txt
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from antwar.config import MAX_ROUND
from antwar.protocol.transcript import dump_to_file
from antwar.simulation.entities import TowerType
from antwar.simulation.operations import Operation, OperationType
from antwar.simulation.simulator import Simulator
from antwar.simulation.state import GameState
from antwar.simulation.tick import GameResult

logger = logging.getLogger(__name__)

# Highland cells each side builds on, nearest to its own base first
BUILD_ORDERS: tuple[tuple[tuple[int, int], ...], ...] = (
    ((4, 9), (5, 9), (4, 3), (5, 12)),
    ((14, 9), (13, 9), (13, 7), (13, 11)),
)

# Upgrade path applied to each player's first tower
UPGRADE_ORDERS: tuple[tuple[TowerType, ...], ...] = (
    (TowerType.HEAVY, TowerType.HEAVY_PLUS),
    (TowerType.QUICK, TowerType.DOUBLE),
)


class ScriptedPlayer:
    """Follows a fixed build order, then upgrades its first tower."""

    def __init__(self, player: int) -> None:
        self.player = player
        self._builds = list(BUILD_ORDERS[player])
        self._upgrades = list(UPGRADE_ORDERS[player])

    def plan(self, sim: Simulator) -> None:
        """Stage at most one operation for this round."""
        if self._builds:
            x, y = self._builds[0]
            if sim.add_operation_of_player(
                    self.player, Operation(OperationType.BUILD_TOWER, x, y)):
                self._builds.pop(0)
            return
        if self._upgrades:
            towers = sim.get_info().towers_of_player(self.player)
            if not towers:
                return
            op = Operation(OperationType.UPGRADE_TOWER, towers[0].tower_id,
                           self._upgrades[0])
            if sim.add_operation_of_player(self.player, op):
                self._upgrades.pop(0)


def run_self_play(rounds: int, seed: int, transcript: Path | None = None) -> GameResult:
    """Play up to `rounds` rounds between two scripted players.

    Returns:
        The verdict, or RUNNING if the round limit was hit first.
    """
    sim = Simulator(GameState(seed=seed))
    players = [ScriptedPlayer(0), ScriptedPlayer(1)]
    if transcript is not None:
        transcript.write_text("", encoding="ascii")

    result = GameResult.RUNNING
    for _ in range(rounds):
        for p in players:
            p.plan(sim)
            sim.apply_operations_of_player(p.player)
        result = sim.next_round()
        if transcript is not None:
            dump_to_file(sim.get_info(), transcript)
        if result.is_over:
            break

    info = sim.get_info()
    logger.info("Round %d: %s, base hp %d/%d, coins %d/%d",
                info.round, result.name, info.bases[0].hp, info.bases[1].hp,
                info.coins[0], info.coins[1])
    return result


def main() -> None:
    parser = argparse.ArgumentParser(description="Ant War local self-play")
    parser.add_argument(
        "--rounds", type=int, default=MAX_ROUND + 1,
        help="Maximum number of rounds to settle",
    )
    parser.add_argument(
        "--seed", type=int, default=0,
        help="Pheromone seed",
    )
    parser.add_argument(
        "--transcript", type=Path, metavar="PATH",
        help="Write a per-round transcript to PATH",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    result = run_self_play(args.rounds, args.seed, args.transcript)
    print(result.name)


if __name__ == "__main__":
    main()
