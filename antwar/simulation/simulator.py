"""Speculative simulation with per-player staged operations.

A Simulator copies a GameState and lets a caller play rounds forward on the
copy, e.g. to predict the effect of candidate operations. Each round:

    sim.add_operation_of_player(0, op)    # stage, validated incrementally
    sim.apply_operations_of_player(0)
    sim.add_operation_of_player(1, op)
    sim.apply_operations_of_player(1)
    result = sim.next_round()

The staged operation lists belong to the simulator and are cleared at the
end of every settlement.
"""

from __future__ import annotations

import logging

from antwar.simulation.operations import Operation
from antwar.simulation.state import GameState
from antwar.simulation.tick import GameResult, advance_round

logger = logging.getLogger(__name__)


class SettlementOrderError(RuntimeError):
    """Raised when rounds are settled out of the required call order."""


class Simulator:
    """Owns an independent world state and the operations staged on it."""

    def __init__(self, state: GameState) -> None:
        self._state = state.clone()
        self._operations: list[list[Operation]] = [[], []]
        self._applied = [False, False]

    def get_info(self) -> GameState:
        """The simulated world. Treat as read-only."""
        return self._state

    def get_operations_of_player(self, player: int) -> list[Operation]:
        return list(self._operations[player])

    def add_operation_of_player(self, player: int, op: Operation) -> bool:
        """Stage `op` for `player` if it is valid and affordable.

        Returns:
            Whether the operation was staged.
        """
        if self._applied[player]:
            raise SettlementOrderError(
                f"Player {player} already applied operations this round"
            )
        if not self._state.is_operation_valid_with(player, self._operations[player], op):
            logger.debug("Rejected operation for player %d: %s", player, op)
            return False
        self._operations[player].append(op)
        return True

    def apply_operations_of_player(self, player: int) -> None:
        """Apply `player`'s staged operations to the simulated world.

        The player's super weapons tick down first, then the operations
        land, then the player's active weapons fire.
        """
        if self._applied[player]:
            raise SettlementOrderError(
                f"Player {player} already applied operations this round"
            )
        self._state.count_down_super_weapons_left_time(player)
        for op in self._operations[player]:
            self._state.apply_operation(player, op)
        self._state.apply_active_super_weapons(player)
        self._applied[player] = True

    def next_round(self) -> GameResult:
        """Settle the round once both players have applied their operations.

        Both players must apply every round, even with nothing staged, so
        their super weapons keep ticking and firing.
        """
        for player in (0, 1):
            if not self._applied[player]:
                raise SettlementOrderError(
                    f"Player {player} has not applied operations this round"
                )
        result = advance_round(self._state)
        self._operations = [[], []]
        self._applied = [False, False]
        if result.is_over:
            logger.debug("Simulation ended at round %d: %s",
                         self._state.round, result.name)
        return result
