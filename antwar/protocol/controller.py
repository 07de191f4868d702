"""Judger-facing controller.

Keeps a local GameState in step with the external judger. The judger is
the authority: after every round its report overwrites towers, ants, coins
and base hp, while the pheromone field (which the judger never sends) is
updated locally from the reported ant movements.

Call order when playing as player 0:

    append_self_operation(...) -> send_self_operations()
    -> apply_self_operations() -> read_opponent_operations()
    -> apply_opponent_operations() -> read_round_info()

Player 1 reads and applies the opponent's operations first.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, TextIO

from antwar.protocol.serialization import (
    RoundInfo,
    TokenReader,
    decode_init_info,
    decode_operations,
    decode_round_info,
    encode_operations,
)
from antwar.simulation.entities import Ant, Tower
from antwar.simulation.hexmap import get_direction
from antwar.simulation.operations import Operation, OperationType
from antwar.simulation.state import GameState

logger = logging.getLogger(__name__)


class Controller:
    """Game state plus the operation lists exchanged with the judger."""

    def __init__(self, reader: TextIO, writer: BinaryIO) -> None:
        self._reader = TokenReader(reader)
        self._writer = writer
        init = decode_init_info(self._reader)
        self.self_player_id: int = init.player_id
        self._info = GameState(seed=init.seed)
        self._self_operations: list[Operation] = []
        self._opponent_operations: list[Operation] = []
        logger.info("Player %d initialized, seed=%d", init.player_id, init.seed)

    @property
    def opponent_id(self) -> int:
        return 1 - self.self_player_id

    def get_info(self) -> GameState:
        """Current local game state. Treat as read-only."""
        return self._info

    def get_self_operations(self) -> list[Operation]:
        return list(self._self_operations)

    def get_opponent_operations(self) -> list[Operation]:
        return list(self._opponent_operations)

    # -- Own operations --------------------------------------------------------

    def append_self_operation(self, op: Operation | OperationType,
                              arg0: int = -1, arg1: int = -1) -> bool:
        """Stage an operation to send this round if it is valid and affordable."""
        if not isinstance(op, Operation):
            op = Operation(OperationType(op), arg0, arg1)
        if not self._info.is_operation_valid_with(
                self.self_player_id, self._self_operations, op):
            logger.debug("Rejected own operation %s", op)
            return False
        self._self_operations.append(op)
        return True

    def send_self_operations(self) -> None:
        self._writer.write(encode_operations(self._self_operations))
        self._writer.flush()

    def apply_self_operations(self) -> None:
        self._apply_operations(self.self_player_id, self._self_operations)

    # -- Opponent operations ---------------------------------------------------

    def read_opponent_operations(self) -> None:
        """Read the opponent's operations, keeping only the legal ones.

        They pass the same checks as our own staged operations; anything
        the rules reject is logged and dropped.
        """
        accepted: list[Operation] = []
        for op in decode_operations(self._reader):
            if self._info.is_operation_valid_with(self.opponent_id, accepted, op):
                accepted.append(op)
            else:
                logger.warning("Dropped illegal opponent operation %s", op)
        self._opponent_operations = accepted

    def apply_opponent_operations(self) -> None:
        self._apply_operations(self.opponent_id, self._opponent_operations)

    def _apply_operations(self, player: int, ops: list[Operation]) -> None:
        self._info.count_down_super_weapons_left_time(player)
        for op in ops:
            self._info.apply_operation(player, op)
        self._info.apply_active_super_weapons(player)

    # -- Round reconciliation --------------------------------------------------

    def read_round_info(self) -> RoundInfo:
        """Read the judger's round report and overwrite the local state."""
        report = decode_round_info(self._reader)
        self.reconcile(report)
        return report

    def reconcile(self, report: RoundInfo) -> None:
        """Bring the local state in line with a judger round report."""
        info = self._info
        self._update_towers(report.towers)
        self._update_ants(report.ants)
        info.global_pheromone_attenuation()
        info.update_pheromone_for_ants()
        info.clear_dead_and_succeeded_ants()
        for player in (0, 1):
            info.set_coin(player, report.coins[player])
            info.set_base_hp(player, report.base_hp[player])
        info.round = report.round
        info.count_down_super_weapons_cd()
        self._self_operations.clear()
        self._opponent_operations.clear()
        logger.debug("Round %d: coins=%s hp=%s", info.round,
                     report.coins, report.base_hp)

    def _update_towers(self, towers: list[Tower]) -> None:
        self._info.towers = list(towers)
        self._info.next_tower_id = towers[-1].tower_id + 1 if towers else 0

    def _update_ants(self, ants: list[Ant]) -> None:
        """Merge reported ants by id, inferring the step taken by moved ants."""
        info = self._info
        for reported in ants:
            ant = info.ant_of_id(reported.ant_id)
            if ant is None:
                info.ants.append(reported)
                continue
            if (ant.x, ant.y) != (reported.x, reported.y):
                direction = get_direction(ant.x, ant.y, reported.x, reported.y)
                if direction < 0:
                    raise ValueError(
                        f"Ant {ant.ant_id} jumped from {(ant.x, ant.y)} "
                        f"to {(reported.x, reported.y)}"
                    )
                ant.path.append(direction)
            ant.x, ant.y = reported.x, reported.y
            ant.hp = reported.hp
            ant.age = reported.age
            ant.state = reported.state
        info.next_ant_id = info.ants[-1].ant_id + 1 if info.ants else 0
