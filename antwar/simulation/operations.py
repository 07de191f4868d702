"""Operation types and per-round staging rules.

Operations are the ONLY way players affect the world. Each round both
players stage operations, which are validated against the current state,
applied, and then discarded.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from antwar.simulation.entities import SuperWeaponType


class OperationType(IntEnum):
    """All possible player actions. Values are the wire codes."""
    # Towers
    BUILD_TOWER = 11          # args: x, y
    UPGRADE_TOWER = 12        # args: tower id, new type
    DOWNGRADE_TOWER = 13      # args: tower id
    # Super weapons, args: x, y
    USE_LIGHTNING_STORM = 21
    USE_EMP_BLASTER = 22
    USE_DEFLECTOR = 23
    USE_EMERGENCY_EVASION = 24
    # Base, no args
    UPGRADE_GENERATION_SPEED = 31
    UPGRADE_GENERATED_ANT = 32


INVALID_ARG = -1

_WEAPON_OPS = frozenset({
    OperationType.USE_LIGHTNING_STORM,
    OperationType.USE_EMP_BLASTER,
    OperationType.USE_DEFLECTOR,
    OperationType.USE_EMERGENCY_EVASION,
})

_TOWER_CHANGE_OPS = frozenset({
    OperationType.UPGRADE_TOWER,
    OperationType.DOWNGRADE_TOWER,
})

_BASE_OPS = frozenset({
    OperationType.UPGRADE_GENERATION_SPEED,
    OperationType.UPGRADE_GENERATED_ANT,
})

# Number of integer arguments carried on the wire, by type
ARG_COUNT: dict[OperationType, int] = {
    op_type: (0 if op_type in _BASE_OPS
              else 1 if op_type == OperationType.DOWNGRADE_TOWER
              else 2)
    for op_type in OperationType
}


@dataclass(frozen=True, slots=True)
class Operation:
    """A single player action with up to two integer arguments.

    Operations are immutable and comparable, so two operations with the
    same fields are equal.
    """
    op_type: OperationType
    arg0: int = INVALID_ARG
    arg1: int = INVALID_ARG

    @property
    def is_weapon_op(self) -> bool:
        return self.op_type in _WEAPON_OPS

    @property
    def is_tower_change_op(self) -> bool:
        """Upgrade or downgrade of an existing tower."""
        return self.op_type in _TOWER_CHANGE_OPS

    @property
    def is_base_op(self) -> bool:
        return self.op_type in _BASE_OPS

    @property
    def weapon_type(self) -> SuperWeaponType:
        """Super weapon used by this operation. Only valid for weapon ops."""
        return SuperWeaponType(self.op_type % 10)

    def args(self) -> tuple[int, ...]:
        """Arguments actually carried by this operation type."""
        return (self.arg0, self.arg1)[:ARG_COUNT[self.op_type]]


def collides(staged: list[Operation], new_op: Operation) -> bool:
    """Whether `new_op` targets something an already staged op targets.

    Per round a player may build once per cell, change each tower once,
    upgrade the base once in total and fire each super weapon type once.
    """
    for op in staged:
        if new_op.op_type == OperationType.BUILD_TOWER:
            if (op.op_type == OperationType.BUILD_TOWER
                    and op.arg0 == new_op.arg0 and op.arg1 == new_op.arg1):
                return True
        elif new_op.is_tower_change_op:
            if op.is_tower_change_op and op.arg0 == new_op.arg0:
                return True
        elif new_op.is_base_op:
            if op.is_base_op:
                return True
        elif new_op.is_weapon_op:
            if op.op_type == new_op.op_type:
                return True
    return False
