"""Price and refund calculators.

All results are integers; refunds are truncated toward zero.
"""

from __future__ import annotations

from antwar.config import (
    LEVEL2_BASE_UPGRADE_PRICE,
    LEVEL2_TOWER_UPGRADE_PRICE,
    LEVEL3_BASE_UPGRADE_PRICE,
    LEVEL3_TOWER_UPGRADE_PRICE,
    TOWER_BUILD_PRICE_BASE,
    TOWER_BUILD_PRICE_RATIO,
    TOWER_DOWNGRADE_REFUND_RATIO,
)
from antwar.simulation.entities import (
    SUPER_WEAPON_INFO,
    SuperWeaponType,
    TowerType,
    tower_level,
)


def build_tower_cost(tower_num: int) -> int:
    """Cost of building a tower for a player who already owns `tower_num`."""
    return TOWER_BUILD_PRICE_BASE * TOWER_BUILD_PRICE_RATIO ** tower_num


def destroy_tower_income(tower_num: int) -> int:
    """Refund for destroying a tower, `tower_num` counted before removal."""
    return int(build_tower_cost(tower_num - 1) * TOWER_DOWNGRADE_REFUND_RATIO)


def upgrade_tower_cost(target_type: int) -> int:
    """Cost of upgrading into `target_type`."""
    target = TowerType(target_type)
    if target == TowerType.BASIC:
        raise ValueError("BASIC is not an upgrade target")
    if tower_level(target) == 2:
        return LEVEL2_TOWER_UPGRADE_PRICE
    return LEVEL3_TOWER_UPGRADE_PRICE


def downgrade_tower_income(current_type: int) -> int:
    """Refund for downgrading a tower currently of `current_type`."""
    return int(upgrade_tower_cost(current_type) * TOWER_DOWNGRADE_REFUND_RATIO)


def upgrade_base_cost(level: int) -> int:
    """Cost of raising a base attribute from `level`."""
    if level == 0:
        return LEVEL2_BASE_UPGRADE_PRICE
    if level == 1:
        return LEVEL3_BASE_UPGRADE_PRICE
    raise ValueError(f"Base level {level} cannot be upgraded")


def use_super_weapon_cost(weapon_type: SuperWeaponType) -> int:
    return SUPER_WEAPON_INFO[weapon_type].price
