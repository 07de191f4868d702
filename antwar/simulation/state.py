"""World state and the operation rules that act on it.

GameState is the single source of truth for one simulation context. It
contains everything needed to fully describe the game at any point in time:
entities, coins, the pheromone field, super weapon timers and id counters.
Speculative planning clones the whole state; two contexts never share
mutable data.

DETERMINISM RULES:
- Coins, hp, cooldowns and ids are integers. Only pheromone is float.
- Ants and towers are kept in creation order; that order is the tie-break
  for targeting and the iteration order for movement.
- No randomness after construction. The pheromone seed is consumed once.
"""

from __future__ import annotations

import copy
import hashlib
import struct

from antwar.config import BASE_MAX_LEVEL, COIN_INIT, EVASION_CHARGES
from antwar.simulation.economy import (
    build_tower_cost,
    destroy_tower_income,
    downgrade_tower_income,
    upgrade_base_cost,
    upgrade_tower_cost,
    use_super_weapon_cost,
)
from antwar.simulation.entities import (
    SUPER_WEAPON_INFO,
    Ant,
    AntState,
    Base,
    SuperWeapon,
    SuperWeaponType,
    Tower,
    TowerType,
    new_tower,
)
from antwar.simulation.hexmap import is_highland, is_valid_pos
from antwar.simulation.operations import Operation, OperationType, collides
from antwar.simulation.pheromone import PheromoneField

_TERMINAL_STATES = frozenset({AntState.SUCCESS, AntState.FAIL, AntState.TOO_OLD})


class GameState:
    """Complete simulation state for a game.

    Attributes:
        round: Current round number (starts at 0).
        towers: All towers, in build order.
        ants: All ants, in spawn order.
        bases: Both bases, indexed by player.
        coins: Coins of both players, indexed by player.
        pheromone: The two-layer pheromone field.
        super_weapons: Super weapons currently in effect.
        super_weapon_cd: Rounds until each weapon type is usable again,
            super_weapon_cd[player][weapon_type].
        next_ant_id: Id for the next spawned ant.
        next_tower_id: Id for the next built tower.
    """

    def __init__(self, seed: int = 0) -> None:
        self.round: int = 0
        self.towers: list[Tower] = []
        self.ants: list[Ant] = []
        self.bases: list[Base] = [Base.for_player(0), Base.for_player(1)]
        self.coins: list[int] = [COIN_INIT, COIN_INIT]
        self.pheromone = PheromoneField(seed)
        self.super_weapons: list[SuperWeapon] = []
        self.super_weapon_cd: list[dict[SuperWeaponType, int]] = [
            {weapon_type: 0 for weapon_type in SuperWeaponType} for _ in range(2)
        ]
        self.next_ant_id: int = 0
        self.next_tower_id: int = 0

    def clone(self) -> GameState:
        """Independent deep copy for speculative simulation."""
        return copy.deepcopy(self)

    # -- Queries ---------------------------------------------------------------

    def ant_at(self, x: int, y: int) -> list[Ant]:
        """All ants standing on (x, y)."""
        return [ant for ant in self.ants if ant.x == x and ant.y == y]

    def ant_of_id(self, ant_id: int) -> Ant | None:
        for ant in self.ants:
            if ant.ant_id == ant_id:
                return ant
        return None

    def ant_index_of_id(self, ant_id: int) -> int:
        """Position of the ant in `ants`, or -1 if not found."""
        for index, ant in enumerate(self.ants):
            if ant.ant_id == ant_id:
                return index
        return -1

    def tower_at(self, x: int, y: int) -> Tower | None:
        for tower in self.towers:
            if tower.x == x and tower.y == y:
                return tower
        return None

    def tower_of_id(self, tower_id: int) -> Tower | None:
        for tower in self.towers:
            if tower.tower_id == tower_id:
                return tower
        return None

    def towers_of_player(self, player: int) -> list[Tower]:
        return [tower for tower in self.towers if tower.player == player]

    def tower_num_of_player(self, player: int) -> int:
        return sum(1 for tower in self.towers if tower.player == player)

    def _require_tower(self, tower_id: int) -> Tower:
        tower = self.tower_of_id(tower_id)
        if tower is None:
            raise KeyError(f"No tower with id {tower_id}")
        return tower

    # -- Mutations -------------------------------------------------------------

    def build_tower(self, player: int, x: int, y: int,
                    tower_type: TowerType = TowerType.BASIC) -> Tower:
        """Place a new tower with the next tower id."""
        tower = new_tower(self.next_tower_id, player, x, y, tower_type)
        self.next_tower_id += 1
        self.towers.append(tower)
        return tower

    def upgrade_tower(self, tower_id: int, tower_type: TowerType) -> None:
        self._require_tower(tower_id).upgrade(tower_type)

    def downgrade_or_destroy_tower(self, tower_id: int) -> None:
        """Downgrade a tower one level, or remove it if it is BASIC."""
        tower = self._require_tower(tower_id)
        if tower.is_downgrade_valid():
            tower.downgrade()
        else:
            self.towers.remove(tower)

    def upgrade_generation_speed(self, player: int) -> None:
        self.bases[player].gen_speed_level += 1

    def upgrade_generated_ant(self, player: int) -> None:
        self.bases[player].ant_level += 1

    def set_coin(self, player: int, value: int) -> None:
        self.coins[player] = value

    def update_coin(self, player: int, change: int) -> None:
        self.coins[player] += change

    def set_base_hp(self, player: int, value: int) -> None:
        self.bases[player].hp = value

    def update_base_hp(self, player: int, change: int) -> None:
        self.bases[player].hp += change

    # -- Ants and pheromone ----------------------------------------------------

    def clear_dead_and_succeeded_ants(self) -> None:
        """Drop every ant in a terminal state."""
        self.ants = [ant for ant in self.ants if ant.state not in _TERMINAL_STATES]

    def update_pheromone_for_ants(self) -> None:
        for ant in self.ants:
            self.pheromone.update_for_ant(ant)

    def global_pheromone_attenuation(self) -> None:
        self.pheromone.attenuate()

    # -- Operation checks ------------------------------------------------------

    def is_operation_valid(self, player: int, op: Operation) -> bool:
        """Check the op's own preconditions against the current state.

        Coins and conflicts with other staged operations are NOT checked
        here; see is_operation_valid_with() for the full check.
        """
        t = op.op_type
        if t == OperationType.BUILD_TOWER:
            return (is_highland(player, op.arg0, op.arg1)
                    and self.tower_at(op.arg0, op.arg1) is None
                    and not self.is_shielded_by_emp(player, op.arg0, op.arg1))
        if t == OperationType.UPGRADE_TOWER:
            tower = self.tower_of_id(op.arg0)
            return (tower is not None
                    and tower.player == player
                    and tower.is_upgrade_type_valid(op.arg1)
                    and not self.is_tower_shielded(tower))
        if t == OperationType.DOWNGRADE_TOWER:
            tower = self.tower_of_id(op.arg0)
            return (tower is not None
                    and tower.player == player
                    and not self.is_tower_shielded(tower))
        if op.is_weapon_op:
            return (is_valid_pos(op.arg0, op.arg1)
                    and self.super_weapon_cd[player][op.weapon_type] <= 0)
        if t == OperationType.UPGRADE_GENERATION_SPEED:
            return self.bases[player].gen_speed_level < BASE_MAX_LEVEL
        if t == OperationType.UPGRADE_GENERATED_ANT:
            return self.bases[player].ant_level < BASE_MAX_LEVEL
        return False

    def is_operation_valid_with(self, player: int, staged: list[Operation],
                                new_op: Operation) -> bool:
        """Whether `new_op` may join the already `staged` operations.

        Rejects conflicts with staged ops, ops that are invalid on their
        own, and ops that would make the whole list unaffordable.
        """
        if collides(staged, new_op):
            return False
        if not self.is_operation_valid(player, new_op):
            return False
        return self.check_affordable(player, [*staged, new_op])

    def get_operation_income(self, player: int, op: Operation) -> int:
        """Coins gained by applying `op` now. Negative means a cost."""
        t = op.op_type
        if t == OperationType.BUILD_TOWER:
            return -build_tower_cost(self.tower_num_of_player(player))
        if t == OperationType.UPGRADE_TOWER:
            return -upgrade_tower_cost(op.arg1)
        if t == OperationType.DOWNGRADE_TOWER:
            tower = self._require_tower(op.arg0)
            if tower.tower_type == TowerType.BASIC:
                return destroy_tower_income(self.tower_num_of_player(player))
            return downgrade_tower_income(tower.tower_type)
        if op.is_weapon_op:
            return -use_super_weapon_cost(op.weapon_type)
        if t == OperationType.UPGRADE_GENERATION_SPEED:
            return -upgrade_base_cost(self.bases[player].gen_speed_level)
        if t == OperationType.UPGRADE_GENERATED_ANT:
            return -upgrade_base_cost(self.bases[player].ant_level)
        return 0

    def check_affordable(self, player: int, ops: list[Operation]) -> bool:
        """Whether the player can pay for all `ops` applied in order.

        Build costs and destroy refunds depend on the number of towers the
        player owns, so that count is tracked as the ops are folded.
        """
        income = 0
        tower_num = self.tower_num_of_player(player)
        for op in ops:
            if op.op_type == OperationType.BUILD_TOWER:
                income -= build_tower_cost(tower_num)
                tower_num += 1
            elif op.op_type == OperationType.DOWNGRADE_TOWER:
                tower = self._require_tower(op.arg0)
                if tower.tower_type == TowerType.BASIC:
                    income += destroy_tower_income(tower_num)
                    tower_num -= 1
                else:
                    income += downgrade_tower_income(tower.tower_type)
            else:
                income += self.get_operation_income(player, op)
        return self.coins[player] + income >= 0

    def apply_operation(self, player: int, op: Operation) -> None:
        """Pay for `op` and carry it out. The op must already be validated."""
        self.update_coin(player, self.get_operation_income(player, op))
        t = op.op_type
        if t == OperationType.BUILD_TOWER:
            self.build_tower(player, op.arg0, op.arg1)
        elif t == OperationType.UPGRADE_TOWER:
            self.upgrade_tower(op.arg0, TowerType(op.arg1))
        elif t == OperationType.DOWNGRADE_TOWER:
            self.downgrade_or_destroy_tower(op.arg0)
        elif op.is_weapon_op:
            self.use_super_weapon(op.weapon_type, player, op.arg0, op.arg1)
        elif t == OperationType.UPGRADE_GENERATION_SPEED:
            self.upgrade_generation_speed(player)
        elif t == OperationType.UPGRADE_GENERATED_ANT:
            self.upgrade_generated_ant(player)

    # -- Super weapons ---------------------------------------------------------

    def use_super_weapon(self, weapon_type: SuperWeaponType, player: int,
                         x: int, y: int) -> SuperWeapon:
        """Start a weapon at full duration and put its type on cooldown."""
        weapon = SuperWeapon(weapon_type=weapon_type, player=player, x=x, y=y)
        self.super_weapons.append(weapon)
        self.super_weapon_cd[player][weapon_type] = SUPER_WEAPON_INFO[weapon_type].cooldown
        return weapon

    def is_shielded_by_emp(self, player: int, x: int, y: int) -> bool:
        """Whether (x, y) is inside an EMP blaster of `player`'s opponent."""
        return any(
            weapon.weapon_type == SuperWeaponType.EMP_BLASTER
            and weapon.player != player
            and weapon.is_in_range(x, y)
            for weapon in self.super_weapons
        )

    def is_tower_shielded(self, tower: Tower) -> bool:
        return self.is_shielded_by_emp(tower.player, tower.x, tower.y)

    def is_shielded_by_deflector(self, ant: Ant) -> bool:
        """Whether the ant stands inside one of its own player's deflectors."""
        return any(
            weapon.weapon_type == SuperWeaponType.DEFLECTOR
            and weapon.player == ant.player
            and weapon.is_in_range(ant.x, ant.y)
            for weapon in self.super_weapons
        )

    def count_down_super_weapons_left_time(self, player: int) -> None:
        """Tick down `player`'s weapons and drop the expired ones."""
        remaining: list[SuperWeapon] = []
        for weapon in self.super_weapons:
            if weapon.player == player:
                weapon.left_time -= 1
                if weapon.left_time <= 0:
                    continue
            remaining.append(weapon)
        self.super_weapons = remaining

    def apply_active_super_weapons(self, player: int) -> None:
        """Fire the instantaneous effects of `player`'s active weapons.

        Lightning storms kill every enemy ant in range and pay the kill
        reward; emergency evasions arm friendly ants in range.
        """
        for weapon in self.super_weapons:
            if weapon.player != player:
                continue
            if weapon.weapon_type == SuperWeaponType.LIGHTNING_STORM:
                for ant in self.ants:
                    if ant.player != weapon.player and weapon.is_in_range(ant.x, ant.y):
                        ant.hp = 0
                        ant.state = AntState.FAIL
                        self.update_coin(weapon.player, ant.reward)
            elif weapon.weapon_type == SuperWeaponType.EMERGENCY_EVASION:
                for ant in self.ants:
                    if ant.player == weapon.player and weapon.is_in_range(ant.x, ant.y):
                        ant.evasion = EVASION_CHARGES

    def count_down_super_weapons_cd(self) -> None:
        for cooldowns in self.super_weapon_cd:
            for weapon_type, cd in cooldowns.items():
                cooldowns[weapon_type] = max(cd - 1, 0)

    # -- Hashing ---------------------------------------------------------------

    def compute_hash(self) -> bytes:
        """Compute a deterministic hash of the full game state.

        Used to check that two runs (or a clone and its source) agree.
        """
        h = hashlib.sha256()
        h.update(struct.pack("!i", self.round))
        h.update(struct.pack("!iiii", *self.coins, self.next_ant_id, self.next_tower_id))
        for base in self.bases:
            h.update(struct.pack("!iii", base.hp, base.gen_speed_level, base.ant_level))
        h.update(len(self.towers).to_bytes(4, "big"))
        for t in self.towers:
            h.update(struct.pack("!iiiiii", t.tower_id, t.player, t.x, t.y,
                                 t.tower_type, t.cooldown))
        h.update(len(self.ants).to_bytes(4, "big"))
        for a in self.ants:
            h.update(struct.pack("!iiiiiiii", a.ant_id, a.player, a.x, a.y,
                                 a.hp, a.level, a.age, a.state))
            h.update(bytes(a.path))
        for w in self.super_weapons:
            h.update(struct.pack("!iiiii", w.weapon_type, w.player, w.x, w.y, w.left_time))
        for cooldowns in self.super_weapon_cd:
            for weapon_type in SuperWeaponType:
                h.update(struct.pack("!i", cooldowns[weapon_type]))
        for layer in self.pheromone.values:
            for column in layer:
                h.update(struct.pack(f"!{len(column)}d", *column))
        return h.digest()
