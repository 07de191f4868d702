"""Entity definitions: ants, towers, bases and super weapons.

Tower and super weapon behaviour is driven by closed enumerations plus
static lookup tables. Entities reference each other only by integer id,
never by object identity, since ants and towers come and go every round.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import NamedTuple

from antwar.config import (
    ANT_MAX_HP,
    ANT_REWARD,
    BASE_GENERATION_CYCLE,
    BASE_MAX_HP,
    BASE_POSITIONS,
)
from antwar.simulation.hexmap import distance, neighbor


# -- Ants ----------------------------------------------------------------------

class AntState(IntEnum):
    """Life cycle of an ant.

    An ant is "alive" while ALIVE or FROZEN. Every other state is terminal:
    the ant is removed at the next cleanup and never comes back.
    """
    ALIVE = 0
    SUCCESS = 1   # reached the opponent's base
    FAIL = 2      # hp dropped to zero or below
    TOO_OLD = 3   # reached the age limit
    FROZEN = 4    # hit by an ice tower, skips one move


@dataclass(slots=True)
class Ant:
    """Mobile attacking unit.

    `evasion` and `deflector` are combat modifiers granted by super weapons
    and only meaningful within the round they were granted in.
    """
    ant_id: int
    player: int
    x: int
    y: int
    hp: int
    level: int
    age: int = 0
    state: AntState = AntState.ALIVE
    path: list[int] = field(default_factory=list)
    evasion: int = 0
    deflector: bool = False

    def move(self, direction: int) -> None:
        """Step one cell in `direction` and record it in the path."""
        self.path.append(direction)
        self.x, self.y = neighbor(self.x, self.y, direction)

    @property
    def max_hp(self) -> int:
        return ANT_MAX_HP[self.level]

    @property
    def reward(self) -> int:
        """Coins paid to whoever kills this ant."""
        return ANT_REWARD[self.level]

    @property
    def is_alive(self) -> bool:
        return self.state in (AntState.ALIVE, AntState.FROZEN)

    def is_in_range(self, x: int, y: int, radius: int) -> bool:
        return distance(self.x, self.y, x, y) <= radius

    def is_attackable_from(self, player: int, x: int, y: int, radius: int) -> bool:
        """Whether `player` can hit this ant from an area centred on (x, y)."""
        return self.player != player and self.is_alive and self.is_in_range(x, y, radius)


# -- Towers --------------------------------------------------------------------

class TowerType(IntEnum):
    """Tower types. The tens digit of an upgraded type names its parent."""
    BASIC = 0
    # Heavy class
    HEAVY = 1
    HEAVY_PLUS = 11
    ICE = 12
    CANNON = 13
    # Quick class
    QUICK = 2
    QUICK_PLUS = 21
    DOUBLE = 22
    SNIPER = 23
    # Mortar class
    MORTAR = 3
    MORTAR_PLUS = 31
    PULSE = 32
    MISSILE = 33


class TowerInfo(NamedTuple):
    damage: int
    speed: float   # rounds per attack; below 1 means several attacks per round
    range: int


TOWER_INFO: dict[TowerType, TowerInfo] = {
    TowerType.BASIC: TowerInfo(5, 2, 2),
    TowerType.HEAVY: TowerInfo(15, 2, 2),
    TowerType.QUICK: TowerInfo(6, 1, 3),
    TowerType.MORTAR: TowerInfo(16, 4, 3),
    TowerType.HEAVY_PLUS: TowerInfo(35, 2, 2),
    TowerType.ICE: TowerInfo(15, 2, 2),
    TowerType.CANNON: TowerInfo(50, 4, 3),
    TowerType.QUICK_PLUS: TowerInfo(8, 0.5, 3),
    TowerType.DOUBLE: TowerInfo(10, 1, 4),
    TowerType.SNIPER: TowerInfo(13, 2, 6),
    TowerType.MORTAR_PLUS: TowerInfo(35, 4, 4),
    TowerType.PULSE: TowerInfo(30, 3, 2),
    TowerType.MISSILE: TowerInfo(45, 6, 5),
}


def tower_level(tower_type: TowerType) -> int:
    """1 for BASIC, 2 for its direct children, 3 for the specializations."""
    if tower_type == TowerType.BASIC:
        return 1
    return 2 if tower_type < 10 else 3


def parent_type(tower_type: TowerType) -> TowerType | None:
    """Type one step up the upgrade tree, or None for the root."""
    if tower_type == TowerType.BASIC:
        return None
    return TowerType(tower_type // 10)


def child_types(tower_type: TowerType) -> tuple[TowerType, ...]:
    """Types a tower of `tower_type` may be upgraded into."""
    return tuple(t for t in TowerType if t != tower_type and parent_type(t) == tower_type)


@dataclass(slots=True)
class Tower:
    """Stationary defense unit.

    Stats are copied from TOWER_INFO whenever the type changes; `damage`
    may be buffed for one attack and is restored from the table afterwards.
    `cooldown` is the number of rounds until the next attack.
    """
    tower_id: int
    player: int
    x: int
    y: int
    tower_type: TowerType = TowerType.BASIC
    damage: int = 0
    range: int = 0
    speed: float = 0
    cooldown: int = 0

    def __post_init__(self) -> None:
        self._load_stats()

    def _load_stats(self) -> None:
        info = TOWER_INFO[self.tower_type]
        self.damage = info.damage
        self.speed = info.speed
        self.range = info.range

    @property
    def is_ready(self) -> bool:
        return self.cooldown <= 0

    def reset_cooldown(self) -> None:
        self.cooldown = int(self.speed) if self.speed > 1 else 1

    def reset_damage(self) -> None:
        """Drop any temporary attack buff."""
        self.damage = TOWER_INFO[self.tower_type].damage

    def upgrade(self, new_type: TowerType) -> None:
        """Change to `new_type` and restart the cooldown. No validity check."""
        self.tower_type = TowerType(new_type)
        self._load_stats()
        self.reset_cooldown()

    def downgrade(self) -> None:
        """Step back to the parent type. No validity check."""
        self.upgrade(parent_type(self.tower_type))

    def is_upgrade_type_valid(self, new_type: int) -> bool:
        return new_type in child_types(self.tower_type)

    def is_downgrade_valid(self) -> bool:
        """False for BASIC towers, which are destroyed instead."""
        return self.tower_type != TowerType.BASIC


def new_tower(tower_id: int, player: int, x: int, y: int,
              tower_type: TowerType = TowerType.BASIC) -> Tower:
    """A freshly built tower, cooldown already reset for its type."""
    tower = Tower(tower_id=tower_id, player=player, x=x, y=y, tower_type=tower_type)
    tower.reset_cooldown()
    return tower


# -- Bases ---------------------------------------------------------------------

@dataclass(slots=True)
class Base:
    """A player's home. Never destroyed; the game ends when hp reaches 0."""
    player: int
    x: int
    y: int
    hp: int = BASE_MAX_HP
    gen_speed_level: int = 0  # spawn cadence
    ant_level: int = 0        # level of spawned ants

    @classmethod
    def for_player(cls, player: int) -> Base:
        x, y = BASE_POSITIONS[player]
        return cls(player=player, x=x, y=y)

    @property
    def generation_cycle(self) -> int:
        return BASE_GENERATION_CYCLE[self.gen_speed_level]

    def generate_ant(self, ant_id: int, round_number: int) -> Ant | None:
        """Spawn an ant at the base if this round is on the spawn cadence."""
        if round_number % self.generation_cycle != 0:
            return None
        return Ant(
            ant_id=ant_id,
            player=self.player,
            x=self.x,
            y=self.y,
            hp=ANT_MAX_HP[self.ant_level],
            level=self.ant_level,
        )


# -- Super weapons -------------------------------------------------------------

class SuperWeaponType(IntEnum):
    LIGHTNING_STORM = 1     # active: kills enemy ants in range
    EMP_BLASTER = 2         # passive: enemy towers in range can't act
    DEFLECTOR = 3           # passive: friendly ants shrug off weak hits
    EMERGENCY_EVASION = 4   # active: friendly ants dodge the next hits


class SuperWeaponInfo(NamedTuple):
    duration: int
    range: int
    cooldown: int
    price: int


SUPER_WEAPON_INFO: dict[SuperWeaponType, SuperWeaponInfo] = {
    SuperWeaponType.LIGHTNING_STORM: SuperWeaponInfo(20, 3, 100, 150),
    SuperWeaponType.EMP_BLASTER: SuperWeaponInfo(20, 3, 100, 150),
    SuperWeaponType.DEFLECTOR: SuperWeaponInfo(10, 3, 50, 100),
    SuperWeaponType.EMERGENCY_EVASION: SuperWeaponInfo(1, 3, 50, 100),
}


@dataclass(slots=True)
class SuperWeapon:
    """A timed area effect centred on (x, y)."""
    weapon_type: SuperWeaponType
    player: int
    x: int
    y: int
    left_time: int = -1
    range: int = -1

    def __post_init__(self) -> None:
        info = SUPER_WEAPON_INFO[self.weapon_type]
        if self.left_time < 0:
            self.left_time = info.duration
        if self.range < 0:
            self.range = info.range

    def is_in_range(self, x: int, y: int) -> bool:
        return distance(x, y, self.x, self.y) <= self.range
