"""Combat system: towers attack ants.

All targeting is deterministic. A tower looks for the nearest attackable
enemy ants, ordered by hex distance and then by position in the ant list
(spawn order). Splash towers expand each target into an area:

    MORTAR, MORTAR_PLUS   radius 1 around the target
    MISSILE               radius 2 around the target
    PULSE                 the tower's own range around the tower
    everything else       the target alone

Terminology: "targets" are the ants a tower aims at; the "attacked" ants
are every ant actually hit, a superset of the targets for splash towers.
"""

from __future__ import annotations

from antwar.simulation.entities import Ant, AntState, Tower, TowerType
from antwar.simulation.hexmap import distance
from antwar.simulation.state import GameState

# Splash radius around each target, by tower type
_SPLASH_RADIUS = {
    TowerType.MORTAR: 1,
    TowerType.MORTAR_PLUS: 1,
    TowerType.MISSILE: 2,
}


def attack_ants(state: GameState) -> None:
    """Run the combat phase for one round.

    Deflector flags are computed from the active super weapons first and
    every transient ant modifier is cleared once all towers have acted.
    """
    for ant in state.ants:
        ant.deflector = state.is_shielded_by_deflector(ant)

    for tower in state.towers:
        # Towers inside an enemy EMP neither attack nor cool down
        if state.is_tower_shielded(tower):
            continue
        for idx in tower_attack(tower, state.ants):
            ant = state.ants[idx]
            if ant.state == AntState.FAIL:
                state.update_coin(tower.player, ant.reward)
        tower.reset_damage()

    for ant in state.ants:
        ant.deflector = False
        ant.evasion = 0


def tower_attack(tower: Tower, ants: list[Ant]) -> list[int]:
    """Count down the tower's cooldown and attack if it is ready.

    Returns:
        Sorted indexes into `ants` of every ant attacked this round, each
        listed once even if it was hit several times.
    """
    tower.cooldown = max(tower.cooldown - 1, 0)
    if not tower.is_ready:
        return []

    attempts = 1 if tower.speed >= 1 else int(1 / tower.speed)
    target_num = 2 if tower.tower_type == TowerType.DOUBLE else 1

    attacked: set[int] = set()
    for _ in range(attempts):
        targets = find_targets(tower, ants, target_num)
        for idx in find_attacked(tower, ants, targets):
            action(tower, ants[idx])
            attacked.add(idx)

    if attacked:
        tower.reset_cooldown()
    return sorted(attacked)


def find_targets(tower: Tower, ants: list[Ant], target_num: int) -> list[int]:
    """Indexes of up to `target_num` nearest attackable ants."""
    candidates = attackable_ants(tower.player, ants, tower.x, tower.y, tower.range)
    candidates.sort(key=lambda i: (distance(ants[i].x, ants[i].y, tower.x, tower.y), i))
    return candidates[:target_num]


def find_attacked(tower: Tower, ants: list[Ant], targets: list[int]) -> list[int]:
    """Expand targets into every ant hit, without repeats, in first-hit order."""
    attacked: list[int] = []
    for idx in targets:
        if tower.tower_type in _SPLASH_RADIUS:
            target = ants[idx]
            hit = attackable_ants(tower.player, ants, target.x, target.y,
                                  _SPLASH_RADIUS[tower.tower_type])
        elif tower.tower_type == TowerType.PULSE:
            hit = attackable_ants(tower.player, ants, tower.x, tower.y, tower.range)
        else:
            hit = [idx]
        for i in hit:
            if i not in attacked:
                attacked.append(i)
    return attacked


def attackable_ants(player: int, ants: list[Ant], x: int, y: int, radius: int) -> list[int]:
    """Indexes of living enemy ants within `radius` of (x, y)."""
    return [i for i, ant in enumerate(ants) if ant.is_attackable_from(player, x, y, radius)]


def action(tower: Tower, ant: Ant) -> None:
    """Deal one hit to an ant, honouring evasion and the deflector."""
    if ant.evasion > 0:
        ant.evasion -= 1
        return
    if ant.deflector and tower.damage < ant.max_hp // 2:
        return
    ant.hp -= tower.damage
    if tower.tower_type == TowerType.ICE:
        ant.state = AntState.FROZEN
    if ant.hp <= 0:
        ant.state = AntState.FAIL
