"""Tests for tower targeting and damage."""

from antwar.simulation.combat import attack_ants, find_targets, tower_attack
from antwar.simulation.entities import (
    Ant,
    AntState,
    SuperWeaponType,
    Tower,
    TowerType,
    new_tower,
)
from antwar.simulation.state import GameState


def ready_tower(tower_type: TowerType = TowerType.BASIC, player: int = 0,
                pos: tuple[int, int] = (4, 9)) -> Tower:
    tower = new_tower(0, player, pos[0], pos[1], tower_type)
    tower.cooldown = 0
    return tower


def enemy(pos: tuple[int, int], level: int = 0, ant_id: int = 0, **kwargs) -> Ant:
    hp = kwargs.pop("hp", (10, 25, 50)[level])
    return Ant(ant_id=ant_id, player=1, x=pos[0], y=pos[1], hp=hp, level=level, **kwargs)


class TestTargeting:
    def test_nearest_first(self):
        ants = [enemy((4, 11)), enemy((4, 8), ant_id=1)]
        assert find_targets(ready_tower(), ants, 1) == [1]

    def test_equal_distance_goes_to_lower_index(self):
        ants = [enemy((4, 10)), enemy((4, 8), ant_id=1)]
        assert find_targets(ready_tower(), ants, 1) == [0]

    def test_ignores_own_dead_and_distant_ants(self):
        ants = [
            Ant(ant_id=0, player=0, x=4, y=8, hp=10, level=0),
            enemy((4, 10), ant_id=1, state=AntState.FAIL),
            enemy((4, 12), ant_id=2),
        ]
        assert find_targets(ready_tower(), ants, 1) == []

    def test_frozen_ants_are_targets(self):
        ants = [enemy((4, 10), state=AntState.FROZEN)]
        assert find_targets(ready_tower(), ants, 1) == [0]


class TestTowerAttack:
    def test_cooldown_counts_down_first(self):
        tower = new_tower(0, 0, 4, 9)
        ants = [enemy((4, 10))]
        assert tower_attack(tower, ants) == []
        assert tower.cooldown == 1
        assert tower_attack(tower, ants) == [0]
        assert ants[0].hp == 5
        assert tower.cooldown == 2

    def test_no_target_keeps_tower_ready(self):
        tower = ready_tower()
        assert tower_attack(tower, []) == []
        assert tower.cooldown == 0

    def test_kill(self):
        ants = [enemy((4, 10), hp=5)]
        tower_attack(ready_tower(), ants)
        assert ants[0].state == AntState.FAIL

    def test_double_hits_two(self):
        ants = [enemy((4, 10)), enemy((4, 12), ant_id=1), enemy((4, 14), ant_id=2)]
        assert tower_attack(ready_tower(TowerType.DOUBLE), ants) == [0, 1]
        assert ants[2].hp == 10

    def test_quick_plus_attacks_twice(self):
        ants = [enemy((4, 10), level=2)]
        tower = ready_tower(TowerType.QUICK_PLUS)
        assert tower_attack(tower, ants) == [0]
        assert ants[0].hp == 50 - 16
        assert tower.cooldown == 1

    def test_mortar_splash(self):
        # (4, 11) is next to the target; (4, 13) is out of splash range
        ants = [enemy((4, 10), level=2), enemy((4, 11), level=2, ant_id=1),
                enemy((4, 13), level=2, ant_id=2)]
        assert tower_attack(ready_tower(TowerType.MORTAR), ants) == [0, 1]
        assert [a.hp for a in ants] == [34, 34, 50]

    def test_missile_splash_reaches_two(self):
        # Target at (4, 10); the others sit 1, 2 and 3 steps beyond it
        ants = [enemy((4, 10), level=2), enemy((4, 11), level=2, ant_id=1),
                enemy((4, 12), level=2, ant_id=2), enemy((4, 13), level=2, ant_id=3)]
        assert tower_attack(ready_tower(TowerType.MISSILE), ants) == [0, 1, 2]
        assert [a.hp for a in ants] == [5, 5, 5, 50]

    def test_pulse_hits_everything_in_range(self):
        ants = [enemy((4, 10), level=2), enemy((4, 11), level=2, ant_id=1),
                enemy((4, 12), level=2, ant_id=2)]
        assert tower_attack(ready_tower(TowerType.PULSE), ants) == [0, 1]
        assert ants[2].hp == 50

    def test_ice_freezes(self):
        ants = [enemy((4, 10), level=1)]
        tower_attack(ready_tower(TowerType.ICE), ants)
        assert ants[0].hp == 10
        assert ants[0].state == AntState.FROZEN

    def test_evasion_absorbs_hits(self):
        ants = [enemy((4, 10), evasion=2)]
        assert tower_attack(ready_tower(), ants) == [0]
        assert ants[0].hp == 10
        assert ants[0].evasion == 1

    def test_deflector_blocks_weak_hits(self):
        ants = [enemy((4, 10), level=2, deflector=True)]
        tower_attack(ready_tower(), ants)
        assert ants[0].hp == 50
        tower_attack(ready_tower(TowerType.HEAVY_PLUS), ants)
        assert ants[0].hp == 15

    def test_deterministic(self):
        def run() -> list[int]:
            ants = [enemy((4, 10), level=2), enemy((4, 8), level=2, ant_id=1),
                    enemy((4, 11), level=2, ant_id=2)]
            tower_attack(ready_tower(TowerType.MORTAR_PLUS), ants)
            return [a.hp for a in ants]
        assert run() == run()


class TestAttackPhase:
    def test_reward_paid_to_tower_owner(self, game_state: GameState):
        tower = game_state.build_tower(0, 4, 9)
        tower.cooldown = 0
        game_state.ants.append(enemy((4, 10), hp=3))
        attack_ants(game_state)
        assert game_state.ants[0].state == AntState.FAIL
        assert game_state.coins == [53, 50]

    def test_splash_kills_pay_once_each(self, game_state: GameState):
        tower = game_state.build_tower(0, 4, 9, TowerType.MORTAR)
        tower.cooldown = 0
        game_state.ants.extend([enemy((4, 10)), enemy((4, 11), ant_id=1)])
        attack_ants(game_state)
        assert game_state.coins[0] == 56

    def test_emp_freezes_tower(self, game_state: GameState):
        tower = game_state.build_tower(0, 4, 9)
        tower.cooldown = 1
        game_state.ants.append(enemy((4, 10)))
        game_state.use_super_weapon(SuperWeaponType.EMP_BLASTER, 1, 4, 9)
        attack_ants(game_state)
        assert game_state.ants[0].hp == 10
        assert tower.cooldown == 1

    def test_deflector_from_active_weapon(self, game_state: GameState):
        tower = game_state.build_tower(0, 4, 9)
        tower.cooldown = 0
        game_state.ants.append(enemy((4, 10), level=2))
        game_state.use_super_weapon(SuperWeaponType.DEFLECTOR, 1, 4, 10)
        attack_ants(game_state)
        assert game_state.ants[0].hp == 50
        assert not game_state.ants[0].deflector

    def test_modifiers_cleared(self, game_state: GameState):
        game_state.ants.append(enemy((4, 10), evasion=2))
        attack_ants(game_state)
        assert game_state.ants[0].evasion == 0

    def test_towers_act_in_build_order(self, game_state: GameState):
        first = game_state.build_tower(0, 4, 9)
        second = game_state.build_tower(0, 5, 9)
        first.cooldown = second.cooldown = 0
        game_state.ants.extend([enemy((4, 10), hp=5), enemy((5, 10), ant_id=1)])
        attack_ants(game_state)
        # The first tower kills ant 0, so the second moves on to ant 1
        assert game_state.ants[0].state == AntState.FAIL
        assert game_state.ants[1].hp == 5
