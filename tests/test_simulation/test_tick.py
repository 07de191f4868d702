"""Tests for round settlement: ordering, movement, spawning, verdicts."""

import pytest

from antwar.config import BASE_POSITIONS, MAX_ROUND
from antwar.simulation.entities import Ant, AntState, SuperWeaponType
from antwar.simulation.state import GameState
from antwar.simulation.tick import (
    GameResult,
    advance_round,
    generate_ants,
    judge_winner,
    move_ants,
)
from tests.scenario import walk_path


def walked_ant(player: int, pos: tuple[int, int], ant_id: int = 0, **kwargs) -> Ant:
    return Ant(ant_id=ant_id, player=player, x=pos[0], y=pos[1], hp=10, level=0,
               path=walk_path(BASE_POSITIONS[player], pos), **kwargs)


class TestVerdict:
    def test_more_hp_wins(self, game_state: GameState):
        game_state.set_base_hp(0, 40)
        assert judge_winner(game_state) == GameResult.PLAYER1_WIN
        game_state.set_base_hp(1, 30)
        assert judge_winner(game_state) == GameResult.PLAYER0_WIN

    def test_equal_hp_undecided(self, game_state: GameState):
        assert judge_winner(game_state) == GameResult.UNDECIDED

    def test_round_cap_settles_nothing(self, game_state: GameState):
        game_state.round = MAX_ROUND
        game_state.update_base_hp(0, -1)
        before = game_state.compute_hash()
        assert advance_round(game_state) == GameResult.PLAYER1_WIN
        assert game_state.compute_hash() == before

    def test_running_is_not_over(self):
        assert not GameResult.RUNNING.is_over
        assert GameResult.UNDECIDED.is_over


class TestMoveAnts:
    def test_alive_ant_steps_and_ages(self, flat_state: GameState):
        ant = Ant(ant_id=0, player=0, x=2, y=9, hp=10, level=0)
        flat_state.ants.append(ant)
        assert move_ants(flat_state) == GameResult.RUNNING
        assert (ant.x, ant.y) == (3, 9)
        assert ant.age == 1
        assert ant.path == [4]

    def test_dead_ant_only_ages(self, flat_state: GameState):
        ant = Ant(ant_id=0, player=0, x=2, y=9, hp=0, level=0, state=AntState.FAIL)
        flat_state.ants.append(ant)
        move_ants(flat_state)
        assert (ant.x, ant.y, ant.age) == (2, 9, 1)

    def test_frozen_ant_thaws_in_place(self, flat_state: GameState):
        ant = Ant(ant_id=0, player=0, x=2, y=9, hp=10, level=0, state=AntState.FROZEN)
        flat_state.ants.append(ant)
        move_ants(flat_state)
        assert (ant.x, ant.y) == (2, 9)
        assert ant.state == AntState.ALIVE

    def test_too_old(self, flat_state: GameState):
        ant = Ant(ant_id=0, player=0, x=2, y=9, hp=10, level=0, age=32)
        flat_state.ants.append(ant)
        move_ants(flat_state)
        assert ant.state == AntState.TOO_OLD
        assert (ant.x, ant.y) == (2, 9)

    def test_reaching_base_hurts_it(self, flat_state: GameState):
        ant = walked_ant(0, (15, 9))
        flat_state.ants.append(ant)
        move_ants(flat_state)
        assert (ant.x, ant.y) == (16, 9)
        assert ant.state == AntState.SUCCESS
        assert flat_state.bases[1].hp == 49

    def test_last_hit_wins_immediately(self, flat_state: GameState):
        flat_state.set_base_hp(1, 1)
        flat_state.ants.append(walked_ant(0, (15, 9)))
        assert move_ants(flat_state) == GameResult.PLAYER0_WIN
        assert flat_state.bases[1].hp == 0


class TestGenerateAnts:
    def test_spawn_on_cadence(self, game_state: GameState):
        generate_ants(game_state)
        assert [(a.ant_id, a.player) for a in game_state.ants] == [(0, 0), (1, 1)]
        game_state.round = 1
        generate_ants(game_state)
        assert len(game_state.ants) == 2
        assert game_state.next_ant_id == 2

    def test_upgraded_base(self, game_state: GameState):
        game_state.round = 3
        game_state.upgrade_generation_speed(1)
        game_state.upgrade_generation_speed(1)
        game_state.upgrade_generated_ant(1)
        generate_ants(game_state)
        assert len(game_state.ants) == 1
        assert game_state.ants[0].hp == 25


class TestAdvanceRound:
    def test_first_round(self, game_state: GameState):
        assert advance_round(game_state) == GameResult.RUNNING
        assert game_state.round == 1
        assert game_state.coins == [51, 51]
        assert len(game_state.ants) == 2
        # Freshly spawned ants have not moved yet
        assert all(a.age == 0 for a in game_state.ants)

    def test_ants_walk_each_round(self, game_state: GameState):
        advance_round(game_state)
        advance_round(game_state)
        assert all(a.age == 1 and len(a.path) == 1 for a in game_state.ants)

    def test_dead_ants_cleared_and_scented(self, flat_state: GameState):
        ant = Ant(ant_id=0, player=0, x=2, y=9, hp=0, level=0, state=AntState.FAIL)
        flat_state.ants.append(ant)
        flat_state.next_ant_id = 1
        flat_state.round = 1
        advance_round(flat_state)
        assert flat_state.ant_of_id(0) is None
        assert flat_state.pheromone.get(0, 2, 9) == pytest.approx(0.97 * 8 + 0.3 - 5)

    def test_weapon_cooldowns_tick(self, game_state: GameState):
        game_state.use_super_weapon(SuperWeaponType.LIGHTNING_STORM, 0, 9, 9)
        advance_round(game_state)
        assert game_state.super_weapon_cd[0][SuperWeaponType.LIGHTNING_STORM] == 99
        assert game_state.super_weapon_cd[1][SuperWeaponType.LIGHTNING_STORM] == 0

    def test_deterministic(self):
        s1, s2 = GameState(seed=99), GameState(seed=99)
        for _ in range(60):
            advance_round(s1)
            advance_round(s2)
        assert s1.compute_hash() == s2.compute_hash()
