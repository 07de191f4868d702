"""Round settlement: advance the world by exactly one round.

This is the heart of the deterministic simulation. It runs after both
players have applied their operations for the round. Order:

    1. round cap      verdict by base hp, nothing else happens
    2. combat         towers attack ants
    3. movement       ants age and walk; reaching the enemy base hurts it
    4. pheromone      global decay, then reinforcement along dead ants' paths
    5. cleanup        terminal ants are removed
    6. spawning       bases produce ants on their cadence
    7. income         basic income for both players
    8. advance        round counter, super weapon cooldowns

A base falling to 0 hp during movement ends the round immediately.
"""

from __future__ import annotations

from enum import IntEnum

from antwar.config import ANT_AGE_LIMIT, BASIC_INCOME, MAX_ROUND
from antwar.simulation.combat import attack_ants
from antwar.simulation.entities import AntState
from antwar.simulation.navigation import next_move
from antwar.simulation.state import GameState


class GameResult(IntEnum):
    """Outcome of settling a round."""
    PLAYER0_WIN = 0
    PLAYER1_WIN = 1
    RUNNING = 2
    UNDECIDED = 3   # round cap reached with equal base hp

    @property
    def is_over(self) -> bool:
        return self != GameResult.RUNNING


def _win_for(player: int) -> GameResult:
    return GameResult.PLAYER0_WIN if player == 0 else GameResult.PLAYER1_WIN


def judge_winner(state: GameState) -> GameResult:
    """Verdict at the round cap: the base with more hp wins."""
    hp0, hp1 = state.bases[0].hp, state.bases[1].hp
    if hp0 < hp1:
        return GameResult.PLAYER1_WIN
    if hp0 > hp1:
        return GameResult.PLAYER0_WIN
    return GameResult.UNDECIDED


def move_ants(state: GameState) -> GameResult:
    """Age every ant and move the living ones one step.

    Killed ants only age. Ants past the age limit become TOO_OLD and stay
    put. Frozen ants skip their move and thaw afterwards. Boxed-in ants
    stay where they are without recording a step.

    Returns:
        A win for the mover's player if a base dropped to 0 hp, else RUNNING.
    """
    for ant in state.ants:
        ant.age += 1
        if ant.state == AntState.FAIL:
            continue
        if ant.age > ANT_AGE_LIMIT:
            ant.state = AntState.TOO_OLD
        if ant.state == AntState.ALIVE:
            direction = next_move(ant, state.pheromone)
            if direction is not None:
                ant.move(direction)

        enemy = state.bases[1 - ant.player]
        if (ant.x, ant.y) == (enemy.x, enemy.y):
            # Success counts even for an ant that just reached the age limit
            ant.state = AntState.SUCCESS
            state.update_base_hp(enemy.player, -1)
            if enemy.hp <= 0:
                return _win_for(ant.player)

        if ant.state == AntState.FROZEN:
            ant.state = AntState.ALIVE
    return GameResult.RUNNING


def generate_ants(state: GameState) -> None:
    """Let each base spawn an ant if the round is on its cadence."""
    for base in state.bases:
        ant = base.generate_ant(state.next_ant_id, state.round)
        if ant is not None:
            state.ants.append(ant)
            state.next_ant_id += 1


def advance_round(state: GameState) -> GameResult:
    """Settle the current round in place.

    Args:
        state: The world after both players applied their operations
            (mutated in place).

    Returns:
        RUNNING, or the verdict if the game ended this round.
    """
    if state.round == MAX_ROUND:
        return judge_winner(state)

    attack_ants(state)

    result = move_ants(state)
    if result.is_over:
        return result

    state.global_pheromone_attenuation()
    state.update_pheromone_for_ants()
    state.clear_dead_and_succeeded_ants()

    generate_ants(state)

    for player in (0, 1):
        state.update_coin(player, BASIC_INCOME)

    state.round += 1
    state.count_down_super_weapons_cd()
    return GameResult.RUNNING
