"""Shared test fixtures for Ant War."""

from __future__ import annotations

import pytest

from antwar.simulation.state import GameState


@pytest.fixture
def game_state() -> GameState:
    """A fresh game state with seed 42."""
    return GameState(seed=42)


@pytest.fixture
def flat_state() -> GameState:
    """A fresh game state whose pheromone field is uniform.

    Seed 0 makes the noise generator return 0 forever, so every cell
    starts at exactly 8.0.
    """
    return GameState(seed=0)
