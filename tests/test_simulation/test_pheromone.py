"""Tests for the pheromone field."""

import pytest

from antwar.config import MAP_SIZE
from antwar.simulation.entities import Ant, AntState
from antwar.simulation.pheromone import PheromoneField, Random


class TestRandom:
    def test_zero_seed_is_stuck(self):
        rng = Random(0)
        assert [rng.get() for _ in range(3)] == [0, 0, 0]

    def test_sequence(self):
        rng = Random(1)
        first = rng.get()
        assert first == 25214903917
        assert rng.get() == (25214903917 * first) & ((1 << 48) - 1)


class TestInitialField:
    def test_fill_order(self):
        field = PheromoneField(seed=1)
        rng = Random(1)
        first, second = rng.get(), rng.get()
        assert field.get(0, 0, 0) == first * 2.0 ** -46 + 8
        assert field.get(0, 0, 1) == second * 2.0 ** -46 + 8

    def test_values_in_noise_band(self):
        field = PheromoneField(seed=12345)
        for layer in field.values:
            for column in layer:
                assert all(8.0 <= v < 12.0 for v in column)

    def test_shape(self):
        field = PheromoneField(seed=3)
        assert len(field.values) == 2
        assert all(len(layer) == MAP_SIZE for layer in field.values)
        assert all(len(column) == MAP_SIZE for column in field.values[1])


class TestAttenuation:
    def test_converges_to_ten(self):
        field = PheromoneField(seed=0)
        field.values[0][3][9] = 20.0
        for _ in range(500):
            field.attenuate()
        assert field.get(0, 3, 9) == pytest.approx(10.0, abs=1e-3)
        assert field.get(1, 5, 5) == pytest.approx(10.0, abs=1e-3)

    def test_single_step(self):
        field = PheromoneField(seed=0)
        field.attenuate()
        assert field.get(0, 9, 9) == pytest.approx(0.97 * 8 + 0.3)


class TestUpdateForAnt:
    def _ant(self, state: AntState, path: list[int], pos=(2, 9)) -> Ant:
        return Ant(ant_id=0, player=0, x=pos[0], y=pos[1], hp=0, level=0,
                   state=state, path=path)

    def test_alive_ant_leaves_no_trace(self):
        field = PheromoneField(seed=0)
        field.update_for_ant(self._ant(AntState.ALIVE, [4], pos=(3, 9)))
        assert field.get(0, 2, 9) == 8.0
        assert field.get(0, 3, 9) == 8.0

    def test_success_reinforces_path(self):
        field = PheromoneField(seed=0)
        field.update_for_ant(self._ant(AntState.SUCCESS, [4], pos=(3, 9)))
        assert field.get(0, 2, 9) == 18.0
        assert field.get(0, 3, 9) == 18.0
        assert field.get(1, 2, 9) == 8.0

    def test_each_cell_once(self):
        # Out to (3, 9) and back home: the base cell is visited twice
        field = PheromoneField(seed=0)
        field.update_for_ant(self._ant(AntState.TOO_OLD, [4, 1]))
        assert field.get(0, 2, 9) == 5.0
        assert field.get(0, 3, 9) == 5.0

    def test_floor_at_zero(self):
        field = PheromoneField(seed=0)
        field.values[0][3][9] = 2.0
        field.update_for_ant(self._ant(AntState.FAIL, [4], pos=(3, 9)))
        assert field.get(0, 3, 9) == 0.0
        assert field.get(0, 2, 9) == 3.0

    def test_path_must_end_at_ant(self):
        field = PheromoneField(seed=0)
        with pytest.raises(AssertionError):
            field.update_for_ant(self._ant(AntState.FAIL, [4], pos=(5, 9)))
