"""Hexagonal board geometry.

The board is a fixed hexagon of MAP_SIZE x MAP_SIZE addressable points,
indexed as MAP_PROPERTY[x][y]. Rows of equal y parity share the same six
neighbour offsets:

    y even:                         y odd:
                 (x-1, y)                        (x-1, y)
      (x, y-1)            (x, y+1)   (x-1, y-1)            (x-1, y+1)
                 (x, y)                          (x, y)
      (x+1, y-1)          (x+1, y+1) (x, y-1)              (x, y+1)
                 (x+1, y)                        (x+1, y)

Direction indices 0..5 into OFFSETS are stable: ants record their path as a
list of these indices, so the order must never change.
"""

from __future__ import annotations

from enum import IntEnum

from antwar.config import MAP_SIZE


class PointType(IntEnum):
    VOID = -1              # off the board
    PATH = 0               # ants can walk here
    BARRIER = 1            # no walking, no building
    PLAYER0_HIGHLAND = 2   # player 0 may build here
    PLAYER1_HIGHLAND = 3   # player 1 may build here


MAP_PROPERTY: tuple[tuple[int, ...], ...] = (
    (-1, -1, -1, -1, -1, -1, -1, -1, 0, 1, 0, -1, -1, -1, -1, -1, -1, -1, -1),
    (-1, -1, -1, -1, -1, -1, 0, 0, 1, 0, 1, 0, 0, -1, -1, -1, -1, -1, -1),
    (-1, -1, -1, -1, 0, 0, 0, 1, 1, 0, 1, 1, 0, 0, 0, -1, -1, -1, -1),
    (-1, -1, 0, 0, 0, 1, 1, 0, 0, 0, 0, 0, 1, 1, 0, 0, 0, -1, -1),
    (0, 0, 2, 2, 0, 1, 0, 0, 0, 2, 0, 0, 0, 1, 0, 2, 2, 0, 0),
    (0, 0, 0, 2, 0, 0, 2, 2, 0, 2, 0, 2, 2, 0, 0, 2, 0, 0, 0),
    (0, 2, 2, 0, 2, 0, 0, 2, 0, 2, 0, 2, 0, 0, 2, 0, 2, 2, 0),
    (0, 2, 0, 0, 0, 2, 0, 0, 2, 0, 2, 0, 0, 2, 0, 0, 0, 2, 0),
    (0, 0, 2, 0, 2, 0, 0, 2, 0, 0, 0, 2, 0, 0, 2, 0, 2, 0, 0),
    (0, 1, 3, 0, 3, 1, 0, 1, 0, 1, 0, 1, 0, 1, 3, 0, 3, 1, 0),
    (0, 0, 0, 0, 0, 0, 0, 3, 3, 0, 3, 3, 0, 0, 0, 0, 0, 0, 0),
    (0, 3, 3, 0, 3, 3, 0, 0, 0, 0, 0, 0, 0, 3, 3, 0, 3, 3, 0),
    (0, 3, 0, 0, 0, 0, 3, 3, 0, 3, 0, 3, 3, 0, 0, 0, 0, 3, 0),
    (0, 0, 3, 3, 0, 0, 0, 3, 0, 3, 0, 3, 0, 0, 0, 3, 3, 0, 0),
    (-1, 0, 0, 3, 0, 1, 1, 0, 0, 3, 0, 0, 1, 1, 0, 3, 0, 0, -1),
    (-1, -1, -1, 0, 0, 1, 0, 0, 1, 0, 1, 0, 0, 1, 0, 0, -1, -1, -1),
    (-1, -1, -1, -1, -1, 0, 0, 1, 1, 0, 1, 1, 0, 0, -1, -1, -1, -1, -1),
    (-1, -1, -1, -1, -1, -1, -1, 0, 0, 0, 0, 0, -1, -1, -1, -1, -1, -1, -1),
    (-1, -1, -1, -1, -1, -1, -1, -1, -1, 1, -1, -1, -1, -1, -1, -1, -1, -1, -1),
)

# OFFSETS[y % 2][direction] = (dx, dy)
OFFSETS: tuple[tuple[tuple[int, int], ...], ...] = (
    ((0, 1), (-1, 0), (0, -1), (1, -1), (1, 0), (1, 1)),
    ((-1, 1), (-1, 0), (-1, -1), (0, -1), (1, 0), (0, 1)),
)

DIRECTIONS = range(6)


def opposite_direction(direction: int) -> int:
    """Direction that undoes a step in `direction`."""
    return (direction + 3) % 6


def neighbor(x: int, y: int, direction: int) -> tuple[int, int]:
    """Coordinates one step from (x, y) in the given direction."""
    dx, dy = OFFSETS[y % 2][direction]
    return x + dx, y + dy


def distance(x0: int, y0: int, x1: int, y1: int) -> int:
    """Hex distance between two points (NOT Euclidean).

    Every step across a row moves half a column, so the column delta is
    discounted by half the row delta, with the odd leftover step depending
    on the starting row's parity and the direction of travel.
    """
    dy = abs(y0 - y1)
    if dy % 2:
        if x0 > x1:
            dx = max(0, abs(x0 - x1) - dy // 2 - (y0 % 2))
        else:
            dx = max(0, abs(x0 - x1) - dy // 2 - (1 - (y0 % 2)))
    else:
        dx = max(0, abs(x0 - x1) - dy // 2)
    return dx + dy


def point_type(x: int, y: int) -> PointType:
    """Static type of a point. Out-of-bounds returns VOID."""
    if 0 <= x < MAP_SIZE and 0 <= y < MAP_SIZE:
        return PointType(MAP_PROPERTY[x][y])
    return PointType.VOID


def is_valid_pos(x: int, y: int) -> bool:
    """Whether (x, y) lies on the board."""
    return point_type(x, y) != PointType.VOID


def is_path(x: int, y: int) -> bool:
    """Whether ants can walk on (x, y)."""
    return point_type(x, y) == PointType.PATH


def is_highland(player: int, x: int, y: int) -> bool:
    """Whether `player` may build a tower on (x, y)."""
    own = PointType.PLAYER0_HIGHLAND if player == 0 else PointType.PLAYER1_HIGHLAND
    return point_type(x, y) == own


def get_direction(x0: int, y0: int, x1: int, y1: int) -> int:
    """Direction index from (x0, y0) to an adjacent (x1, y1), or -1."""
    delta = (x1 - x0, y1 - y0)
    for direction, offset in enumerate(OFFSETS[y0 % 2]):
        if offset == delta:
            return direction
    return -1


def all_positions() -> list[tuple[int, int]]:
    """Every on-board point, row-major."""
    return [
        (x, y)
        for x in range(MAP_SIZE)
        for y in range(MAP_SIZE)
        if MAP_PROPERTY[x][y] != PointType.VOID
    ]
