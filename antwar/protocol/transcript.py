"""Plain-text debug transcript of game states.

Each record is appended as:

    [round]
    [n_towers]              then per tower  id player x y type cd
    [n_ants]                then per ant    id player x y hp level age state
    [coin0] [coin1]
    [hp0] [hp1]
    2 * MAP_SIZE rows of pheromone, player 0 first, row x per line,
    every value "%.4f" followed by a space

Records carry no separators; the counts make them self-delimiting, so
load() can read a whole file back for replay inspection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, TextIO

from antwar.config import MAP_SIZE, TRANSCRIPT_PRECISION
from antwar.simulation.state import GameState


def dump(state: GameState, stream: TextIO) -> None:
    """Append one transcript record for `state`."""
    lines = [str(state.round), str(len(state.towers))]
    for t in state.towers:
        lines.append(f"{t.tower_id} {t.player} {t.x} {t.y} {int(t.tower_type)} {t.cooldown}")
    lines.append(str(len(state.ants)))
    for a in state.ants:
        lines.append(f"{a.ant_id} {a.player} {a.x} {a.y} {a.hp} {a.level} {a.age} {int(a.state)}")
    lines.append(f"{state.coins[0]} {state.coins[1]}")
    lines.append(f"{state.bases[0].hp} {state.bases[1].hp}")
    for layer in state.pheromone.values:
        for column in layer:
            lines.append("".join(f"{v:.{TRANSCRIPT_PRECISION}f} " for v in column))
    stream.write("\n".join(lines) + "\n")


def dump_to_file(state: GameState, path: str | Path) -> None:
    with open(path, "a", encoding="ascii") as f:
        dump(state, f)


def show(state: GameState, stream: TextIO) -> None:
    """Write a human readable summary of `state` (no pheromone)."""
    stream.write(f"Rounds:{state.round}\n")
    stream.write("Towers:\n")
    stream.write("id\tplayer\tx\ty\ttype\tcd\n")
    for t in state.towers:
        stream.write(f"{t.tower_id}\t{t.player}\t\t{t.x}\t{t.y}\t"
                     f"{t.tower_type.name}\t{t.cooldown}\n")
    stream.write("Ants:\n")
    stream.write("id\tplayer\tx\ty\thp\tage\tstate\n")
    for a in state.ants:
        stream.write(f"{a.ant_id}\t{a.player}\t\t{a.x}\t{a.y}\t"
                     f"{a.hp}\t{a.age}\t{a.state.name}\n")
    stream.write(f"coin0:{state.coins[0]}\ncoin1:{state.coins[1]}\n")
    stream.write(f"base0:{state.bases[0].hp}\nbase1:{state.bases[1].hp}\n")


# --- Reading back ---

@dataclass(slots=True)
class TranscriptRecord:
    """One parsed transcript record. Rows mirror the dump format."""
    round: int
    towers: list[tuple[int, ...]] = field(default_factory=list)
    ants: list[tuple[int, ...]] = field(default_factory=list)
    coins: tuple[int, int] = (0, 0)
    base_hp: tuple[int, int] = (0, 0)
    pheromone: list[list[list[float]]] = field(default_factory=list)


def _ints(line: str, expected: int) -> tuple[int, ...]:
    values = tuple(int(v) for v in line.split())
    if len(values) != expected:
        raise ValueError(f"Expected {expected} values, got {line!r}")
    return values


def _next_line(lines: Iterator[str]) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise ValueError("Transcript record truncated") from None


def load(stream: TextIO) -> list[TranscriptRecord]:
    """Parse every record in a transcript stream.

    Raises ValueError on malformed or truncated records.
    """
    records: list[TranscriptRecord] = []
    lines = (line for line in stream if line.strip())
    for first in lines:
        (round_number,) = _ints(first, 1)
        record = TranscriptRecord(round=round_number)
        (n_towers,) = _ints(_next_line(lines), 1)
        record.towers = [_ints(_next_line(lines), 6) for _ in range(n_towers)]
        (n_ants,) = _ints(_next_line(lines), 1)
        record.ants = [_ints(_next_line(lines), 8) for _ in range(n_ants)]
        record.coins = _ints(_next_line(lines), 2)
        record.base_hp = _ints(_next_line(lines), 2)
        for _player in range(2):
            layer = []
            for _x in range(MAP_SIZE):
                row = [float(v) for v in _next_line(lines).split()]
                if len(row) != MAP_SIZE:
                    raise ValueError(f"Expected {MAP_SIZE} pheromone values, got {len(row)}")
                layer.append(row)
            record.pheromone.append(layer)
        records.append(record)
    return records
