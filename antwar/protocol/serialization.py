"""Judger protocol: decoding what the judger sends, encoding what we send.

Input from the judger is whitespace-separated decimal text:

    init:        [player_id] [seed]
    operations:  [count] then per op [type] [arg0]? [arg1]?
                 (base upgrades carry no args, downgrades carry one)
    round info:  [round]
                 [n_towers] then per tower  [id] [player] [x] [y] [type] [cd]
                 [n_ants]   then per ant    [id] [player] [x] [y] [hp] [level] [age] [state]
                 [coin0] [coin1]
                 [hp0] [hp1]

Output to the judger is a frame of

    [body_len:u32, big-endian][body:ascii]

where the body for operations is "[count]\\n" followed by one line per op.
"""

from __future__ import annotations

import io
import struct
from dataclasses import dataclass, field
from typing import TextIO

from antwar.simulation.entities import Ant, AntState, Tower, TowerType
from antwar.simulation.operations import ARG_COUNT, Operation, OperationType

FRAME_HEADER = struct.Struct("!I")  # body length (u32)


class TokenReader:
    """Pulls whitespace-separated integers from a text stream, line by line."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._tokens: list[str] = []

    def next_int(self) -> int:
        while not self._tokens:
            line = self._stream.readline()
            if not line:
                raise ValueError("Unexpected end of input")
            self._tokens = line.split()[::-1]
        token = self._tokens.pop()
        try:
            return int(token)
        except ValueError:
            raise ValueError(f"Expected an integer, got {token!r}") from None


def _reader(source: str | TokenReader) -> TokenReader:
    if isinstance(source, TokenReader):
        return source
    return TokenReader(io.StringIO(source))


# --- Init ---

@dataclass(frozen=True, slots=True)
class InitInfo:
    """First message of a game."""
    player_id: int
    seed: int


def decode_init_info(source: str | TokenReader) -> InitInfo:
    reader = _reader(source)
    player_id = reader.next_int()
    seed = reader.next_int()
    if player_id not in (0, 1):
        raise ValueError(f"Invalid player id {player_id}")
    return InitInfo(player_id=player_id, seed=seed)


# --- Operations ---

def decode_operations(source: str | TokenReader) -> list[Operation]:
    """Decode an operation list. Unknown operation codes raise ValueError."""
    reader = _reader(source)
    count = reader.next_int()
    if count < 0:
        raise ValueError(f"Negative operation count {count}")
    ops: list[Operation] = []
    for _ in range(count):
        op_type = OperationType(reader.next_int())
        args = [reader.next_int() for _ in range(ARG_COUNT[op_type])]
        ops.append(Operation(op_type, *args))
    return ops


def format_operation(op: Operation) -> str:
    """One operation as a protocol line, with trailing newline."""
    return " ".join(str(v) for v in (int(op.op_type), *op.args())) + "\n"


def encode_string(text: str) -> bytes:
    """Frame a raw ASCII body with its length header."""
    body = text.encode("ascii")
    return FRAME_HEADER.pack(len(body)) + body


def encode_operations(ops: list[Operation]) -> bytes:
    """Frame an operation list for the judger."""
    body = f"{len(ops)}\n" + "".join(format_operation(op) for op in ops)
    return encode_string(body)


def decode_frame(data: bytes) -> str:
    """Unwrap a length-prefixed frame into its body text.

    The inverse of encode_string(). The judger never frames what it sends
    us, so this is only needed to inspect our own outgoing frames, e.g.
    when replaying or testing a controller.

    Raises ValueError if the data is too short.
    """
    if len(data) < FRAME_HEADER.size:
        raise ValueError("Frame too short")
    (length,) = FRAME_HEADER.unpack_from(data)
    body = data[FRAME_HEADER.size:FRAME_HEADER.size + length]
    if len(body) < length:
        raise ValueError("Frame body truncated")
    return body.decode("ascii")


# --- Round info ---

@dataclass(slots=True)
class RoundInfo:
    """Authoritative state reported by the judger after a round."""
    round: int
    towers: list[Tower] = field(default_factory=list)
    ants: list[Ant] = field(default_factory=list)
    coins: tuple[int, int] = (0, 0)
    base_hp: tuple[int, int] = (0, 0)


def decode_round_info(source: str | TokenReader) -> RoundInfo:
    reader = _reader(source)
    info = RoundInfo(round=reader.next_int())

    for _ in range(reader.next_int()):
        tower_id, player, x, y, tower_type, cd = (reader.next_int() for _ in range(6))
        info.towers.append(Tower(
            tower_id=tower_id, player=player, x=x, y=y,
            tower_type=TowerType(tower_type), cooldown=cd,
        ))

    for _ in range(reader.next_int()):
        ant_id, player, x, y, hp, level, age, state = (reader.next_int() for _ in range(8))
        info.ants.append(Ant(
            ant_id=ant_id, player=player, x=x, y=y, hp=hp,
            level=level, age=age, state=AntState(state),
        ))

    info.coins = (reader.next_int(), reader.next_int())
    info.base_hp = (reader.next_int(), reader.next_int())
    return info
