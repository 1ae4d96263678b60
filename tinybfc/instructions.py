from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List


class InstructionKind(str, Enum):
    MOVE = "move"
    CHANGE = "change"
    ASSIGN = "assign"
    PRINT = "print"
    READ = "read"
    LOOP_START = "loop_start"
    LOOP_END = "loop_end"


@dataclass(frozen=True)
class Instruction:
    """One operation of the intermediate representation.

    ``value`` is the pointer delta for MOVE, the cell delta for CHANGE and the
    absolute cell value for ASSIGN; the remaining kinds ignore it.
    """

    kind: InstructionKind
    value: int = 0

    def __repr__(self) -> str:
        if self.kind in _VALUED_KINDS:
            return f"{self.kind.name}({self.value})"
        return self.kind.name


_VALUED_KINDS = frozenset({InstructionKind.MOVE, InstructionKind.CHANGE, InstructionKind.ASSIGN})

Program = List[Instruction]


def move_pointer(delta: int) -> Instruction:
    return Instruction(InstructionKind.MOVE, delta)


def change_value(delta: int) -> Instruction:
    return Instruction(InstructionKind.CHANGE, delta)


def assign_value(value: int) -> Instruction:
    return Instruction(InstructionKind.ASSIGN, value)


PRINT = Instruction(InstructionKind.PRINT)
READ = Instruction(InstructionKind.READ)
LOOP_START = Instruction(InstructionKind.LOOP_START)
LOOP_END = Instruction(InstructionKind.LOOP_END)


__all__ = [
    "Instruction",
    "InstructionKind",
    "Program",
    "move_pointer",
    "change_value",
    "assign_value",
    "PRINT",
    "READ",
    "LOOP_START",
    "LOOP_END",
]
