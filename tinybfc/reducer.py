from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional, Union

from .instructions import (
    LOOP_END,
    LOOP_START,
    PRINT,
    READ,
    Program,
    change_value,
    move_pointer,
)

logger = logging.getLogger(__name__)


class MalformedProgram(Exception):
    """Raised when loop delimiters in the source are unbalanced."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at position {position}")
        self.message = message
        self.position = position


class CharType(Enum):
    NOP = 0
    MOVE_FORWARD = 1
    MOVE_BACKWARD = 2
    INCREMENT = 3
    DECREMENT = 4
    PRINT = 5
    READ = 6
    LOOP_START = 7
    LOOP_END = 8


_CHAR_TYPES: Dict[int, CharType] = {
    ord(">"): CharType.MOVE_FORWARD,
    ord("<"): CharType.MOVE_BACKWARD,
    ord("+"): CharType.INCREMENT,
    ord("-"): CharType.DECREMENT,
    ord("."): CharType.PRINT,
    ord(","): CharType.READ,
    ord("["): CharType.LOOP_START,
    ord("]"): CharType.LOOP_END,
}


class Reducer:
    """Folds a Brainfuck buffer into a list of instructions.

    Runs of pointer moves and of value changes collapse into one instruction
    each. Every iteration scans a move run first and a change run second, so
    ``+><+`` yields two separate changes (the moves cancel out) which are
    left for the optimizer to merge. Bytes outside the eight commands are skipped
    and may appear anywhere, including in the middle of a run.

    With ``strict`` set, unbalanced ``[``/``]`` raise :class:`MalformedProgram`;
    otherwise they are passed through unchecked.
    """

    def __init__(self, strict: bool = True) -> None:
        self.strict = strict

    def reduce(self, source: Union[bytes, str]) -> Program:
        if isinstance(source, str):
            source = source.encode("utf-8")
        self.data = bytes(source)
        self.pos = 0
        self.open_loops: List[int] = []
        program: Program = []

        while self.pos < len(self.data):
            self._skip_nops()

            delta = self._consume_run(CharType.MOVE_FORWARD, CharType.MOVE_BACKWARD)
            if delta != 0:
                program.append(move_pointer(delta))

            self._skip_nops()
            delta = self._consume_run(CharType.INCREMENT, CharType.DECREMENT)
            if delta != 0:
                program.append(change_value(delta))

            self._skip_nops()
            if self._peek() is CharType.PRINT:
                program.append(PRINT)
                self._advance()
            if self._peek() is CharType.READ:
                program.append(READ)
                self._advance()
            if self._peek() is CharType.LOOP_START:
                self._open_loop()
                program.append(LOOP_START)
                self._advance()
            if self._peek() is CharType.LOOP_END:
                self._close_loop()
                program.append(LOOP_END)
                self._advance()

        if self.strict and self.open_loops:
            raise MalformedProgram("Unmatched '['", self.open_loops[-1])
        logger.debug("reduced %d bytes to %d instructions", len(self.data), len(program))
        return program

    def _peek(self) -> Optional[CharType]:
        if self.pos >= len(self.data):
            return None
        return _CHAR_TYPES.get(self.data[self.pos], CharType.NOP)

    def _advance(self) -> None:
        self.pos += 1

    def _skip_nops(self) -> None:
        while self._peek() is CharType.NOP:
            self._advance()

    def _consume_run(self, forward: CharType, backward: CharType) -> int:
        delta = 0
        while True:
            current = self._peek()
            if current is forward:
                delta += 1
            elif current is backward:
                delta -= 1
            elif current is not CharType.NOP:
                return delta
            self._advance()

    def _open_loop(self) -> None:
        if self.strict:
            self.open_loops.append(self.pos)

    def _close_loop(self) -> None:
        if not self.strict:
            return
        if not self.open_loops:
            raise MalformedProgram("Unmatched ']'", self.pos)
        self.open_loops.pop()


__all__ = [
    "MalformedProgram",
    "Reducer",
]
