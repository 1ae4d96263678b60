from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from .instructions import Instruction, InstructionKind, Program
from .reducer import MalformedProgram

CELL_MODULUS = 256


class StepLimitExceeded(RuntimeError):
    """Raised when execution exceeds the configured step budget."""


@dataclass
class ProgramInterpreter:
    """Executes reduced or optimized programs on a byte tape.

    Serves as the reference semantics for the optimizer: a program must
    produce the same output before and after optimization.
    """

    tape_length: int = 10000

    tape: List[int] = field(init=False, repr=False)
    pointer: int = field(init=False, repr=False)
    output_buffer: List[str] = field(init=False, repr=False)
    steps: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.tape = [0] * self.tape_length
        self.pointer = 0
        self.output_buffer = []
        self.steps = 0

    def run(
        self,
        program: Program,
        input_data: Optional[Iterable[int]] = None,
        max_steps: Optional[int] = None,
    ) -> str:
        self.reset()
        input_iter = iter(list(input_data or []))
        jump_map = self._build_jump_map(program)
        pc = 0
        program_length = len(program)

        while pc < program_length:
            if max_steps is not None and self.steps >= max_steps:
                raise StepLimitExceeded("Program exceeded allowed step count")
            pc = self._execute_instruction(program[pc], pc, jump_map, input_iter)
            self.steps += 1

        return "".join(self.output_buffer)

    def _execute_instruction(
        self,
        instruction: Instruction,
        pc: int,
        jump_map: Dict[int, int],
        input_iter: Iterator[int],
    ) -> int:
        new_pc = pc + 1
        kind = instruction.kind
        if kind is InstructionKind.MOVE:
            self.pointer += instruction.value
            if self.pointer >= self.tape_length:
                raise IndexError("Pointer moved beyond the tape length.")
            if self.pointer < 0:
                raise IndexError("Pointer moved before start of tape.")
        elif kind is InstructionKind.CHANGE:
            self.tape[self.pointer] = (self.tape[self.pointer] + instruction.value) % CELL_MODULUS
        elif kind is InstructionKind.ASSIGN:
            self.tape[self.pointer] = instruction.value % CELL_MODULUS
        elif kind is InstructionKind.PRINT:
            self.output_buffer.append(chr(self.tape[self.pointer]))
        elif kind is InstructionKind.READ:
            try:
                self.tape[self.pointer] = next(input_iter) % CELL_MODULUS
            except StopIteration:
                self.tape[self.pointer] = 0
        elif kind is InstructionKind.LOOP_START:
            if self.tape[self.pointer] == 0:
                new_pc = jump_map[pc] + 1
        elif kind is InstructionKind.LOOP_END:
            if self.tape[self.pointer] != 0:
                new_pc = jump_map[pc] + 1
        return new_pc

    def _build_jump_map(self, program: Program) -> Dict[int, int]:
        jump_map: Dict[int, int] = {}
        stack: List[int] = []
        for index, instruction in enumerate(program):
            if instruction.kind is InstructionKind.LOOP_START:
                stack.append(index)
            elif instruction.kind is InstructionKind.LOOP_END:
                if not stack:
                    raise MalformedProgram("Unmatched loop end", index)
                start = stack.pop()
                jump_map[start] = index
                jump_map[index] = start
        if stack:
            raise MalformedProgram("Unmatched loop start", stack.pop())
        return jump_map


__all__ = [
    "ProgramInterpreter",
    "StepLimitExceeded",
]
