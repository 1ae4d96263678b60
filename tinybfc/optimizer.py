from __future__ import annotations

import logging

from .instructions import Instruction, InstructionKind, Program, assign_value

logger = logging.getLogger(__name__)


class Optimizer:
    """Fixed-point peephole optimizer over a reduced program.

    Each round merges adjacent pointer moves, merges adjacent value changes,
    folds a change into a preceding assignment and replaces ``[-]`` with an
    assignment of zero. Rounds repeat until one of them leaves the program
    untouched. A change followed by an assignment is never folded.
    """

    def optimize(self, program: Program) -> int:
        rounds = 0
        changed = True
        while changed:
            before = len(program)
            changed = False
            changed |= self._merge_adjacent(program, InstructionKind.MOVE)
            changed |= self._merge_adjacent(program, InstructionKind.CHANGE)
            changed |= self._fold_assignments(program)
            changed |= self._replace_zero_loops(program)
            if changed:
                rounds += 1
                logger.debug("round %d: %d -> %d instructions", rounds, before, len(program))
        logger.debug("fixed point reached after %d rounds (%d instructions)", rounds, len(program))
        return rounds

    def _merge_adjacent(self, program: Program, kind: InstructionKind) -> bool:
        changed = False
        index = 0
        while index + 1 < len(program):
            first, second = program[index], program[index + 1]
            if first.kind is not kind or second.kind is not kind:
                index += 1
                continue
            total = first.value + second.value
            if total != 0:
                program[index : index + 2] = [Instruction(kind, total)]
            else:
                del program[index : index + 2]
            changed = True
        return changed

    def _fold_assignments(self, program: Program) -> bool:
        changed = False
        index = 0
        while index + 1 < len(program):
            first, second = program[index], program[index + 1]
            if first.kind is InstructionKind.ASSIGN and second.kind is InstructionKind.CHANGE:
                program[index : index + 2] = [assign_value(first.value + second.value)]
                changed = True
            else:
                index += 1
        return changed

    def _replace_zero_loops(self, program: Program) -> bool:
        changed = False
        index = 0
        while index + 2 < len(program):
            if self._is_zero_loop(program, index):
                program[index : index + 3] = [assign_value(0)]
                changed = True
            index += 1
        return changed

    def _is_zero_loop(self, program: Program, index: int) -> bool:
        start, body, end = program[index : index + 3]
        return (
            start.kind is InstructionKind.LOOP_START
            and body.kind is InstructionKind.CHANGE
            and body.value == -1
            and end.kind is InstructionKind.LOOP_END
        )


__all__ = ["Optimizer"]
