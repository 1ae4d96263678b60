from __future__ import annotations

from typing import List

from .instructions import Instruction, InstructionKind, Program


class Emitter:
    """Renders instructions as C++ statements, one per line.

    Only the statement bodies are produced; the surrounding program (headers,
    tape allocation, ``main``) belongs to the caller.
    """

    def emit(self, program: Program) -> str:
        lines: List[str] = []
        depth = 1
        for instruction in program:
            kind = instruction.kind
            if kind is InstructionKind.LOOP_END:
                depth -= 1
            statement = _render_statement(instruction)
            if statement:
                lines.append("\n" + "\t" * max(depth, 0) + statement)
            if kind is InstructionKind.LOOP_START:
                depth += 1
        return "".join(lines)


def _render_statement(instruction: Instruction) -> str:
    kind, value = instruction.kind, instruction.value
    if kind is InstructionKind.MOVE:
        return _render_delta("p", value)
    if kind is InstructionKind.CHANGE:
        return _render_delta("*p", value)
    if kind is InstructionKind.ASSIGN:
        return f"*p = {value};"
    if kind is InstructionKind.PRINT:
        return "putchar(*p);"
    if kind is InstructionKind.READ:
        return "*p = getchar();"
    if kind is InstructionKind.LOOP_START:
        return "while(*p) {"
    if kind is InstructionKind.LOOP_END:
        return "}"
    raise ValueError(f"Unhandled instruction: {instruction!r}")


def _render_delta(target: str, delta: int) -> str:
    if delta > 0:
        return f"{target} += {delta};"
    if delta < 0:
        return f"{target} -= {-delta};"
    return ""


__all__ = ["Emitter"]
