from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from .emitter import Emitter
from .instructions import Program
from .optimizer import Optimizer
from .reducer import Reducer

logger = logging.getLogger(__name__)

DEFAULT_TAPE_SIZE = 10000

PROLOGUE_HEADER = "#include <stdio.h>\n\nchar *p;\nint main() {\n"
EPILOGUE = "\n}"


@dataclass
class BrainfuckCompiler:
    tape_size: int = DEFAULT_TAPE_SIZE
    optimize: bool = True
    strict: bool = True

    def __post_init__(self) -> None:
        if self.tape_size < 1:
            raise ValueError("tape_size must be positive")

    def translate(self, source: Union[bytes, str]) -> Program:
        program = Reducer(strict=self.strict).reduce(source)
        if self.optimize:
            reduced = len(program)
            Optimizer().optimize(program)
            logger.debug("optimized %d instructions down to %d", reduced, len(program))
        return program

    def compile(self, source: Union[bytes, str]) -> str:
        return self.render(self.translate(source))

    def render(self, program: Program) -> str:
        return self.prologue() + Emitter().emit(program) + EPILOGUE

    def prologue(self) -> str:
        return PROLOGUE_HEADER + "\tp = new char[" + str(self.tape_size) + "]();\n"


__all__ = [
    "BrainfuckCompiler",
    "DEFAULT_TAPE_SIZE",
    "EPILOGUE",
    "PROLOGUE_HEADER",
]
