from .compiler import BrainfuckCompiler
from .emitter import Emitter
from .instructions import Instruction, InstructionKind, Program
from .interpreter import ProgramInterpreter, StepLimitExceeded
from .optimizer import Optimizer
from .reducer import MalformedProgram, Reducer

__all__ = [
    "BrainfuckCompiler",
    "Emitter",
    "Instruction",
    "InstructionKind",
    "MalformedProgram",
    "Optimizer",
    "Program",
    "ProgramInterpreter",
    "Reducer",
    "StepLimitExceeded",
]
