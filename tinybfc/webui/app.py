from __future__ import annotations

from typing import List

from fastapi import FastAPI, HTTPException, status
from pydantic import BaseModel, Field

from tinybfc.compiler import DEFAULT_TAPE_SIZE, BrainfuckCompiler
from tinybfc.emitter import Emitter
from tinybfc.instructions import Instruction
from tinybfc.interpreter import ProgramInterpreter, StepLimitExceeded
from tinybfc.reducer import MalformedProgram


def _string_to_input_bytes(data: str) -> List[int]:
    return [ord(ch) for ch in data]


def _malformed_detail(exc: MalformedProgram) -> dict:
    return {"message": exc.message, "position": exc.position}


class CompileRequest(BaseModel):
    source: str
    optimize: bool = True
    strict: bool = True
    tape_size: int = Field(default=DEFAULT_TAPE_SIZE, ge=1)


class InstructionModel(BaseModel):
    kind: str
    value: int

    @classmethod
    def from_instruction(cls, instruction: Instruction) -> "InstructionModel":
        return cls(kind=instruction.kind.value, value=instruction.value)


class CompileResponse(BaseModel):
    code: str
    body: str
    instructions: List[InstructionModel]
    instruction_count: int


class RunRequest(BaseModel):
    source: str
    input: str = ""
    optimize: bool = True
    max_steps: int = Field(default=100000, ge=1)


class RunResponse(BaseModel):
    output: str
    steps: int
    instruction_count: int


def create_app() -> FastAPI:
    app = FastAPI(title="TinyBFC API", version="0.1.0")

    @app.post("/api/compile", response_model=CompileResponse)
    def compile_source(payload: CompileRequest) -> CompileResponse:
        compiler = BrainfuckCompiler(
            tape_size=payload.tape_size,
            optimize=payload.optimize,
            strict=payload.strict,
        )
        try:
            program = compiler.translate(payload.source)
        except MalformedProgram as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=_malformed_detail(exc),
            ) from exc

        return CompileResponse(
            code=compiler.render(program),
            body=Emitter().emit(program),
            instructions=[InstructionModel.from_instruction(item) for item in program],
            instruction_count=len(program),
        )

    @app.post("/api/run", response_model=RunResponse)
    def run_source(payload: RunRequest) -> RunResponse:
        compiler = BrainfuckCompiler(optimize=payload.optimize)
        try:
            program = compiler.translate(payload.source)
        except MalformedProgram as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=_malformed_detail(exc),
            ) from exc

        interpreter = ProgramInterpreter(tape_length=compiler.tape_size)
        try:
            output = interpreter.run(
                program,
                input_data=_string_to_input_bytes(payload.input),
                max_steps=payload.max_steps,
            )
        except StepLimitExceeded as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=str(exc),
            ) from exc
        except IndexError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(exc),
            ) from exc

        return RunResponse(
            output=output,
            steps=interpreter.steps,
            instruction_count=len(program),
        )

    return app


__all__ = ["create_app"]
