from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from .compiler import Compiler
from .instructions import Program
from .lexer import Source
from .state import CELL_DTYPES, MachineState
from .vm import VirtualMachine


@dataclass(frozen=True)
class MachineOptions:
    tape_length: int = 1024
    cell_bits: int = 8
    trace: bool = False

    def __post_init__(self) -> None:
        if self.tape_length < 1:
            raise ValueError(f"tape_length must be positive, got {self.tape_length}")
        if self.cell_bits not in CELL_DTYPES:
            raise ValueError(f"cell_bits must be one of {sorted(CELL_DTYPES)}, got {self.cell_bits}")


@dataclass(frozen=True)
class RunResult:
    output: bytes
    state: MachineState


def compile_string(source: Source) -> Program:
    return Compiler().compile(source)


def compile_file(path: str | Path) -> Program:
    return compile_string(Path(path).read_bytes())


def make_vm(program: Program, stdin: BinaryIO, stdout: BinaryIO, *,
            options: Optional[MachineOptions] = None) -> VirtualMachine:
    opts = options or MachineOptions()
    return VirtualMachine(program, stdin, stdout, tape_length=opts.tape_length,
                          cell_bits=opts.cell_bits, trace=opts.trace)


def run_program(program: Program, stdin: BinaryIO, stdout: BinaryIO, *,
                options: Optional[MachineOptions] = None) -> MachineState:
    return make_vm(program, stdin, stdout, options=options).run()


def run_string(source: Source, input: bytes = b"", *, options: Optional[MachineOptions] = None) -> RunResult:
    program = compile_string(source)
    stdout = io.BytesIO()
    state = run_program(program, io.BytesIO(input), stdout, options=options)
    return RunResult(output=stdout.getvalue(), state=state)
