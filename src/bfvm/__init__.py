
from .compiler import Compiler
from .errors import (
    CompileError,
    ExecutionError,
    OutOfBoundsPointer,
    UnmatchedClosingBracket,
    UnmatchedOpeningBracket,
)
from .instructions import Instruction, Op, Program
from .lexer import iter_operators
from .state import MachineState
from .vm import VirtualMachine
from .api import MachineOptions, RunResult, compile_file, compile_string, run_program, run_string

__all__ = [
    'Compiler',
    'VirtualMachine',
    'Instruction',
    'Op',
    'Program',
    'MachineState',
    'iter_operators',
    'CompileError',
    'UnmatchedOpeningBracket',
    'UnmatchedClosingBracket',
    'ExecutionError',
    'OutOfBoundsPointer',
    'MachineOptions',
    'RunResult',
    'compile_string',
    'compile_file',
    'run_program',
    'run_string',
]
