from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .lexer import Source, as_bytes


def _locate(data: bytes, offset: int) -> Tuple[int, int]:
    # 1-based line and column of a byte offset
    offset = max(0, min(offset, len(data)))
    line = data.count(b'\n', 0, offset) + 1
    line_start = data.rfind(b'\n', 0, offset) + 1
    return line, offset - line_start + 1


def _build_context(lines: List[str], line_no_1: int, column: int, *, context: int = 2) -> str:
    idx = max(1, min(line_no_1, len(lines)))
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx:
            out.append(f"       | {' ' * (column - 1)}^")
    return "\n".join(out)


def _hint_for(kind: str) -> Optional[str]:
    if kind == 'unmatched_open':
        return "Every '[' needs a matching ']' later in the program."
    if kind == 'unmatched_close':
        return "This ']' has no '[' before it. Remove it or add the missing '['."
    if kind == 'out_of_bounds':
        return 'The data pointer must stay inside the tape. Try a larger --tape-length.'
    return None


def source_excerpt(source: Source, offset: int) -> str:
    data = as_bytes(source)
    line, column = _locate(data, offset)
    lines = data.decode('utf-8', errors='replace').split('\n')
    return _build_context(lines, line, column)


# ===== Compile stage =====

@dataclass(eq=False)
class CompileError(Exception):
    message: str
    offset: int
    line: int
    column: int
    context: str

    def __str__(self) -> str:
        return self.message


class UnmatchedOpeningBracket(CompileError):
    pass


class UnmatchedClosingBracket(CompileError):
    pass


_COMPILE_ERRORS = {
    'unmatched_open': (UnmatchedOpeningBracket, "unmatched '['"),
    'unmatched_close': (UnmatchedClosingBracket, "unmatched ']'"),
}


def make_compile_error(kind: str, *, source: Source, offset: int) -> CompileError:
    cls, text = _COMPILE_ERRORS[kind]
    data = as_bytes(source)
    line, column = _locate(data, offset)
    ctx = source_excerpt(data, offset)
    hint = _hint_for(kind)
    hint_block = f"\nHint: {hint}" if hint else ""
    return cls(
        message=f"CompileError: {text} (line {line}, column {column})\n{ctx}{hint_block}",
        offset=offset,
        line=line,
        column=column,
        context=ctx,
    )


# ===== Run stage =====

@dataclass(eq=False)
class ExecutionError(Exception):
    message: str
    instruction_index: int

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class OutOfBoundsPointer(ExecutionError):
    data_pointer: int
    delta: int
    tape_length: int


def make_out_of_bounds(*, instruction_index: int, data_pointer: int, delta: int, tape_length: int) -> OutOfBoundsPointer:
    target = data_pointer + delta
    return OutOfBoundsPointer(
        message=(
            f"RuntimeError: data pointer out of bounds at instruction {instruction_index}: "
            f"{data_pointer} {'+' if delta >= 0 else '-'} {abs(delta)} = {target}, "
            f"tape is [0, {tape_length})"
        ),
        instruction_index=instruction_index,
        data_pointer=data_pointer,
        delta=delta,
        tape_length=tape_length,
    )


def runtime_hint(error: ExecutionError) -> Optional[str]:
    if isinstance(error, OutOfBoundsPointer):
        return _hint_for('out_of_bounds')
    return None
