from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class Op(Enum):
    INCREMENT = '+'
    DECREMENT = '-'
    MOVE_RIGHT = '>'
    MOVE_LEFT = '<'
    OUTPUT = '.'
    INPUT = ','
    LOOP_START = '['
    LOOP_END = ']'

    @property
    def is_loop(self) -> bool:
        return self in (Op.LOOP_START, Op.LOOP_END)


_MNEMONICS = {
    Op.INCREMENT: 'add',
    Op.DECREMENT: 'sub',
    Op.MOVE_RIGHT: 'right',
    Op.MOVE_LEFT: 'left',
    Op.OUTPUT: 'out',
    Op.INPUT: 'in',
    Op.LOOP_START: 'jz',
    Op.LOOP_END: 'jnz',
}


@dataclass(frozen=True)
class Instruction:
    """
    One compiled unit of work.

    For the six simple kinds ``operand`` is a repeat count (>= 1). For
    LOOP_START it is the index just past the matching LOOP_END, and for
    LOOP_END the index of the first instruction of the loop body.

    ``offset`` is the source byte offset of the first operator that produced
    the instruction; it is only used for diagnostics.
    """

    op: Op
    operand: int
    offset: int = field(default=-1, compare=False)

    def __str__(self) -> str:
        return f"{_MNEMONICS[self.op]} {self.operand}"


@dataclass(frozen=True)
class Program:
    """Immutable, ordered sequence of instructions produced by the compiler."""

    instructions: Tuple[Instruction, ...] = ()

    def __len__(self) -> int:
        return len(self.instructions)

    def __getitem__(self, index: int) -> Instruction:
        return self.instructions[index]

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    @property
    def uses_input(self) -> bool:
        return any(inst.op is Op.INPUT for inst in self.instructions)

    def to_source(self) -> str:
        """Canonical operator text; compiling it gives back an equal program."""
        out: List[str] = []
        for inst in self.instructions:
            if inst.op.is_loop:
                out.append(inst.op.value)
            else:
                out.append(inst.op.value * inst.operand)
        return ''.join(out)

    def disassemble(self, start: int = 0, end: Optional[int] = None, marker: Optional[int] = None) -> str:
        if end is None or end >= len(self.instructions):
            end = len(self.instructions) - 1
        lines: List[str] = []
        for i in range(max(0, start), end + 1):
            inst = self.instructions[i]
            prefix = '*' if i == marker else ' '
            src = inst.op.value if inst.op.is_loop else inst.op.value * min(inst.operand, 8)
            if not inst.op.is_loop and inst.operand > 8:
                src += '...'
            lines.append(f"{prefix} {i:5d}: {str(inst):<15} | {src}")
        return '\n'.join(lines)
