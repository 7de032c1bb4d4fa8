from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np

from .instructions import Instruction

CELL_DTYPES = {
    8: np.uint8,
    16: np.uint16,
    32: np.uint32,
    64: np.uint64,
}


@dataclass
class CompilerState:
    instructions: List[Instruction] = field(default_factory=list)
    loop_stack: List[int] = field(default_factory=list)
    operator_count: int = 0

    def reset(self) -> None:
        self.instructions.clear()
        self.loop_stack.clear()
        self.operator_count = 0


@dataclass(eq=False)
class MachineState:
    """
    Tape and registers of one run.

    The tape is a fixed, zero-filled numpy buffer; it is never resized.
    """

    tape_length: int = 1024
    cell_bits: int = 8
    tape: np.ndarray = field(init=False, repr=False)
    data_pointer: int = 0
    instruction_pointer: int = 0

    def __post_init__(self) -> None:
        if self.tape_length < 1:
            raise ValueError(f"tape_length must be positive, got {self.tape_length}")
        if self.cell_bits not in CELL_DTYPES:
            raise ValueError(f"cell_bits must be one of {sorted(CELL_DTYPES)}, got {self.cell_bits}")
        self.tape = np.zeros(self.tape_length, dtype=CELL_DTYPES[self.cell_bits])

    @property
    def cell_mask(self) -> int:
        return (1 << self.cell_bits) - 1

    @property
    def current(self) -> int:
        return int(self.tape[self.data_pointer])

    @current.setter
    def current(self, value: int) -> None:
        self.tape[self.data_pointer] = value & self.cell_mask

    def reset(self) -> None:
        self.tape.fill(0)
        self.data_pointer = 0
        self.instruction_pointer = 0

    def window(self, radius: int = 10) -> str:
        """Cells around the data pointer, current cell in brackets."""
        start = max(0, self.data_pointer - radius)
        end = min(self.tape_length, self.data_pointer + radius + 1)
        cells = []
        for i in range(start, end):
            v = int(self.tape[i])
            cells.append(f"[{v}]" if i == self.data_pointer else str(v))
        return f"{start}: " + ' '.join(cells)
