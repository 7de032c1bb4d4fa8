#!/usr/bin/env python3
"""
Compiler tests: operator filtering, run-length packing and bracket linking.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfvm import Compiler, Instruction, Op, compile_file, compile_string
from bfvm.errors import CompileError, UnmatchedClosingBracket, UnmatchedOpeningBracket

HELLO = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)

PROGRAMS = [
    "",
    "[]",
    "[[]]",
    "+[-[+]>]<",
    "++[>+[>+<-]<-]>>.",
    ",[.,]",
    HELLO,
]


def _check_pairing(program):
    for i, inst in enumerate(program):
        if inst.op is Op.LOOP_START:
            j = inst.operand
            closing = program[j - 1]
            assert closing.op is Op.LOOP_END
            assert closing.operand == i + 1
        elif inst.op is Op.LOOP_END:
            opening = program[inst.operand - 1]
            assert opening.op is Op.LOOP_START
            assert opening.operand == i + 1


def test_empty_loop_has_two_instructions():
    program = compile_string("[]")
    assert list(program) == [
        Instruction(Op.LOOP_START, 2),
        Instruction(Op.LOOP_END, 1),
    ]


def test_runs_are_packed():
    program = compile_string("+++-->>><.....,,")
    assert list(program) == [
        Instruction(Op.INCREMENT, 3),
        Instruction(Op.DECREMENT, 2),
        Instruction(Op.MOVE_RIGHT, 3),
        Instruction(Op.MOVE_LEFT, 1),
        Instruction(Op.OUTPUT, 5),
        Instruction(Op.INPUT, 2),
    ]


def test_brackets_are_never_packed():
    program = compile_string("[[]]")
    assert [inst.op for inst in program] == [Op.LOOP_START, Op.LOOP_START, Op.LOOP_END, Op.LOOP_END]
    assert [inst.operand for inst in program] == [4, 3, 2, 1]


def test_comments_are_ignored():
    program = compile_string("add + one + more + then print .\n")
    assert list(program) == [Instruction(Op.INCREMENT, 3), Instruction(Op.OUTPUT, 1)]


def test_non_ascii_bytes_are_ignored():
    program = compile_string("+é+".encode('utf-8') + b"\xff\x00-")
    assert list(program) == [Instruction(Op.INCREMENT, 2), Instruction(Op.DECREMENT, 1)]


def test_jump_targets_skip_the_loop_and_enter_the_body():
    # 0:+2  1:[  2:>1  3:+1  4:<1  5:-1  6:]  7:.
    program = compile_string("++[>+<-].")
    assert program[1] == Instruction(Op.LOOP_START, 7)
    assert program[6] == Instruction(Op.LOOP_END, 2)


def test_offsets_point_at_first_operator():
    program = compile_string("x ++ [ - ]")
    assert [inst.offset for inst in program] == [2, 5, 7, 9]


@pytest.mark.parametrize("source", PROGRAMS)
def test_loop_pairing(source):
    _check_pairing(compile_string(source))


@pytest.mark.parametrize("source", PROGRAMS)
def test_compiling_is_deterministic(source):
    first = compile_string(source)
    second = compile_string(source)
    assert first == second
    assert [i.offset for i in first] == [i.offset for i in second]


@pytest.mark.parametrize("source", PROGRAMS)
def test_to_source_recompiles_to_same_program(source):
    program = compile_string(source)
    assert compile_string(program.to_source()) == program


def test_str_and_bytes_sources_agree():
    assert compile_string(HELLO) == compile_string(HELLO.encode('ascii'))


def test_unmatched_opening_bracket():
    with pytest.raises(UnmatchedOpeningBracket):
        compile_string("[")


def test_unmatched_closing_bracket():
    with pytest.raises(UnmatchedClosingBracket):
        compile_string("]")


def test_closing_bracket_after_balanced_pair():
    with pytest.raises(UnmatchedClosingBracket) as exc:
        compile_string("[]]")
    assert exc.value.offset == 2


def test_unclosed_bracket_reports_location():
    with pytest.raises(UnmatchedOpeningBracket) as exc:
        compile_string("+\n  [>+\n")
    err = exc.value
    assert isinstance(err, CompileError)
    assert (err.line, err.column) == (2, 3)
    assert "unmatched '['" in str(err)
    assert "^" in err.context


def test_compiler_instance_is_reusable():
    compiler = Compiler()
    with pytest.raises(UnmatchedOpeningBracket):
        compiler.compile("[[")
    program = compiler.compile("+")
    assert list(program) == [Instruction(Op.INCREMENT, 1)]
    assert compiler.state.loop_stack == []


def test_program_reports_input_use():
    assert compile_string(",.").uses_input
    assert not compile_string(HELLO).uses_input


def test_compile_file(tmp_path):
    path = tmp_path / "hello.bf"
    path.write_bytes(HELLO.encode('ascii'))
    assert compile_file(path) == compile_string(HELLO)
    assert compile_file(str(path)) == compile_string(HELLO)


def test_compile_file_missing_raises_os_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        compile_file(tmp_path / "missing.bf")
