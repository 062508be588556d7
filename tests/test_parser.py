import logging

import pytest

from commands import CommandKind, Literal, Operator, Text, VariableRef, format_program
from config import Limits
from errors import ErrorKind, ParseError, StructuralError
from parser import parse

HELLO = "1 begin\n2 int x\n3 set x 5\n4 print x x hi\n5 end"


def parse_error(source, limits=None):
    with pytest.raises(ParseError) as exc:
        parse(source, limits)
    return exc.value


def test_parse_builds_commands_in_declaration_order():
    program = parse(HELLO)
    assert [c.kind for c in program.commands] == [
        CommandKind.BEGIN, CommandKind.INT, CommandKind.SET, CommandKind.PRINT, CommandKind.END,
    ]
    assert [c.line_number for c in program.commands] == [1, 2, 3, 4, 5]
    assert program.begin_line == 1
    assert program.end_line == 5
    assert program.declarations == ("x",)


def test_operands_are_typed_once():
    program = parse("1 begin\n2 int x\n3 set x -4\n4 if x lte 3\n5 print x x hi\n6 goto 1\n7 end")
    assert program[1].operands == (VariableRef("x"),)
    assert program[2].operands == (VariableRef("x"), Literal(-4, "-4"))
    assert program[3].operands == (VariableRef("x"), Operator("lte"), Literal(3, "3"))
    assert program[4].operands == (VariableRef("x"), VariableRef("x"), Text("hi"))
    assert program[5].operands == (Literal(1, "1"),)
    assert program[2].tokens == ("x", "-4")


def test_blank_lines_are_ignored():
    program = parse("\n1 begin\n\n\n2 end\n\n")
    assert len(program) == 2
    assert program[1].source_line == 5


@pytest.mark.parametrize("source, kind", [
    ("1 int x\n2 end", ErrorKind.MISSING_BEGIN),
    ("1 begin\n2 int x", ErrorKind.MISSING_END),
    ("1 int x", ErrorKind.MISSING_BEGIN),
])
def test_missing_begin_or_end(source, kind):
    error = parse_error(source)
    assert isinstance(error, StructuralError)
    assert error.kind == kind


def test_duplicate_variable_reports_second_declaration():
    error = parse_error("1 begin\n2 int x\n3 int x\n4 end")
    assert error.kind == ErrorKind.DUPLICATE_VARIABLE
    assert error.line_number == 3


def test_variable_name_length():
    parse("1 begin\n2 int abcdefghij\n3 end")
    error = parse_error("1 begin\n2 int abcdefghijk\n3 end")
    assert error.kind == ErrorKind.VARIABLE_NAME_TOO_LONG


def test_name_length_comes_from_limits():
    error = parse_error("1 begin\n2 int abc\n3 end", Limits(max_name_length=2))
    assert error.kind == ErrorKind.VARIABLE_NAME_TOO_LONG


def test_capacity_from_limits():
    error = parse_error("1 begin\n2 int a\n3 int b\n4 int c\n5 end", Limits(max_variables=2))
    assert error.kind == ErrorKind.CAPACITY_EXCEEDED
    assert error.line_number == 4


@pytest.mark.parametrize("line", ["-1 begin", "abc begin", "1x begin"])
def test_line_number_must_be_non_negative_integer(line):
    error = parse_error(line + "\n2 end")
    assert error.kind == ErrorKind.NOT_AN_INTEGER
    assert error.source_line == 1


def test_unknown_command():
    error = parse_error("1 begin\n2 let x\n3 end")
    assert error.kind == ErrorKind.UNKNOWN_COMMAND
    assert error.line_number == 2


def test_keywords_are_case_sensitive():
    assert parse_error("1 BEGIN\n2 end").kind == ErrorKind.UNKNOWN_COMMAND


@pytest.mark.parametrize("line", [
    "2 int", "2 int x y", "2 begin now", "2 set x", "2 add x 1 2",
    "2 print x x", "2 goto", "2 if x eq",
])
def test_wrong_arity(line):
    error = parse_error("1 begin\n" + line + "\n3 end")
    assert error.kind == ErrorKind.WRONG_ARITY
    assert "Incorrect number of arguments" in error.message


@pytest.mark.parametrize("line", ["3 set y 1", "3 add y 1", "3 print x y hi", "3 print y x hi"])
def test_undeclared_target(line):
    error = parse_error("1 begin\n2 int x\n" + line + "\n4 end")
    assert error.kind == ErrorKind.UNDEFINED_VARIABLE


def test_value_operand_may_name_a_declared_variable():
    program = parse("1 begin\n2 int x\n3 int y\n4 set x y\n5 end")
    assert program[3].operands[1] == VariableRef("y")

    error = parse_error("1 begin\n2 int x\n3 set x y\n4 end")
    assert error.kind == ErrorKind.UNDEFINED_VARIABLE


def test_use_before_declaration_is_rejected():
    error = parse_error("1 begin\n2 set x 1\n3 int x\n4 end")
    assert error.kind == ErrorKind.UNDEFINED_VARIABLE


@pytest.mark.parametrize("target", ["-3", "ten"])
def test_goto_needs_non_negative_literal(target):
    error = parse_error("1 begin\n2 goto " + target + "\n3 end")
    assert error.kind == ErrorKind.NOT_AN_INTEGER


def test_invalid_operator():
    error = parse_error("1 begin\n2 int x\n3 if x equals 1\n4 end")
    assert error.kind == ErrorKind.INVALID_OPERATOR


def test_operator_must_be_the_middle_token():
    error = parse_error("1 begin\n2 int x\n3 set x 0\n4 if x eq 0 gt 1\n5 end")
    assert error.kind == ErrorKind.INVALID_OPERATOR
    assert error.line_number == 4


def test_variable_named_like_an_operator(run_source):
    _, display = run_source("1 begin\n2 int eq\n3 set eq 1\n4 if eq eq 1\n5 print eq eq yes\n6 end")
    assert [c.text for c in display.calls] == ["yes"]


def test_wrong_arity_if_without_misplaced_operator():
    assert parse_error("1 begin\n2 int x\n3 if x eq 1 2\n4 end").kind == ErrorKind.WRONG_ARITY


def test_if_operands_are_not_resolved_while_parsing():
    program = parse("1 begin\n2 if later eq 1\n3 int later\n4 end")
    assert program[1].operands[0] == VariableRef("later")


def test_duplicate_begin_keeps_the_last_one(caplog):
    with caplog.at_level(logging.WARNING, logger="parser"):
        program = parse("1 begin\n2 begin\n3 end")
    assert program.begin_line == 2
    assert "overrides begin" in caplog.text


def test_structural_error_is_a_parse_error():
    assert issubclass(StructuralError, ParseError)


def test_error_message_names_the_line():
    error = parse_error("1 begin\n7 int x\n8 int x\n9 end")
    assert str(error) == "Error at line 8: Variable x is already defined"


def test_format_program():
    table = format_program(parse(HELLO))
    lines = table.splitlines()
    assert lines[0].split() == ["Index", "Line", "Number", "Command", "Arg1", "Arg2", "Arg3"]
    assert lines[4].split() == ["3", "4", "print", "x", "x", "hi"]
    assert len(lines) == 6


def test_program_to_dict():
    data = parse(HELLO).to_dict()
    assert data["begin_line"] == 1
    assert data["variables"] == ["x"]
    assert data["commands"][3] == {"line_number": 4, "kind": "print", "operands": ["x", "x", "hi"]}
