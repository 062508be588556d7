import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

INTEGER_PATTERN = re.compile(r'-?[0-9]+')

COMPARISON_OPERATORS = ('eq', 'ne', 'gt', 'gte', 'lt', 'lte')


class CommandKind(Enum):
    INT = 'int'
    SET = 'set'
    BEGIN = 'begin'
    END = 'end'
    ADD = 'add'
    SUB = 'sub'
    MULT = 'mult'
    DIV = 'div'
    PRINT = 'print'
    GOTO = 'goto'
    IF = 'if'

    @property
    def keyword(self):
        return self.value

    @property
    def arity(self):
        return ARITY[self]

    @property
    def usage(self):
        return USAGE[self]


ARITY = {
    CommandKind.INT: 1,
    CommandKind.SET: 2,
    CommandKind.BEGIN: 0,
    CommandKind.END: 0,
    CommandKind.ADD: 2,
    CommandKind.SUB: 2,
    CommandKind.MULT: 2,
    CommandKind.DIV: 2,
    CommandKind.PRINT: 3,
    CommandKind.GOTO: 1,
    CommandKind.IF: 3,
}

USAGE = {
    CommandKind.INT: 'int <var>',
    CommandKind.SET: 'set <var> #',
    CommandKind.BEGIN: 'begin',
    CommandKind.END: 'end',
    CommandKind.ADD: 'add <var> #',
    CommandKind.SUB: 'sub <var> #',
    CommandKind.MULT: 'mult <var> #',
    CommandKind.DIV: 'div <var> #',
    CommandKind.PRINT: 'print <var1> <var2> string',
    CommandKind.GOTO: 'goto <lineNumber>',
    CommandKind.IF: 'if <var> <op> <var>',
}

ARITHMETIC_KINDS = (CommandKind.ADD, CommandKind.SUB, CommandKind.MULT, CommandKind.DIV)


def classify_integer(token):
    """
    Classifica um token como inteiro: None se não for inteiro,
    'negative' se começar com '-', 'non_negative' caso contrário.
    """
    if not INTEGER_PATTERN.fullmatch(token):
        return None
    return 'negative' if token.startswith('-') else 'non_negative'


@dataclass(frozen=True)
class Literal:
    value: int
    token: str


@dataclass(frozen=True)
class VariableRef:
    name: str

    @property
    def token(self):
        return self.name


@dataclass(frozen=True)
class Operator:
    symbol: str

    @property
    def token(self):
        return self.symbol


@dataclass(frozen=True)
class Text:
    value: str

    @property
    def token(self):
        return self.value


Operand = Union[Literal, VariableRef, Operator, Text]


def value_operand(token):
    """Literal se o token for um inteiro, senão referência a variável."""
    if classify_integer(token) is None:
        return VariableRef(token)
    return Literal(int(token), token)


@dataclass(frozen=True)
class Command:
    line_number: int
    kind: CommandKind
    operands: Tuple[Operand, ...] = ()
    source_line: Optional[int] = field(default=None, compare=False)

    @property
    def tokens(self):
        return tuple(operand.token for operand in self.operands)

    def to_dict(self):
        return {
            "line_number": self.line_number,
            "kind": self.kind.keyword,
            "operands": list(self.tokens),
        }

    def __str__(self):
        return ' '.join((str(self.line_number), self.kind.keyword) + self.tokens)


@dataclass(frozen=True)
class Program:
    commands: Tuple[Command, ...]
    begin_line: int
    end_line: int
    declarations: Tuple[str, ...] = ()

    def __len__(self):
        return len(self.commands)

    def __getitem__(self, index):
        return self.commands[index]

    def index_of(self, line_number):
        # Busca linear: com números de linha repetidos, vence o primeiro declarado
        for index, command in enumerate(self.commands):
            if command.line_number == line_number:
                return index
        return None

    def to_dict(self):
        return {
            "begin_line": self.begin_line,
            "end_line": self.end_line,
            "variables": list(self.declarations),
            "commands": [command.to_dict() for command in self.commands],
        }


def format_program(program):
    """Tabela de comandos: índice, número de linha, comando e argumentos."""
    header = ('Index', 'Line Number', 'Command', 'Arg1', 'Arg2', 'Arg3')
    rows = [header]
    for index, command in enumerate(program.commands):
        tokens = command.tokens + ('',) * (3 - len(command.tokens))
        rows.append((str(index), str(command.line_number), command.kind.keyword) + tokens)

    widths = [max(len(row[col]) for row in rows) for col in range(len(header))]
    lines = ['  '.join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in rows]
    return '\n'.join(lines)
