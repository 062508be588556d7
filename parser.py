import logging

from commands import (
    ARITHMETIC_KINDS, COMPARISON_OPERATORS, Command, CommandKind, Operator,
    Program, Text, VariableRef, classify_integer, value_operand,
)
from config import Limits
from errors import ErrorKind, ParseError, StructuralError
from lexer import Lexer, TokenType
from variables import VariableTable

logger = logging.getLogger(__name__)

KEYWORDS = {kind.keyword: kind for kind in CommandKind}


class Parser:
    def __init__(self, tokens, limits=None):
        self.tokens = tokens
        self.limits = limits or Limits()
        self.pos = 0
        self.current_token = tokens[0] if tokens else None
        self.variables = VariableTable(self.limits.max_variables)
        self.begin_line = None
        self.end_line = None

    def advance(self):
        self.pos += 1
        if self.pos < len(self.tokens):
            self.current_token = self.tokens[self.pos]
        else:
            self.current_token = None

    def read_line(self):
        """Consome as palavras até o próximo NEWLINE."""
        words = []
        while self.current_token and self.current_token.type == TokenType.WORD:
            words.append(self.current_token)
            self.advance()
        if self.current_token and self.current_token.type == TokenType.NEWLINE:
            self.advance()
        return words

    def parse_line_number(self, token):
        kind = classify_integer(token.value)
        if kind is None:
            raise ParseError(
                ErrorKind.NOT_AN_INTEGER,
                f"{token.value} is not an integer",
                source_line=token.line,
            )
        if kind == 'negative':
            raise ParseError(
                ErrorKind.NOT_AN_INTEGER,
                f"{token.value} is not a positive integer",
                source_line=token.line,
            )
        return int(token.value)

    def parse_kind(self, token, line_number):
        kind = KEYWORDS.get(token.value)
        if kind is None:
            raise ParseError(
                ErrorKind.UNKNOWN_COMMAND,
                f"Invalid command {token.value}",
                line_number,
                token.line,
            )
        return kind

    def check_name_length(self, name, line_number, source_line):
        if len(name) > self.limits.max_name_length:
            raise ParseError(
                ErrorKind.VARIABLE_NAME_TOO_LONG,
                f"Variable name {name} is too long",
                line_number,
                source_line,
            )

    def expect_declared(self, name, line_number, source_line):
        self.check_name_length(name, line_number, source_line)
        if self.variables.find_declared(name) is None:
            raise ParseError(
                ErrorKind.UNDEFINED_VARIABLE,
                f"Variable {name} is not defined",
                line_number,
                source_line,
            )
        return VariableRef(name)

    def parse_operands(self, kind, args, line_number, source_line):
        if kind == CommandKind.INT:
            name = args[0]
            self.check_name_length(name, line_number, source_line)
            self.variables.declare(name, line_number)
            return (VariableRef(name),)

        if kind == CommandKind.SET or kind in ARITHMETIC_KINDS:
            target = self.expect_declared(args[0], line_number, source_line)
            value = value_operand(args[1])
            if isinstance(value, VariableRef) and self.variables.find_declared(value.name) is None:
                raise ParseError(
                    ErrorKind.UNDEFINED_VARIABLE,
                    f"{value.name} is not defined",
                    line_number,
                    source_line,
                )
            return (target, value)

        if kind == CommandKind.PRINT:
            row = self.expect_declared(args[0], line_number, source_line)
            col = self.expect_declared(args[1], line_number, source_line)
            return (row, col, Text(args[2]))

        if kind == CommandKind.GOTO:
            target = args[0]
            classification = classify_integer(target)
            if classification is None:
                raise ParseError(ErrorKind.NOT_AN_INTEGER, f"{target} is not an integer", line_number, source_line)
            if classification == 'negative':
                raise ParseError(ErrorKind.NOT_AN_INTEGER, f"{target} is not a positive integer", line_number, source_line)
            return (value_operand(target),)

        if kind == CommandKind.IF:
            left, op, right = args
            self.check_name_length(left, line_number, source_line)
            if op not in COMPARISON_OPERATORS:
                raise ParseError(ErrorKind.INVALID_OPERATOR, f"Invalid operator {op}", line_number, source_line)
            self.check_name_length(right, line_number, source_line)
            return (value_operand(left), Operator(op), value_operand(right))

        return ()

    def check_if_operators(self, args, line_number, source_line):
        # Com tokens sobrando, um operador fora da posição do meio é operador inválido
        if len(args) <= 3:
            return
        for position, arg in enumerate(args):
            if position != 1 and arg in COMPARISON_OPERATORS:
                raise ParseError(
                    ErrorKind.INVALID_OPERATOR,
                    f"Operator {arg} must be the middle operand of if",
                    line_number,
                    source_line,
                )

    def parse_statement(self, words):
        source_line = words[0].line
        line_number = self.parse_line_number(words[0])

        if len(words) < 2:
            raise ParseError(ErrorKind.UNKNOWN_COMMAND, "Missing command", line_number, source_line)
        kind = self.parse_kind(words[1], line_number)

        args = [word.value for word in words[2:]]

        if kind == CommandKind.IF:
            self.check_if_operators(args, line_number, source_line)

        if len(args) != kind.arity:
            raise ParseError(
                ErrorKind.WRONG_ARITY,
                f"Incorrect number of arguments for command '{kind.keyword}'\n\t{kind.usage}",
                line_number,
                source_line,
            )

        operands = self.parse_operands(kind, args, line_number, source_line)

        if kind == CommandKind.BEGIN:
            if self.begin_line is not None:
                logger.warning("begin at line %d overrides begin at line %d", line_number, self.begin_line)
            self.begin_line = line_number
        elif kind == CommandKind.END:
            if self.end_line is not None:
                logger.warning("end at line %d overrides end at line %d", line_number, self.end_line)
            self.end_line = line_number

        return Command(line_number, kind, operands, source_line)

    def parse_program(self):
        commands = []

        while self.current_token and self.current_token.type != TokenType.EOF:
            words = self.read_line()
            if not words:
                continue
            commands.append(self.parse_statement(words))

        if self.begin_line is None:
            raise StructuralError(ErrorKind.MISSING_BEGIN, "No begin command")
        if self.end_line is None:
            raise StructuralError(ErrorKind.MISSING_END, "No end command")

        logger.debug("parsed %d commands, %d variables", len(commands), len(self.variables))
        return Program(
            tuple(commands),
            self.begin_line,
            self.end_line,
            tuple(slot.name for slot in self.variables),
        )


def parse(source, limits=None):
    """Analisa o texto do programa e devolve um Program validado."""
    tokens = Lexer(source).tokenize()
    return Parser(tokens, limits).parse_program()
