from enum import Enum


class ErrorKind(Enum):
    UNKNOWN_COMMAND = "UnknownCommand"
    WRONG_ARITY = "WrongArity"
    DUPLICATE_VARIABLE = "DuplicateVariable"
    VARIABLE_NAME_TOO_LONG = "VariableNameTooLong"
    UNDEFINED_VARIABLE = "UndefinedVariable"
    NOT_AN_INTEGER = "NotAnInteger"
    INVALID_OPERATOR = "InvalidOperator"
    CAPACITY_EXCEEDED = "CapacityExceeded"
    MISSING_BEGIN = "MissingBegin"
    MISSING_END = "MissingEnd"
    UNSET_VARIABLE = "UnsetVariable"
    UNKNOWN_LINE_NUMBER = "UnknownLineNumber"
    INVALID_GOTO_TARGET = "InvalidGotoTarget"
    DIVISION_BY_ZERO = "DivisionByZero"
    STEP_LIMIT_EXCEEDED = "StepLimitExceeded"


class ScriptError(Exception):
    def __init__(self, kind, message, line_number=None, source_line=None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.line_number = line_number
        self.source_line = source_line

    def __str__(self):
        if self.line_number is not None:
            return f"Error at line {self.line_number}: {self.message}"
        if self.source_line is not None:
            return f"Error on source line {self.source_line}: {self.message}"
        return f"Error: {self.message}"

    def to_dict(self):
        return {
            "kind": self.kind.value,
            "line_number": self.line_number,
            "source_line": self.source_line,
            "message": self.message,
        }


class ParseError(ScriptError):
    pass


class StructuralError(ParseError):
    pass


class ExecutionError(ScriptError):
    pass
