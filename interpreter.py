import logging
import operator
from enum import Enum

from commands import CommandKind, Literal
from config import Limits
from errors import ErrorKind, ExecutionError
from variables import VariableTable

logger = logging.getLogger(__name__)


class EngineState(Enum):
    RUNNING = "running"
    HALTED = "halted"
    ERROR = "error"


def truncating_div(dividend, divisor):
    """Divisão inteira com truncamento em direção a zero, como em C."""
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend < 0) == (divisor < 0) else -quotient


ARITHMETIC = {
    CommandKind.ADD: operator.add,
    CommandKind.SUB: operator.sub,
    CommandKind.MULT: operator.mul,
    CommandKind.DIV: truncating_div,
}


class Interpreter:
    """
    Executa um Program já validado.

    O contador de programa guarda o número de linha (não o índice). Cada passo
    localiza o comando por busca linear, executa o handler do tipo do comando e
    segue para o próximo comando na ordem de declaração, a menos que o handler
    indique outro destino. A execução termina quando o contador alcança a
    linha do `end`. Qualquer erro interrompe a execução de vez.
    """
    def __init__(self, program, display, limits=None):
        self.program = program
        self.display = display
        self.limits = limits or Limits()
        self.variables = VariableTable.from_declarations(program.declarations)
        self.pc = program.begin_line
        self.steps = 0
        self.error = None
        self.state = EngineState.RUNNING if self.pc < program.end_line else EngineState.HALTED

        self.handlers = {
            CommandKind.INT: self._no_effect,
            CommandKind.BEGIN: self._no_effect,
            CommandKind.END: self._no_effect,
            CommandKind.SET: self._set,
            CommandKind.ADD: self._arithmetic,
            CommandKind.SUB: self._arithmetic,
            CommandKind.MULT: self._arithmetic,
            CommandKind.DIV: self._arithmetic,
            CommandKind.PRINT: self._print,
            CommandKind.GOTO: self._goto,
            CommandKind.IF: self._if,
        }

    def _fail(self, kind, message):
        self.state = EngineState.ERROR
        self.error = ExecutionError(kind, message, self.pc)
        logger.debug("execution halted: %s", self.error)
        raise self.error

    def _declared_slot(self, name):
        slot_id = self.variables.find_declared(name)
        if slot_id is None:
            self._fail(ErrorKind.UNDEFINED_VARIABLE, f"Variable {name} is not defined")
        return slot_id

    def _set_slot(self, name):
        slot_id = self.variables.find_set(name)
        if slot_id is None:
            self._fail(ErrorKind.UNSET_VARIABLE, f"Variable {name} is not set")
        return slot_id

    def _get_variable(self, name):
        return self.variables.get(self._set_slot(name))

    def _value_of(self, operand):
        if isinstance(operand, Literal):
            return operand.value
        return self._get_variable(operand.name)

    def _resolve_condition_operand(self, operand):
        # Uma variável atribuída tem precedência; senão o token deve ser um inteiro
        slot_id = self.variables.find_set(operand.token)
        if slot_id is not None:
            return self.variables.get(slot_id)
        if isinstance(operand, Literal):
            return operand.value
        self._fail(ErrorKind.UNDEFINED_VARIABLE, f"{operand.token} is not defined")

    def _evaluate_condition(self, left_val, op, right_val):
        if op == 'eq': return left_val == right_val
        if op == 'ne': return left_val != right_val
        if op == 'gt': return left_val > right_val
        if op == 'gte': return left_val >= right_val
        if op == 'lt': return left_val < right_val
        if op == 'lte': return left_val <= right_val
        self._fail(ErrorKind.INVALID_OPERATOR, f"Invalid operator {op}")

    # Cada handler devolve (atribuição, próximo índice); a atribuição é
    # (slot, valor) ou None.

    def _no_effect(self, command, next_index):
        return None, next_index

    def _set(self, command, next_index):
        target, value = command.operands
        slot_id = self._declared_slot(target.name)
        # set só aceita literal: um nome de variável vale 0, como atoi
        literal = value.value if isinstance(value, Literal) else 0
        return (slot_id, literal), next_index

    def _arithmetic(self, command, next_index):
        target, value = command.operands
        slot_id = self._set_slot(target.name)
        amount = self._value_of(value)
        if command.kind == CommandKind.DIV and amount == 0:
            self._fail(ErrorKind.DIVISION_BY_ZERO, f"Division of {target.name} by zero")
        result = ARITHMETIC[command.kind](self.variables.get(slot_id), amount)
        return (slot_id, result), next_index

    def _print(self, command, next_index):
        row_var, col_var, text = command.operands
        row = self._get_variable(row_var.name)
        col = self._get_variable(col_var.name)
        logger.debug("render (%d, %d) %r", row, col, text.value)
        self.display.render(row, col, text.value)
        return None, next_index

    def _goto(self, command, next_index):
        target = command.operands[0].value
        if target < self.program.begin_line or target > self.program.end_line:
            self._fail(ErrorKind.INVALID_GOTO_TARGET, f"Invalid line number {target}")
        target_index = self.program.index_of(target)
        if target_index is None:
            self._fail(ErrorKind.UNKNOWN_LINE_NUMBER, f"Command at line {target} not found")
        return None, target_index

    def _if(self, command, next_index):
        left, op, right = command.operands
        left_val = self._resolve_condition_operand(left)
        right_val = self._resolve_condition_operand(right)
        if not self._evaluate_condition(left_val, op.symbol, right_val):
            next_index += 1
        return None, next_index

    def step(self):
        if self.state != EngineState.RUNNING:
            return self.state

        if self.limits.max_steps is not None and self.steps >= self.limits.max_steps:
            self._fail(ErrorKind.STEP_LIMIT_EXCEEDED, f"Step limit of {self.limits.max_steps} exceeded")

        index = self.program.index_of(self.pc)
        if index is None:
            self._fail(ErrorKind.UNKNOWN_LINE_NUMBER, f"Command at line {self.pc} not found")
        command = self.program[index]
        self.steps += 1

        assignment, next_index = self.handlers[command.kind](command, index + 1)
        if assignment is not None:
            self.variables.set(*assignment)

        if next_index >= len(self.program):
            logger.warning("line %d has no following command, stopping", command.line_number)
            self.state = EngineState.HALTED
            return self.state

        self.pc = self.program[next_index].line_number
        if self.pc >= self.program.end_line:
            self.state = EngineState.HALTED
        return self.state

    def run(self):
        while self.state == EngineState.RUNNING:
            self.step()
        logger.debug("execution finished after %d steps", self.steps)
        return self.state


def execute(program, display, limits=None):
    interpreter = Interpreter(program, display, limits)
    interpreter.run()
    return interpreter
