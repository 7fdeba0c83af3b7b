"""Command executor for the hashmap console."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Any

from typed_hashmap.config import get_option, set_option
from typed_hashmap.display import format_value
from typed_hashmap.hashmap import Hashmap
from typed_hashmap.parsing.command_parser import (
    Assignment,
    Expression,
    ExpressionStatement,
    FunctionCall,
    Index,
    IndexAssignment,
    Literal,
    MethodCall,
    Name,
    Statement,
    VectorLiteral,
)


@dataclass
class CommandResult:
    """Base result of executing one command."""

    value: Any = None
    message: str | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def has_value(self) -> bool:
        """Return whether the console should display ``value``."""
        return self.value is not None


@dataclass
class AssignmentResult(CommandResult):
    """Result of ``name = expression``. The assigned value is not echoed."""

    name: str = ""

    @property
    def has_value(self) -> bool:
        return False


@dataclass
class UpdateResult(CommandResult):
    """Result of ``target[index] = expression``."""

    @property
    def has_value(self) -> bool:
        return False


@dataclass
class OptionsResult(CommandResult):
    """Result of ``options(...)``: the option values before the call."""

    options: dict[str, Any] = field(default_factory=dict)


# Option names the console exposes through options()
CONSOLE_OPTIONS = ("max_print",)


class CommandExecutor:
    """Evaluates parsed commands against a table of console variables."""

    def __init__(self) -> None:
        self.variables: dict[str, Any] = {}

    def execute(self, statement: Statement) -> CommandResult:
        """Execute a statement, collecting any warnings it raises."""
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = self._execute(statement)
        result.warnings = [str(w.message) for w in caught]
        return result

    def _execute(self, statement: Statement) -> CommandResult:
        if isinstance(statement, Assignment):
            return self._execute_assignment(statement)
        elif isinstance(statement, IndexAssignment):
            return self._execute_index_assignment(statement)
        elif isinstance(statement, ExpressionStatement):
            return self._execute_expression(statement)
        raise TypeError(f"Unknown statement type: {type(statement).__name__}")

    def _execute_assignment(self, statement: Assignment) -> CommandResult:
        value = self.evaluate(statement.value)
        self.variables[statement.name] = value
        return AssignmentResult(value=value, name=statement.name)

    def _execute_index_assignment(self, statement: IndexAssignment) -> CommandResult:
        target = self._require_hashmap(self.evaluate(statement.target))
        keys = self.evaluate(statement.index)
        values = self.evaluate(statement.value)
        target.invoke("[[<-", keys, values)
        return UpdateResult()

    def _execute_expression(self, statement: ExpressionStatement) -> CommandResult:
        expression = statement.expression
        if isinstance(expression, FunctionCall) and expression.name == "options":
            return self._execute_options(expression)
        if isinstance(expression, FunctionCall) and expression.name == "print":
            if len(expression.args) != 1 or expression.kwargs:
                raise TypeError("print() takes exactly one argument")
            return CommandResult(message=format_value(self.evaluate(expression.args[0])))
        return CommandResult(value=self.evaluate(expression))

    def _execute_options(self, call: FunctionCall) -> OptionsResult:
        """Show or change console options; positional arguments are not accepted."""
        if call.args:
            raise TypeError("options() only takes keyword arguments, e.g. options(max_print = 10)")
        for name in call.kwargs:
            if name not in CONSOLE_OPTIONS:
                raise KeyError(f"Unknown option '{name}'")
        previous = {name: get_option(name) for name in CONSOLE_OPTIONS}
        for name, expression in call.kwargs.items():
            set_option(name, self.evaluate(expression))
        if call.kwargs:
            changed = ", ".join(f"{name} = {get_option(name)}" for name in call.kwargs)
            message = f"Set {changed}"
        else:
            message = ", ".join(f"{name} = {value}" for name, value in previous.items())
        return OptionsResult(message=message, options=previous)

    def evaluate(self, expression: Expression) -> Any:
        """Evaluate an expression to a Python value."""
        if isinstance(expression, Literal):
            return expression.value
        elif isinstance(expression, VectorLiteral):
            return self._evaluate_vector(expression)
        elif isinstance(expression, Name):
            if expression.name not in self.variables:
                raise NameError(f"Unknown variable '{expression.name}'")
            return self.variables[expression.name]
        elif isinstance(expression, FunctionCall):
            return self._evaluate_function_call(expression)
        elif isinstance(expression, MethodCall):
            return self._evaluate_method_call(expression)
        elif isinstance(expression, Index):
            target = self._require_hashmap(self.evaluate(expression.target))
            return target.invoke("[[", self.evaluate(expression.index))
        raise TypeError(f"Unknown expression type: {type(expression).__name__}")

    def _evaluate_vector(self, vector: VectorLiteral) -> list[Any]:
        """Evaluate a vector literal, splicing nested vectors into it."""
        result: list[Any] = []
        for element in vector.elements:
            value = self.evaluate(element)
            if isinstance(value, list):
                result.extend(value)
            elif isinstance(value, Hashmap):
                raise TypeError("A vector cannot contain a hashmap")
            else:
                result.append(value)
        return result

    def _evaluate_function_call(self, call: FunctionCall) -> Any:
        if call.name == "hashmap":
            if len(call.args) != 2:
                raise TypeError(f"hashmap() takes 2 positional arguments, got {len(call.args)}")
            kwargs = {name: self.evaluate(expr) for name, expr in call.kwargs.items()}
            unknown = set(kwargs) - {"key_kind", "value_kind"}
            if unknown:
                raise TypeError(f"hashmap() got unexpected keyword argument '{sorted(unknown)[0]}'")
            keys, values = (self.evaluate(arg) for arg in call.args)
            return Hashmap(keys, values, **kwargs)
        elif call.name in ("options", "print"):
            raise SyntaxError(f"{call.name}() can only be used as a statement")
        raise NameError(f"Unknown function '{call.name}'")

    def _evaluate_method_call(self, call: MethodCall) -> Any:
        target = self._require_hashmap(self.evaluate(call.target))
        if call.kwargs:
            raise TypeError(f"{call.method}() does not take keyword arguments")
        args = [self.evaluate(arg) for arg in call.args]
        return target.invoke(call.method, *args)

    @staticmethod
    def _require_hashmap(value: Any) -> Hashmap:
        if not isinstance(value, Hashmap):
            raise TypeError(f"Expected a hashmap, got {type(value).__name__}")
        return value
