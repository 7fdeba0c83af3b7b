"""Parser for the hashmap console command language."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

import ply.yacc as yacc

from typed_hashmap.parsing.command_lexer import CommandLexer


@dataclass
class Literal:
    """A scalar literal: integer, float, string, boolean or NA (None)."""

    value: Any


@dataclass
class VectorLiteral:
    """A bracketed vector such as ``["A", "B"]``."""

    elements: list[Expression] = field(default_factory=list)


@dataclass
class Name:
    """A reference to a console variable."""

    name: str


@dataclass
class KeywordArgument:
    """A ``name = value`` argument."""

    name: str
    value: Expression


@dataclass
class FunctionCall:
    """A call to a built-in function, e.g. ``hashmap(keys, values)``."""

    name: str
    args: list[Expression] = field(default_factory=list)
    kwargs: dict[str, Expression] = field(default_factory=dict)


@dataclass
class MethodCall:
    """A method call on a value, e.g. ``h.find_values(["A"])``."""

    target: Expression
    method: str
    args: list[Expression] = field(default_factory=list)
    kwargs: dict[str, Expression] = field(default_factory=dict)


@dataclass
class Index:
    """A lookup ``target[index]``."""

    target: Expression
    index: Expression


Expression = Union[Literal, VectorLiteral, Name, FunctionCall, MethodCall, Index]


@dataclass
class Assignment:
    """``name = expression``."""

    name: str
    value: Expression


@dataclass
class IndexAssignment:
    """``target[index] = expression``."""

    target: Expression
    index: Expression
    value: Expression


@dataclass
class ExpressionStatement:
    """A bare expression whose value is shown."""

    expression: Expression


Statement = Union[Assignment, IndexAssignment, ExpressionStatement]


class CommandParser:
    """Parser for console commands."""

    tokens = CommandLexer.tokens

    def __init__(self) -> None:
        self.lexer = CommandLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_statement(self, p: yacc.YaccProduction) -> None:
        """statement : command SEMICOLON
                     | command"""
        p[0] = p[1]

    def p_command_assignment(self, p: yacc.YaccProduction) -> None:
        """command : IDENTIFIER EQUALS expr"""
        p[0] = Assignment(name=p[1], value=p[3])

    def p_command_index_assignment(self, p: yacc.YaccProduction) -> None:
        """command : expr LBRACKET expr RBRACKET EQUALS expr"""
        p[0] = IndexAssignment(target=p[1], index=p[3], value=p[6])

    def p_command_expression(self, p: yacc.YaccProduction) -> None:
        """command : expr"""
        p[0] = ExpressionStatement(expression=p[1])

    def p_expr_method_call(self, p: yacc.YaccProduction) -> None:
        """expr : expr DOT IDENTIFIER LPAREN arguments RPAREN"""
        args, kwargs = p[5]
        p[0] = MethodCall(target=p[1], method=p[3], args=args, kwargs=kwargs)

    def p_expr_index(self, p: yacc.YaccProduction) -> None:
        """expr : expr LBRACKET expr RBRACKET"""
        p[0] = Index(target=p[1], index=p[3])

    def p_expr_function_call(self, p: yacc.YaccProduction) -> None:
        """expr : IDENTIFIER LPAREN arguments RPAREN"""
        args, kwargs = p[3]
        p[0] = FunctionCall(name=p[1], args=args, kwargs=kwargs)

    def p_expr_name(self, p: yacc.YaccProduction) -> None:
        """expr : IDENTIFIER"""
        p[0] = Name(name=p[1])

    def p_expr_vector(self, p: yacc.YaccProduction) -> None:
        """expr : vector
                | literal"""
        p[0] = p[1]

    def p_vector_empty(self, p: yacc.YaccProduction) -> None:
        """vector : LBRACKET RBRACKET"""
        p[0] = VectorLiteral(elements=[])

    def p_vector(self, p: yacc.YaccProduction) -> None:
        """vector : LBRACKET element_list RBRACKET
                  | LBRACKET element_list COMMA RBRACKET"""
        p[0] = VectorLiteral(elements=p[2])

    def p_element_list_single(self, p: yacc.YaccProduction) -> None:
        """element_list : expr"""
        p[0] = [p[1]]

    def p_element_list_multiple(self, p: yacc.YaccProduction) -> None:
        """element_list : element_list COMMA expr"""
        p[0] = p[1] + [p[3]]

    def p_literal_scalar(self, p: yacc.YaccProduction) -> None:
        """literal : INTEGER
                   | FLOAT
                   | STRING"""
        p[0] = Literal(value=p[1])

    def p_literal_negative(self, p: yacc.YaccProduction) -> None:
        """literal : MINUS INTEGER
                   | MINUS FLOAT"""
        p[0] = Literal(value=-p[2])

    def p_literal_true(self, p: yacc.YaccProduction) -> None:
        """literal : TRUE"""
        p[0] = Literal(value=True)

    def p_literal_false(self, p: yacc.YaccProduction) -> None:
        """literal : FALSE"""
        p[0] = Literal(value=False)

    def p_literal_na(self, p: yacc.YaccProduction) -> None:
        """literal : NA"""
        p[0] = Literal(value=None)

    def p_arguments_empty(self, p: yacc.YaccProduction) -> None:
        """arguments : empty"""
        p[0] = ([], {})

    def p_arguments_positional(self, p: yacc.YaccProduction) -> None:
        """arguments : positional_list"""
        p[0] = (p[1], {})

    def p_arguments_keyword(self, p: yacc.YaccProduction) -> None:
        """arguments : keyword_list"""
        p[0] = ([], p[1])

    def p_arguments_mixed(self, p: yacc.YaccProduction) -> None:
        """arguments : positional_list COMMA keyword_list"""
        p[0] = (p[1], p[3])

    def p_positional_list_single(self, p: yacc.YaccProduction) -> None:
        """positional_list : expr"""
        p[0] = [p[1]]

    def p_positional_list_multiple(self, p: yacc.YaccProduction) -> None:
        """positional_list : positional_list COMMA expr"""
        p[0] = p[1] + [p[3]]

    def p_keyword_list_single(self, p: yacc.YaccProduction) -> None:
        """keyword_list : keyword"""
        p[0] = {p[1].name: p[1].value}

    def p_keyword_list_multiple(self, p: yacc.YaccProduction) -> None:
        """keyword_list : keyword_list COMMA keyword"""
        if p[3].name in p[1]:
            raise ValueError(f"Duplicate keyword argument '{p[3].name}'")
        p[0] = {**p[1], p[3].name: p[3].value}

    def p_keyword(self, p: yacc.YaccProduction) -> None:
        """keyword : IDENTIFIER EQUALS expr"""
        p[0] = KeywordArgument(name=p[1], value=p[3])

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""
        p[0] = None

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start="statement", **kwargs)

    def parse(self, data: str) -> Statement:
        """Parse a single command."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        return self.parser.parse(data, lexer=self.lexer.lexer)
