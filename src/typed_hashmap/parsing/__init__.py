"""Parsing module for the console command language."""

from typed_hashmap.parsing.command_parser import (
    Assignment,
    CommandParser,
    ExpressionStatement,
    FunctionCall,
    Index,
    IndexAssignment,
    Literal,
    MethodCall,
    Name,
    VectorLiteral,
)

__all__ = [
    "Assignment",
    "CommandParser",
    "ExpressionStatement",
    "FunctionCall",
    "Index",
    "IndexAssignment",
    "Literal",
    "MethodCall",
    "Name",
    "VectorLiteral",
]
