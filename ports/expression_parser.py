"""
Port: ExpressionParser
Responsibility: turning infix text into an immutable ExprAST without
consulting any environment.
"""
from typing import Protocol, runtime_checkable

from contracts import ExprAST, ParsedExpression


@runtime_checkable
class ExpressionParser(Protocol):
    def parse(self, text: str) -> ParsedExpression:
        """
        Parses a complete infix expression.
        Returns ParsedExpression with the AST and the free binding keys
        (variables, operator symbols, callees) the AST refers to.
        Raises ParseFailure if the whole input does not match the grammar.
        """
        ...

    def parse_ast(self, text: str) -> ExprAST:
        """Same as parse(), returning only the AST."""
        ...
