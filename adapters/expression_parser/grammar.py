"""
Adapter: RecursiveDescentParser
Implements the ExpressionParser port.

Grammar (two fixed precedence levels, both left-associative):
  expression = term { ws addop ws term }
  term       = factor { ws mulop ws factor }
  factor     = "(" ws expression ws ")" | reference | number | call
  call       = reference " "+ expression
             | reference "(" ws [ expression { ws "," ws expression } ] ws ")"
  reference  = letter { letter | digit | "_" }
  addop      = "+" | "-" | "|" | "&"
  mulop      = "*" | "/" | "÷" | "**" | "%" | ">>" | ">>>" | "<<"

The grammar is ambiguous ("f 4" starts with the reference "f", "3/4" is both
a rational literal and a division), so every rule produces all of its parses
as (node, end) pairs, preferred reading first. parse() takes the first one
that covers the whole input. Nothing here touches an environment: operators,
variables and callees are kept as names.

expression, term and factor are packrat rules: their parses are computed once
per position and only the first parse for each end position is kept. Parse
time therefore grows with the input, not with the number of readings.
"""
from __future__ import annotations

import functools
import logging
from typing import Callable, Iterable, Iterator, TypeVar

from adapters.expression_parser.ast_tools import free_names
from adapters.expression_parser.lexical import Failures, Scanner
from adapters.expression_parser.literals import number
from contracts import (
    ADD_OPS,
    MUL_OPS,
    BinaryOpNode,
    CallNode,
    ExprAST,
    LiteralNode,
    ParseFailure,
    ParsedExpression,
    VariableRefNode,
)

logger = logging.getLogger("infix.parser")

Parses = list[tuple[ExprAST, int]]
T = TypeVar("T")


def _packrat(rule: Callable[[_Grammar, int], Iterable[tuple[ExprAST, int]]]):
    """
    Cache a rule's parses per position, keeping the first parse for each end.
    What can follow a parse depends on its end alone, so a later parse with
    the same end is never preferred. Failures recorded while computing the
    entry are cached with it and replayed on every hit.
    """
    name = rule.__name__

    @functools.wraps(rule)
    def cached(self: _Grammar, pos: int) -> Parses:
        entry = self.memo.get((name, pos))
        if entry is not None:
            parses, failures = entry
            self.scan.replay(failures)
            return parses
        saved = self.scan.checkpoint()
        by_end: dict[int, ExprAST] = {}
        for node, stop in rule(self, pos):
            by_end.setdefault(stop, node)
        failures = self.scan.resume(saved)
        parses = [(node, stop) for stop, node in by_end.items()]
        self.memo[(name, pos)] = (parses, failures)
        return parses

    return cached


def _repeat(
    starts: Iterable[tuple[T, int]],
    extend: Callable[[T, int], Iterator[tuple[T, int]]],
) -> Iterator[tuple[T, int]]:
    """
    Grow each start with extend() until it stops growing, longer repetitions
    first. Depth-first over an explicit stack; repetition count adds no Python
    frames. A state ending where an earlier one ended is skipped, since every
    end it could reach has already been yielded.
    """
    seen: set[int] = set()
    for first, stop in starts:
        if stop in seen:
            continue
        seen.add(stop)
        stack = [(first, stop, extend(first, stop))]
        while stack:
            value, at, pending = stack[-1]
            for grown, grown_at in pending:
                if grown_at not in seen:
                    seen.add(grown_at)
                    stack.append((grown, grown_at, extend(grown, grown_at)))
                    break
            else:
                stack.pop()
                yield value, at


class _Grammar:
    """One instance per input: the scanner and the per-position parse cache."""

    def __init__(self, text: str) -> None:
        self.scan = Scanner(text)
        self.memo: dict[tuple[str, int], tuple[Parses, Failures]] = {}

    # -- entry ---------------------------------------------------------------

    def parse(self) -> ExprAST:
        scan = self.scan
        self._prime()
        for node, stop in self.expression(scan.spaces(0)):
            stop = scan.spaces(stop)
            if stop == scan.end:
                return node
            scan.fail(stop, "end of input")
        raise scan.failure()

    def _prime(self) -> None:
        """
        Fill the cache for every factor that opens with "(" or an identifier,
        right to left. An outer factor then finds its inner ones cached, so
        nesting depth adds no Python frames. Failures met here are dropped;
        the cache replays them when the real parse reaches those positions.
        """
        scan = self.scan
        saved = scan.checkpoint()
        for pos in range(scan.end - 1, -1, -1):
            if scan.peek(pos) == "(" or scan.starts_identifier(pos):
                self.factor(pos)
        scan.resume(saved, keep=False)

    # -- precedence levels ---------------------------------------------------

    @_packrat
    def expression(self, pos: int) -> Iterator[tuple[ExprAST, int]]:
        return self._chain(pos, self.term, ADD_OPS, "additive operator")

    @_packrat
    def term(self, pos: int) -> Iterator[tuple[ExprAST, int]]:
        return self._chain(pos, self.factor, MUL_OPS, "multiplicative operator")

    def _chain(
        self,
        pos: int,
        operand: Callable[[int], Parses],
        ops: tuple[str, ...],
        label: str,
    ) -> Iterator[tuple[ExprAST, int]]:
        """operand { ws op ws operand }, folded to the left as it is read."""
        scan = self.scan

        def extend(left: ExprAST, at: int) -> Iterator[tuple[ExprAST, int]]:
            found = scan.operator(scan.spaces(at), ops, label)
            if found is None:
                return
            symbol, after = found
            for right, stop in operand(scan.spaces(after)):
                yield BinaryOpNode(op=symbol, left=left, right=right), stop

        return _repeat(operand(pos), extend)

    # -- factor --------------------------------------------------------------

    @_packrat
    def factor(self, pos: int) -> Iterator[tuple[ExprAST, int]]:
        yield from self._parenthesised(pos)
        yield from self._reference(pos)
        for value, stop in number(self.scan, pos):
            yield LiteralNode(value=value), stop
        yield from self._call(pos)

    def _parenthesised(self, pos: int) -> Iterator[tuple[ExprAST, int]]:
        scan = self.scan
        opened = scan.match(pos, "(")
        if opened is None:
            return
        for inner, stop in self.expression(scan.spaces(opened)):
            closed = scan.match(scan.spaces(stop), ")")
            if closed is not None:
                yield inner, closed

    def _reference(self, pos: int) -> Iterator[tuple[ExprAST, int]]:
        found = self.scan.identifier(pos)
        if found is not None:
            name, stop = found
            yield VariableRefNode(name=name), stop

    # -- function calls ------------------------------------------------------

    def _call(self, pos: int) -> Iterator[tuple[ExprAST, int]]:
        scan = self.scan
        found = scan.identifier(pos)
        if found is None:
            return
        callee, after = found

        # f expr: exactly one argument, separated by literal spaces
        if scan.peek(after) == " ":
            start = after
            while scan.peek(start) == " ":
                start += 1
            for arg, stop in self.expression(start):
                yield CallNode(callee=callee, args=(arg,)), stop
        else:
            scan.fail(after, "' '")

        # f(a, b, ...): zero or more arguments
        opened = scan.match(after, "(")
        if opened is None:
            return
        start = scan.spaces(opened)
        for args, stop in self._arguments(start):
            closed = scan.match(scan.spaces(stop), ")")
            if closed is not None:
                yield CallNode(callee=callee, args=args), closed
        closed = scan.match(start, ")")
        if closed is not None:
            yield CallNode(callee=callee, args=()), closed

    def _arguments(self, pos: int) -> Iterator[tuple[tuple[ExprAST, ...], int]]:
        scan = self.scan

        def extend(args: tuple[ExprAST, ...], at: int) -> Iterator[tuple[tuple[ExprAST, ...], int]]:
            comma = scan.match(scan.spaces(at), ",")
            if comma is None:
                return
            for arg, stop in self.expression(scan.spaces(comma)):
                yield (*args, arg), stop

        firsts = (((arg,), stop) for arg, stop in self.expression(pos))
        return _repeat(firsts, extend)


class RecursiveDescentParser:
    """Parses infix text into an immutable ExprAST. Stateless between calls."""

    # -- ExpressionParser protocol ------------------------------------------

    def parse(self, text: str) -> ParsedExpression:
        ast = self.parse_ast(text)
        return ParsedExpression(text=text, ast=ast, names=free_names(ast))

    def parse_ast(self, text: str) -> ExprAST:
        try:
            ast = _Grammar(text).parse()
        except RecursionError:
            logger.warning("Expression nested too deeply (%d chars).", len(text))
            raise
        except ParseFailure as exc:
            logger.debug("Parse failed for %r: %s", text, exc)
            raise
        logger.debug("Parsed %r -> %s", text, ast.node_type)
        return ast


_DEFAULT_PARSER = RecursiveDescentParser()


def parse_expression(text: str) -> ExprAST:
    """Module-level shortcut for RecursiveDescentParser().parse_ast(text)."""
    return _DEFAULT_PARSER.parse_ast(text)
