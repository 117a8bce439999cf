#!/usr/bin/env python3
"""
infixcalc.py — infix command-line tool.

Runs entirely locally; no API server needed.

Subcommands:
    eval   — evaluate an expression against the base environment
    parse  — show the AST and the free names of an expression
    names  — list the base environment bindings

Usage:
    python infixcalc.py eval "1 + 2 * 3"
    python infixcalc.py eval "x * x + y" -D x=3 -D y=1/2 --trace
    python infixcalc.py eval "max(1, 2, 3)"
    python infixcalc.py parse "sqrt 4 + f(1, 2)" --json
    python infixcalc.py names
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from adapters.environment.base_env import CONSTANTS, FUNCTIONS, OPERATORS, base_environment
from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.expression_parser.ast_tools import to_infix
from adapters.expression_parser.grammar import RecursiveDescentParser
from config import Settings
from contracts import InfixError, format_number

# -- helpers ---------------------------------------------------------------

_CONSOLE: Console | None = None


def _console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(highlight=False)
    return _CONSOLE


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _read_text(args: argparse.Namespace) -> str:
    text = args.text if args.text is not None else sys.stdin.read()
    text = text.strip()
    if not text:
        _fail("pass an expression as an argument or on stdin")
    return text


def _bind_defines(defines: list[str], env: dict[str, Any], evaluator: ASTEvaluator) -> None:
    """-D name=expr, bound into env in order; later values may use earlier names."""
    parser = RecursiveDescentParser()
    for item in defines:
        name, sep, expr = item.partition("=")
        name = name.strip()
        if not sep or not name:
            _fail(f"bad binding {item!r}, expected name=value")
        env[name] = evaluator.evaluate(parser.parse_ast(expr.strip()), env)


def _print_steps(steps: list[str]) -> None:
    table = Table(title="Steps", box=box.ASCII, show_header=False, pad_edge=False)
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Step")
    for i, step in enumerate(steps, 1):
        table.add_row(str(i), step)
    _console().print(table)


# -- subcommands -----------------------------------------------------------

def _eval(args: argparse.Namespace, settings: Settings) -> None:
    text = _read_text(args)
    evaluator = ASTEvaluator(float_precision=settings.float_precision)
    env = base_environment()
    _bind_defines(args.define, env, evaluator)

    ast = RecursiveDescentParser().parse_ast(text)
    result = evaluator.eval_expr(ast, env, trace=args.trace)
    if args.trace and result.steps:
        _print_steps(result.steps)
    print(format_number(result.value, settings.float_precision))


def _parse(args: argparse.Namespace, settings: Settings) -> None:
    text = _read_text(args)
    parsed = RecursiveDescentParser().parse(text)
    if args.json:
        print(json.dumps(parsed.model_dump(mode="json"), indent=2, ensure_ascii=False))
        return
    print(to_infix(parsed.ast))
    print(f"names: {', '.join(parsed.names) if parsed.names else '-'}")


def _names(args: argparse.Namespace, settings: Settings) -> None:
    table = Table(title="Base environment", box=box.ASCII)
    table.add_column("Name", no_wrap=True, style="bold cyan")
    table.add_column("Kind", no_wrap=True)
    table.add_column("Value")
    for name in OPERATORS:
        table.add_row(name, "operator", OPERATORS[name].__name__)
    for name, value in CONSTANTS.items():
        table.add_row(name, "constant", format_number(value, settings.float_precision))
    for name, fn in FUNCTIONS.items():
        table.add_row(name, "function", getattr(fn, "__name__", repr(fn)))
    _console().print(table)


# -- main ------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    settings = Settings()
    parser = argparse.ArgumentParser(
        prog="infixcalc",
        description="infix — parse and evaluate infix expressions",
    )
    parser.add_argument("--log-level", default=settings.log_level,
                        help="Logging level (default from INFIX_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    # eval
    p = sub.add_parser("eval", help="Evaluate an expression")
    p.add_argument("text", nargs="?", help="Expression (or stdin)")
    p.add_argument("--define", "-D", action="append", default=[], metavar="NAME=VALUE",
                   help="Bind a variable; the value is itself an expression")
    p.add_argument("--trace", action="store_true", help="Show computation steps")

    # parse
    p = sub.add_parser("parse", help="Show the AST of an expression")
    p.add_argument("text", nargs="?", help="Expression (or stdin)")
    p.add_argument("--json", action="store_true", help="Print the AST as JSON")

    # names
    sub.add_parser("names", help="List base environment bindings")

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    commands = {
        "eval":  _eval,
        "parse": _parse,
        "names": _names,
    }
    try:
        commands[args.command](args, settings)
    except InfixError as exc:
        _fail(str(exc))
    except (ArithmeticError, ValueError, TypeError) as exc:
        _fail(f"{type(exc).__name__}: {exc}")
    except RecursionError:
        _fail("expression nested too deeply")


if __name__ == "__main__":
    main()
