"""Command line front end for the fold evaluator.

Usage:
    fold-calc                      # Evaluate the built-in sample expression
    fold-calc "2 + 3 * 4"          # Prints 14
    fold-calc -v "(1 + 2) ^ 2"     # Same, with debug logging on stderr

Set FOLD_CALC_DEBUG to any non-empty value to always log at debug level.
"""

from __future__ import annotations

import logging
import math
import os
from decimal import Decimal
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from fold_eval import EvalError, solve

DEBUG = bool(os.getenv("FOLD_CALC_DEBUG", False))

SAMPLE_EXPR = (
    "100 - (((((((2 * (((100))))) / 4) "
    "+ 2 ^ (5 / ((2 + 2) * 2))))) ^ 2 ^ 2) * 0.00001"
)

app = typer.Typer(
    name="fold-calc",
    help="Evaluate an infix arithmetic expression",
    add_completion=False,
)
console = Console(stderr=True)


def format_result(x):
    """Format as a plain decimal, never in exponent notation.

    >>> format_result(14.0), format_result(2.5), format_result(1e-10)
    ('14', '2.5', '0.0000000001')
    >>> format_result(-math.inf), format_result(math.nan)
    ('-inf', 'NaN')
    """
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return repr(x)
    s = format(Decimal(repr(x)), "f")
    return s[:-2] if s.endswith(".0") else s


@app.command(context_settings={"ignore_unknown_options": True})
def main(
    expression: Optional[str] = typer.Argument(None, help="Expression to evaluate (default: built-in sample)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log evaluation steps to stderr"),
) -> None:
    """Evaluate EXPRESSION and print the result."""
    logging.basicConfig(
        level=logging.DEBUG if verbose or DEBUG else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        result = solve(SAMPLE_EXPR if expression is None else expression)
    except EvalError as e:
        console.print(f"[red]error calculating[/red]: {escape(str(e))}", highlight=False)
        raise typer.Exit(1)
    typer.echo(format_result(result))


if __name__ == "__main__":
    app()
