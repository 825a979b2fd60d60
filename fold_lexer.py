import re
import math
import operator
from enum import Enum
from typing import Callable, Literal, NamedTuple, Union

number_rex = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _is_odd_integer(x):
    return math.isfinite(x) and x % 2 == 1.0


def ieee_div(a, b):
    """a/b, but with IEEE-754 semantics instead of ZeroDivisionError.

    >>> ieee_div(1.0, 0.0), ieee_div(1.0, -0.0), ieee_div(0.0, 0.0)
    (inf, -inf, nan)
    """
    try:
        return a / b
    except ZeroDivisionError:
        # NB, can't just return nan, since 1/0 must be signed inf
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1, b)


def ieee_pow(a, b):
    """C-style pow: overflow and poles give inf, domain errors give nan.

    >>> ieee_pow(0.0, 0.0), ieee_pow(0.0, -1.0), ieee_pow(-8.0, 1 / 3)
    (1.0, inf, nan)
    """
    try:
        return math.pow(a, b)
    except OverflowError:
        return math.copysign(math.inf, a) if _is_odd_integer(b) else math.inf
    except ValueError:
        if a == 0:
            return math.copysign(math.inf, a) if _is_odd_integer(b) else math.inf
        return math.nan


class Op(NamedTuple):
    op: str
    prec: int
    assoc: Literal["l", "r"]  # left-associative, right-associative
    fun: Callable

    def __call__(self, *args):
        return self.fun(*args)

    def __repr__(self):
        return f"op({self.op!r:})"

    def left_first(self, other):
        """Whether in `a self b other c` self must be applied first."""
        return self.prec > other.prec or self.prec == other.prec and other.assoc == "l"


OP_GROUPS = """
add+l sub-l
ieee_div/l mul*l
ieee_pow^r
""".strip()
OPS = {
    o: Op(o, prec, assoc, getattr(operator, fun, None) or globals()[fun])
    for prec, op_groups in enumerate(OP_GROUPS.split("\n"))
    for [(fun, o, assoc)] in map(
        re.compile(r"^(\w+)(\W+)(\w+)$").findall, op_groups.split()
    )
}


class TokenKind(Enum):
    NUMBER = "number"
    OPERATOR = "operator"
    OPEN = "("
    CLOSE = ")"
    END = "end"
    INVALID = "invalid"


class Token(NamedTuple):
    kind: TokenKind
    value: Union[float, Op, str, None]
    pos: int

    def __repr__(self):
        if self.kind is TokenKind.END:
            return f"<end@{self.pos}>"
        return f"<{self.value!r}@{self.pos}>"


PUNCTUATION = {"(": TokenKind.OPEN, ")": TokenKind.CLOSE}


def next_token(text, pos=0, operand=True):
    """Return the token starting at (or after whitespace at) `pos`, and the
    position just past it.

    Numbers win over single character symbols, so with `operand` set a sign
    followed by a digit is read as part of the literal. Callers that are
    expecting an operator pass `operand=False`, which only reads symbols.
    An unrecognized character is returned as INVALID without being consumed.

    >>> next_token("  -2.5e1 )")
    (<-25.0@2>, 8)
    >>> next_token("-2", operand=False)
    (<op('-')@0>, 1)
    >>> next_token("1 # 2", 1)
    (<'#'@2>, 2)
    """
    n = len(text)
    while pos < n and text[pos].isspace():
        pos += 1
    if pos == n:
        return Token(TokenKind.END, None, pos), pos
    if operand and (m := number_rex.match(text, pos)):
        return Token(TokenKind.NUMBER, float(m.group()), pos), m.end()
    c = text[pos]
    if kind := PUNCTUATION.get(c):
        return Token(kind, c, pos), pos + 1
    if o := OPS.get(c):
        return Token(TokenKind.OPERATOR, o, pos), pos + 1
    return Token(TokenKind.INVALID, c, pos), pos


def tokens(text):
    """Yield all tokens of `text`, up to and including END (or INVALID).

    Numbers are only read where an operand is expected, as `solve` does.

    >>> list(tokens("1+-2"))
    [<1.0@0>, <op('+')@1>, <-2.0@2>, <end@4>]
    """
    pos = 0
    operand = True
    while True:
        tok, pos = next_token(text, pos, operand)
        if tok.kind is TokenKind.NUMBER:
            operand = False
        elif tok.kind is TokenKind.OPERATOR:
            operand = True
        yield tok
        if tok.kind in (TokenKind.END, TokenKind.INVALID):
            return
