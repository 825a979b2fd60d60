"""A single pass, stack based evaluator for infix arithmetic expressions.

There is no parse tree and no recursion. Each nesting level gets a `Frame`
recording where its operands start on the operand stack and how many `)`
it still needs. The evaluator alternates between reading a number position
(any number of `(` followed by a number) and an operator position (any
number of `)` followed by an operator or the end of input), and after each
such step folds as much as precedence and parenthesis boundaries allow.
A lower precedence operator followed by a higher precedence one is deferred
by pushing the left operand back on the stack.
"""
import logging
from typing import NamedTuple, Optional

from fold_lexer import OPS, Op, TokenKind, next_token, tokens

logger = logging.getLogger(__name__)


class EvalError(ValueError):
    """The expression is not well formed; raised at the first bad token."""

    def __init__(self, text, position, reason):
        super().__init__(f"{reason} at position {position}")
        self.text = text
        self.position = position
        self.reason = reason


class Pair(NamedTuple):
    value: float
    op: Optional[Op]  # None only after the last number


# -0.0 so that folding it in is an exact identity, even for -0.0. A +0.0
# sentinel would turn a level's -0.0 into +0.0 (1 / ((1 - 2) * 0) is -inf
# here, +inf with a +0.0 sentinel).
SENTINEL = Pair(-0.0, OPS["+"])


class Frame(NamedTuple):
    base: int
    pending: int  # `)` still owed to this level


def _unexpected(text, tok):
    if tok.kind is TokenKind.END:
        return EvalError(text, tok.pos, "unexpected end of input")
    what = tok.value.op if tok.kind is TokenKind.OPERATOR else tok.value
    return EvalError(text, tok.pos, f"unexpected {what!r}")


def solve(text):
    """Evaluate the arithmetic expression `text`.

    Returns a float; raises `EvalError` if `text` is malformed. Division by
    zero and friends are not errors, they follow IEEE-754.

    >>> solve("2 + 3 * 4")
    14.0
    >>> solve("2 ^ 2 ^ 3")
    256.0
    >>> solve("1 / 0")
    inf
    >>> solve("(1 + 2")
    Traceback (most recent call last):
    ...
    fold_eval.EvalError: unexpected end of input at position 6
    """
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("tokens: %s", list(tokens(text)))
    pairs = []
    frames = []
    frame = Frame(0, 1)
    r = SENTINEL
    pos = 0
    while True:
        l = r

        # Number position: `(`* NUMBER
        opens = 0
        while True:
            tok, pos = next_token(text, pos)
            if tok.kind is TokenKind.OPEN:
                opens += 1
            elif tok.kind is TokenKind.NUMBER:
                num = tok.value
                break
            else:
                raise _unexpected(text, tok)

        # Operator position: `)`* (OPERATOR | END); END closes one level too.
        closes = 0
        while True:
            tok, pos = next_token(text, pos, operand=False)
            if tok.kind is TokenKind.CLOSE:
                closes += 1
            elif tok.kind is TokenKind.OPERATOR:
                op = tok.value
                break
            elif tok.kind is TokenKind.END:
                closes += 1
                op = None
                break
            else:
                raise _unexpected(text, tok)

        r = Pair(num, op)

        if opens:
            pairs.append(l)
            frames.append(frame)
            frame = Frame(len(pairs), opens)
            l = SENTINEL
            logger.debug("enter level %d at %d (%d opens)", len(frames), frame.base, opens)

        while True:
            if not closes and r.op is None:
                # END paid for an inner level, an outer `(` is still open.
                raise _unexpected(text, tok)
            if not closes and not l.op.left_first(r.op):
                pairs.append(l)
                break
            r = r._replace(value=l.op(l.value, r.value))
            # Nothing left to fold at this level: pay its closes, and pop
            # levels until one still has operands or the input is done.
            while len(pairs) == frame.base:
                paid = min(closes, frame.pending)
                closes -= paid
                frame = frame._replace(pending=frame.pending - paid)
                if frame.pending:
                    break
                if not frames:
                    if closes or tok.kind is not TokenKind.END:
                        # The outermost level is closed but input remains.
                        err = EvalError(text, tok.pos, "unbalanced ')'")
                        logger.debug("failed: %s", err)
                        raise err
                    logger.debug("%r = %r", text, r.value)
                    return r.value
                frame = frames.pop()
                logger.debug("leave to level %d", len(frames))
            else:
                l = pairs.pop()
                continue
            break
