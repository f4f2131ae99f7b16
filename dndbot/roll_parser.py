import enum
import logging
import random
import typing

import dndbot.roll as roll
from dndbot.freq_graph import FreqGraph

logger = logging.getLogger(__name__)

DIGITS = "0123456789"
WHITESPACE = " \t\n"
OPENING = "([{"
CLOSING = ")]}"
OPERATORS = {op.value: op for op in roll.Op}


class ParseError(roll.DiceRollError):
    """Malformed input. ``index`` is the character position of the problem."""

    name = "parse_error"

    def __init__(self, index: int) -> None:
        super().__init__(self.describe(index))
        self.index = index

    def describe(self, index: int) -> str:
        return "%s at index %s" % (self.name.replace("_", " "), index)

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        return {"error": self.name, "index": self.index}

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, ParseError)
            and type(self) is type(other)
            and self.to_dict() == other.to_dict()
        )

    def __hash__(self) -> int:
        return hash((type(self), self.index))


class UnexpectedToken(ParseError):
    name = "unexpected_token"

    def __init__(self, index: int, character: str) -> None:
        self.character = character
        super().__init__(index)

    def describe(self, index: int) -> str:
        return "unexpected character %r at index %s" % (self.character, index)

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        return {**super().to_dict(), "token": self.character}


class BadDie(ParseError):
    name = "bad_die"

    def describe(self, index: int) -> str:
        return "die at index %s needs a positive number of faces" % index


class IllegalExpression(ParseError):
    name = "illegal_expression"


class UnmatchedParen(ParseError):
    name = "unmatched_paren"


class EmptyExpression(ParseError):
    name = "empty_expression"


class TokenKind(enum.Enum):
    NUMBER = "number"
    DIE = "die"
    OP = "op"
    OPEN = "open"
    CLOSE = "close"


VALUES = (TokenKind.NUMBER, TokenKind.DIE)


class Token(typing.NamedTuple):
    index: int
    kind: TokenKind
    value: typing.Any = None

    @property
    def ends_value(self) -> bool:
        return self.kind in VALUES or self.kind is TokenKind.CLOSE

    @property
    def starts_value(self) -> bool:
        return self.kind in VALUES or self.kind is TokenKind.OPEN

    def to_expression(self) -> roll.Expression:
        if self.kind is TokenKind.NUMBER:
            return roll.Number(self.value)
        elif self.kind is TokenKind.DIE:
            return roll.Die(self.value)
        raise AssertionError("%s is not a value token" % (self,))


def tokenize(text: str) -> typing.List[Token]:
    tokens: typing.List[Token] = []
    i = 0
    while i < len(text):
        c = text[i]
        start = i
        i += 1
        if c in DIGITS or c == "d":
            n = 0 if c == "d" else int(c)
            while i < len(text) and text[i] in DIGITS:
                n = n * 10 + int(text[i])
                i += 1
            if c != "d":
                tokens.append(Token(start, TokenKind.NUMBER, n))
            elif n > 0:
                tokens.append(Token(start, TokenKind.DIE, n))
            else:
                raise BadDie(start)
        elif c in WHITESPACE:
            continue
        elif c in OPERATORS:
            tokens.append(Token(start, TokenKind.OP, OPERATORS[c]))
        elif c in OPENING:
            tokens.append(Token(start, TokenKind.OPEN))
        elif c in CLOSING:
            tokens.append(Token(start, TokenKind.CLOSE))
        else:
            raise UnexpectedToken(start, c)
    return tokens


def check_parens(tokens: typing.Sequence[Token]) -> None:
    opened: typing.List[Token] = []
    for token in tokens:
        if token.kind is TokenKind.OPEN:
            opened.append(token)
        elif token.kind is TokenKind.CLOSE:
            if not opened:
                raise UnmatchedParen(token.index)
            opened.pop()
    if opened:
        raise UnmatchedParen(opened[-1].index)


def normalize(tokens: typing.Sequence[Token]) -> typing.List[Token]:
    """Validate a token stream and make every operator explicit.

    Groups stay inline. Adjacent values (``2d6``, ``2(3)``, ``(1)(2)``) get an
    implicit ``*`` between them, and a ``+``/``-`` that opens a group becomes
    ``0 +``/``0 -``. The result normalizes to itself.
    """
    check_parens(tokens)

    end = tokens[-1].index if tokens else 0
    left = Token(0, TokenKind.OPEN)
    normalized: typing.List[Token] = []
    for right in (*tokens, Token(end, TokenKind.CLOSE)):
        if left.ends_value:
            if right.starts_value:
                normalized.append(Token(right.index, TokenKind.OP, roll.Op.MUL))
        elif right.kind is TokenKind.CLOSE:
            if left.kind is TokenKind.OPEN:
                raise EmptyExpression(left.index)
            raise IllegalExpression(left.index)
        elif right.kind is TokenKind.OP:
            if left.kind is TokenKind.OP or right.value is roll.Op.MUL:
                raise IllegalExpression(right.index)
            normalized.append(Token(right.index, TokenKind.NUMBER, 0))
        normalized.append(right)
        left = right

    normalized.pop()
    return normalized


class ExpressionBuilder:
    """Builds an expression tree from a normalized token stream.

    Precedence climbing: after each operator, the builder looks past the next
    value for the following operator at the same nesting level. If that one
    binds tighter, the right-hand side is built from the tighter operators
    first; otherwise one value is folded into the left-hand side.
    """

    def __init__(self, tokens: typing.Sequence[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def build(self) -> roll.Expression:
        result = self.expression()
        assert self.pos == len(self.tokens), "trailing tokens after expression"
        return result

    def peek(self) -> typing.Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next_operator(self, floor: int) -> typing.Optional[roll.Op]:
        token = self.peek()
        if token is None or token.kind is not TokenKind.OP:
            return None
        if token.value.priority <= floor:
            return None
        self.pos += 1
        return token.value

    def operator_after_value(self) -> typing.Optional[roll.Op]:
        depth = 0
        for token in self.tokens[self.pos :]:
            if token.kind is TokenKind.OPEN:
                depth += 1
            elif token.kind is TokenKind.CLOSE:
                depth -= 1
                if depth < 0:
                    return None
            elif token.kind is TokenKind.OP and depth == 0:
                return token.value
        return None

    def value(self) -> roll.Expression:
        token = self.tokens[self.pos]
        self.pos += 1
        if token.kind is not TokenKind.OPEN:
            return token.to_expression()
        result = self.expression()
        self.pos += 1  # the matching close
        return result

    def expression(self, floor: int = 0) -> roll.Expression:
        lhs = self.value()
        while True:
            op = self.next_operator(floor)
            if op is None:
                return lhs
            following = self.operator_after_value()
            if following is not None and following.priority > op.priority:
                # Only operators tighter than op join the right-hand side, so
                # 1-2*3+4 is (1-(2*3))+4 rather than 1-((2*3)+4).
                rhs = self.expression(op.priority)
            else:
                rhs = self.value()
            lhs = op.apply(lhs, rhs)


def build(tokens: typing.Sequence[Token]) -> roll.Expression:
    return ExpressionBuilder(tokens).build()


def parse(text: str) -> roll.Expression:
    try:
        return build(normalize(tokenize(text)))
    except ParseError as e:
        logger.debug("could not parse %r: %s", text, e)
        raise


def calculate(text: str, rng: typing.Optional[random.Random] = None) -> int:
    return parse(text).roll(rng)


def analyze(text: str) -> FreqGraph:
    return parse(text).freq_graph()
