import enum
import random
import typing

from dndbot.freq_graph import FreqGraph


_default_rng = random.SystemRandom()


class DiceRollError(ValueError):
    pass


class Op(enum.Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"

    @property
    def priority(self) -> int:
        return 2 if self is Op.MUL else 1

    def apply(self, lhs: "Expression", rhs: "Expression") -> "BiMathOp":
        return OPS_TO_EXPRESSIONS[self](lhs, rhs)

    def __repr__(self) -> str:
        return self.value


class Expression:
    priority = 3

    def roll(self, rng: typing.Optional[random.Random] = None) -> int:
        raise NotImplementedError

    def freq_graph(self) -> FreqGraph:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash((type(self), tuple(vars(self).values())))


class Number(Expression):
    def __init__(self, value: int) -> None:
        self.value = value

    def roll(self, rng: typing.Optional[random.Random] = None) -> int:
        return self.value

    def freq_graph(self) -> FreqGraph:
        return FreqGraph.point(self.value)

    def __repr__(self) -> str:
        return str(self.value)


class Die(Expression):
    # rolls/drop_lowest/drop_highest are stored but not yet evaluated.
    def __init__(
        self, faces: int, rolls: int = 1, drop_lowest: int = 0, drop_highest: int = 0
    ) -> None:
        self.faces = faces
        self.rolls = rolls
        self.drop_lowest = drop_lowest
        self.drop_highest = drop_highest

    def roll(self, rng: typing.Optional[random.Random] = None) -> int:
        rng = _default_rng if rng is None else rng
        return rng.randint(1, self.faces)

    def freq_graph(self) -> FreqGraph:
        return FreqGraph.uniform(self.faces)

    def __repr__(self) -> str:
        return "d%s" % self.faces


class BiMathOp(Expression):
    operator: Op

    def op(self, lhs: int, rhs: int) -> int:
        raise NotImplementedError

    def combine(self, lhs: FreqGraph, rhs: FreqGraph) -> FreqGraph:
        raise NotImplementedError

    def __init__(self, lhs: Expression, rhs: Expression):
        self.lhs = lhs
        self.rhs = rhs

    @property
    def priority(self) -> int:  # type: ignore[override]
        return self.operator.priority

    def roll(self, rng: typing.Optional[random.Random] = None) -> int:
        return self.op(self.lhs.roll(rng), self.rhs.roll(rng))

    def freq_graph(self) -> FreqGraph:
        return self.combine(self.lhs.freq_graph(), self.rhs.freq_graph())

    def __repr__(self):
        lhs = repr(self.lhs)
        if self.lhs.priority < self.priority:
            lhs = "(%s)" % lhs
        rhs = repr(self.rhs)
        if self.rhs.priority <= self.priority:
            rhs = "(%s)" % rhs
        return "%s %s %s" % (lhs, self.operator.value, rhs)


class Add(BiMathOp):
    operator = Op.ADD

    def op(self, lhs: int, rhs: int) -> int:
        return lhs + rhs

    def combine(self, lhs: FreqGraph, rhs: FreqGraph) -> FreqGraph:
        return lhs + rhs


class Sub(BiMathOp):
    operator = Op.SUB

    def op(self, lhs: int, rhs: int) -> int:
        return lhs - rhs

    def combine(self, lhs: FreqGraph, rhs: FreqGraph) -> FreqGraph:
        return lhs - rhs


class Mul(BiMathOp):
    """Multiplication, or a dice pool when the right operand is a bare die.

    ``2 * d6`` (and its implicit form ``2d6``) rolls two six-sided dice and
    sums them; it is not twice a single roll. The check is structural: only a
    ``Die`` leaf directly on the right triggers it, so ``2 * (d6)`` is a pool
    too while ``d6 * 2`` and ``2 * (d6 + 0)`` are plain products.
    """

    operator = Op.MUL

    def op(self, lhs: int, rhs: int) -> int:
        return lhs * rhs

    def combine(self, lhs: FreqGraph, rhs: FreqGraph) -> FreqGraph:
        return lhs * rhs

    @property
    def is_pool(self) -> bool:
        return isinstance(self.rhs, Die)

    def roll(self, rng: typing.Optional[random.Random] = None) -> int:
        if self.is_pool:
            return sum(self.rhs.roll(rng) for _ in range(self.lhs.roll(rng)))
        return super().roll(rng)

    def freq_graph(self) -> FreqGraph:
        if self.is_pool:
            return self.lhs.freq_graph().pool(self.rhs.freq_graph())
        return super().freq_graph()

    def __repr__(self):
        if self.is_pool and isinstance(self.lhs, Number):
            return "%s%s" % (self.lhs, self.rhs)
        return super().__repr__()


OPS_TO_EXPRESSIONS: typing.Dict[Op, typing.Type[BiMathOp]] = {
    Op.ADD: Add,
    Op.SUB: Sub,
    Op.MUL: Mul,
}
