import typing


class FreqGraph:
    """An unnormalized distribution over a contiguous range of integers.

    ``weights[i]`` is the relative frequency of the outcome ``offset + i``.
    Weights are exact integers and are not required to sum to one; divide by
    ``total_weight`` to get probabilities. There is always at least one
    weight.
    """

    def __init__(self, offset: int, weights: typing.Iterable[int]) -> None:
        self.offset = offset
        self.weights = list(weights)
        if not self.weights:
            raise ValueError("a FreqGraph needs at least one weight")

    @classmethod
    def point(cls, value: int, weight: int = 1) -> "FreqGraph":
        return cls(value, [weight])

    @classmethod
    def uniform(cls, faces: int) -> "FreqGraph":
        return cls(1, [1] * faces)

    def __len__(self) -> int:
        return len(self.weights)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FreqGraph):
            return NotImplemented
        return self.offset == other.offset and self.weights == other.weights

    def __repr__(self) -> str:
        return "FreqGraph(offset=%s, weights=%s)" % (self.offset, self.weights)

    @property
    def minimum(self) -> int:
        return self.offset

    @property
    def maximum(self) -> int:
        return self.offset + len(self.weights) - 1

    @property
    def total_weight(self) -> int:
        return sum(self.weights)

    @property
    def max_weight(self) -> int:
        return max(self.weights)

    def outcomes(self) -> typing.Iterator[typing.Tuple[int, int]]:
        for i, weight in enumerate(self.weights):
            yield self.offset + i, weight

    def probabilities(self) -> typing.Dict[int, float]:
        total = self.total_weight
        return {value: weight / total for value, weight in self.outcomes()}

    def _convolve(self, other: "FreqGraph") -> typing.List[int]:
        result = [0] * (len(self.weights) + len(other.weights) - 1)
        for i, w1 in enumerate(self.weights):
            if not w1:
                continue
            for j, w2 in enumerate(other.weights):
                result[i + j] += w1 * w2
        return result

    def __add__(self, other: "FreqGraph") -> "FreqGraph":
        return FreqGraph(self.offset + other.offset, self._convolve(other))

    def __sub__(self, other: "FreqGraph") -> "FreqGraph":
        # Known defect kept for compatibility: the weights are those of the
        # sum, only the offset is subtracted. A true difference would convolve
        # with other's weights reversed and offset by other.maximum.
        return FreqGraph(self.offset - other.offset, self._convolve(other))

    def __mul__(self, other: "FreqGraph") -> "FreqGraph":
        # Products are not monotonic in the index once an offset is negative,
        # so the bucket range comes from the real extremes, not the corners
        # of the index grid in order.
        products = [
            (v1 * v2, w1 * w2)
            for v1, w1 in self.outcomes()
            for v2, w2 in other.outcomes()
        ]
        low = min(value for value, _ in products)
        high = max(value for value, _ in products)
        result = [0] * (high - low + 1)
        for value, weight in products:
            result[value - low] += weight
        return FreqGraph(low, result)

    def scaled(self, factor: int) -> "FreqGraph":
        return FreqGraph(self.offset, (w * factor for w in self.weights))

    def merged(self, other: "FreqGraph") -> "FreqGraph":
        """Pointwise sum of two graphs over the union of their ranges."""
        low = min(self.minimum, other.minimum)
        high = max(self.maximum, other.maximum)
        result = [0] * (high - low + 1)
        for graph in (self, other):
            for value, weight in graph.outcomes():
                result[value - low] += weight
        return FreqGraph(low, result)

    def pool(self, die: "FreqGraph") -> "FreqGraph":
        """Sum of N independent draws of ``die``, N distributed like self.

        Counts of zero or less contribute the point mass at 0.
        """
        result: typing.Optional[FreqGraph] = None
        rolled = FreqGraph.point(0)
        count = 0
        for value, weight in self.outcomes():
            if not weight:
                continue
            while count < value:
                rolled = rolled + die
                count += 1
            part = rolled.scaled(weight)
            result = part if result is None else result.merged(part)
        assert result is not None
        return result
