import random

import pytest

from dndbot.freq_graph import FreqGraph
from dndbot.roll_parser import IllegalExpression, analyze, calculate

TWO_D6 = [1, 2, 3, 4, 5, 6, 5, 4, 3, 2, 1]


@pytest.mark.parametrize("n", [0, 7, 120])
def test_numbers_are_points(n):
    assert analyze(str(n)) == FreqGraph(n, [1])
    assert calculate(str(n)) == n


@pytest.mark.parametrize("faces", [1, 4, 20])
def test_die_is_uniform(faces):
    assert analyze("d%s" % faces) == FreqGraph(1, [1] * faces)


def test_2d6():
    graph = analyze("2d6")
    assert graph == FreqGraph(2, TWO_D6)
    assert graph.total_weight == 36


def test_modifier_shifts_offset():
    assert analyze("2d6 + 3") == FreqGraph(5, TWO_D6)


def test_arithmetic_on_constants():
    assert analyze("(2+3)*4") == FreqGraph(20, [1])


def test_product_with_die_on_the_left():
    assert analyze("d6*2") == FreqGraph(2, [1, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1])


@pytest.mark.parametrize(
    ("text", "total"),
    [
        ("3d6", 6**3),
        ("2d6 + 3d4", 6**2 * 4**3),
        ("d4d6", 6 + 6**2 + 6**3 + 6**4),
        ("(1+1)d6 * 2", 6**2),
    ],
)
def test_total_weight(text, total):
    assert analyze(text).total_weight == total


def test_subtraction_offsets_only():
    assert analyze("d20 - 3") == FreqGraph(-2, [1] * 20)
    assert analyze("-d4") == FreqGraph(-1, [1, 1, 1, 1])


@pytest.mark.parametrize(
    "text", ["2d6+3", "d4d6", "2(d8+1)", "d6*d6", "(d3+1)(d4)", "d6 * d6 + d2"]
)
def test_rolls_are_possible_outcomes(text):
    graph = analyze(text)
    weights = dict(graph.outcomes())
    rng = random.Random(7)
    for _ in range(200):
        assert weights.get(calculate(text, rng), 0) > 0


def test_analyze_rejects_bad_input():
    with pytest.raises(IllegalExpression) as exc:
        analyze("2d6 +")
    assert exc.value.index == 4
