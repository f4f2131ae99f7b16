import json

import pytest

from dndbot.dispatcher import analyze_dice, calculate_dice, dispatch


def test_calculate_dice():
    response = dispatch('{"command": "calculate_dice", "expression": "(2+3)*4"}')
    assert json.loads(response) == {"command": "calculate_dice", "result": 20}


def test_analyze_dice():
    response = dispatch('{"command": "analyze_dice", "expression": "2d6"}')
    assert json.loads(response) == {
        "command": "analyze_dice",
        "offset": 2,
        "weights": [1, 2, 3, 4, 5, 6, 5, 4, 3, 2, 1],
        "max_weight": 6,
        "total_weight": 36,
    }


def test_parse_errors_are_returned():
    response = dispatch('{"command": "calculate_dice", "expression": "d20 * 200%"}')
    assert json.loads(response) == {
        "command": "calculate_dice",
        "error": "unexpected_token",
        "index": 9,
        "token": "%",
    }
    assert analyze_dice("d0") == {"error": "bad_die", "index": 0}
    assert calculate_dice("()") == {"error": "empty_expression", "index": 0}


@pytest.mark.parametrize(
    "message",
    [
        "not json",
        "[]",
        '"calculate_dice"',
        '{"command": "roll_dice", "expression": "d6"}',
        '{"command": "analyze_dice"}',
        '{"command": "analyze_dice", "expression": 6}',
        '{"expression": "d6"}',
    ],
)
def test_malformed_messages(message):
    assert json.loads(dispatch(message)) == {"command": "message_parse_error"}


def _reject_constant(name):
    raise ValueError("non-finite number %s in response" % name)


def test_analyze_long_pool_is_strict_json():
    response = dispatch('{"command": "analyze_dice", "expression": "400d6"}')
    decoded = json.loads(response, parse_constant=_reject_constant)
    assert decoded["offset"] == 400
    assert decoded["total_weight"] == 6**400
    assert decoded["max_weight"] == max(decoded["weights"])
