"""JSON request/response envelope around the calculate and analyze commands.

Requests look like ``{"command": "calculate_dice", "expression": "2d6+3"}``.
Responses echo the command and carry either the result fields or the fields
of the parse error; a request that cannot be understood at all gets
``{"command": "message_parse_error"}``.
"""

import json
import logging
import random
import typing

import dndbot.roll_parser as roll_parser

logger = logging.getLogger(__name__)

MESSAGE_PARSE_ERROR = "message_parse_error"


def calculate_dice(
    expression: str, rng: typing.Optional[random.Random] = None
) -> typing.Dict[str, typing.Any]:
    try:
        return {"result": roll_parser.calculate(expression, rng)}
    except roll_parser.ParseError as e:
        return e.to_dict()


def analyze_dice(expression: str) -> typing.Dict[str, typing.Any]:
    try:
        graph = roll_parser.analyze(expression)
    except roll_parser.ParseError as e:
        return e.to_dict()
    return {
        "offset": graph.offset,
        "weights": graph.weights,
        "max_weight": graph.max_weight,
        "total_weight": graph.total_weight,
    }


COMMANDS: typing.Dict[str, typing.Callable[[str], typing.Dict[str, typing.Any]]] = {
    "calculate_dice": calculate_dice,
    "analyze_dice": analyze_dice,
}


def dispatch(message: str) -> str:
    try:
        request = json.loads(message)
        command = COMMANDS[request["command"]]
        expression = request["expression"]
        if not isinstance(expression, str):
            raise TypeError("expression must be a string, got %r" % (expression,))
    except (ValueError, KeyError, TypeError) as e:
        logger.warning("could not understand message %r: %s", message, e)
        return json.dumps({"command": MESSAGE_PARSE_ERROR})

    response = {"command": request["command"], **command(expression)}
    return json.dumps(response)
