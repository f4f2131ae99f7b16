from dndbot.roll_parser import ParseError, analyze, calculate, parse

__all__ = ["ParseError", "analyze", "calculate", "parse"]
