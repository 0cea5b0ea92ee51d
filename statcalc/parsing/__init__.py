"""
Text parsers for numeric input.

Modules:
    numeric_text:
        Single delimited lists with US / European decimal detection.

    paired:
        Two aligned series, either as ``x, y`` rows or as two columns.
"""

from .numeric_text import detect_convention, parse_numeric_list
from .paired import detect_pairs_convention, parse_columns, parse_pairs

__all__ = [
    "detect_convention",
    "parse_numeric_list",
    "detect_pairs_convention",
    "parse_columns",
    "parse_pairs",
]
