"""
fromvdf.tools - Utilities built on the parser.
"""

from fromvdf.tools.format import VdfFormatter, FormatOptions, dumps, format_file, check_formatted

__all__ = [
    "VdfFormatter",
    "FormatOptions",
    "dumps",
    "format_file",
    "check_formatted",
]
