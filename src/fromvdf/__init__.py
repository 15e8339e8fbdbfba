"""
fromvdf - VDF (Valve KeyValues) reader

A Python toolkit for turning KeyValues text (.vdf, .acf) into structured data.
"""

__version__ = "0.1.0"
__author__ = "fromvdf contributors"

from fromvdf.parser import parse, parse_file, parse_source, loads, VdfParseError
from fromvdf.tools.format import dumps
