"""Formatters for console output outside the interactive dashboard."""

from .output import OutputFormatter
from .symbols import Symbols, SymbolsFormatter

__all__ = [
    "OutputFormatter",
    "Symbols",
    "SymbolsFormatter",
]
