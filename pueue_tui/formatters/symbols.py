"""Symbols with emoji/ASCII fallbacks for messages printed outside the dashboard."""

import platform
import sys
from dataclasses import dataclass
from functools import cached_property


@dataclass(frozen=True)
class Symbol:
    """A symbol with emoji and ASCII fallback."""

    emoji: str
    ascii: str


class Symbols:
    """Symbol definitions as class attributes."""

    Cross = Symbol("❌", "x")
    Warning = Symbol("⚠️", "!")


class SymbolsFormatter:
    """Resolves symbols to emoji or ASCII depending on terminal support.

    Emoji is disabled when no_color=True or when stdout cannot encode it.
    """

    def __init__(self, no_color: bool = False):
        self._no_color = no_color

    @cached_property
    def supports_emoji(self) -> bool:
        """Detect if terminal supports emoji display."""
        if self._no_color:
            return False

        if platform.system() == "Windows":
            return False

        if not hasattr(sys.stdout, 'encoding') or sys.stdout.encoding is None:
            return False

        encoding = sys.stdout.encoding.lower()
        return any(enc in encoding for enc in ('utf-8', 'utf8', 'utf-16', 'utf16'))

    def get(self, symbol: Symbol) -> str:
        return symbol.emoji if self.supports_emoji else symbol.ascii

    @property
    def Cross(self) -> str:
        return self.get(Symbols.Cross)

    @property
    def Warning(self) -> str:
        return self.get(Symbols.Warning)
