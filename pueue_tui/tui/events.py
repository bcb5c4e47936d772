"""Terminal events and the raw-mode input decoder.

The decoder turns the byte stream read from a raw-mode terminal into key,
mouse, paste and focus events. It understands CSI and SS3 sequences with
xterm modifier parameters, SGR mouse reports and bracketed paste.
"""

import codecs
from dataclasses import dataclass
from typing import Optional, Union

from ..keys import KeyCode, KeyEvent, KeyModifiers


@dataclass(frozen=True)
class Quit:
    """Input stream ended or failed."""


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Render:
    pass


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Key:
    key: KeyEvent


@dataclass(frozen=True)
class Mouse:
    kind: str  # down, up, drag, moved, scroll_up, scroll_down
    button: Optional[str]
    column: int
    row: int
    modifiers: KeyModifiers = KeyModifiers.NONE


@dataclass(frozen=True)
class Paste:
    text: str


@dataclass(frozen=True)
class FocusGained:
    pass


@dataclass(frozen=True)
class FocusLost:
    pass


Event = Union[Quit, Tick, Render, Resize, Key, Mouse, Paste, FocusGained, FocusLost]

ESC = "\x1b"
PASTE_START = "\x1b[200~"
PASTE_END = "\x1b[201~"

_CSI_LETTER_KEYS = {
    "A": KeyCode.UP,
    "B": KeyCode.DOWN,
    "C": KeyCode.RIGHT,
    "D": KeyCode.LEFT,
    "H": KeyCode.HOME,
    "F": KeyCode.END,
    "P": KeyCode.F1,
    "Q": KeyCode.F2,
    "R": KeyCode.F3,
    "S": KeyCode.F4,
}

_CSI_TILDE_KEYS = {
    1: KeyCode.HOME,
    2: KeyCode.INSERT,
    3: KeyCode.DELETE,
    4: KeyCode.END,
    5: KeyCode.PAGE_UP,
    6: KeyCode.PAGE_DOWN,
    7: KeyCode.HOME,
    8: KeyCode.END,
    11: KeyCode.F1,
    12: KeyCode.F2,
    13: KeyCode.F3,
    14: KeyCode.F4,
    15: KeyCode.F5,
    17: KeyCode.F6,
    18: KeyCode.F7,
    19: KeyCode.F8,
    20: KeyCode.F9,
    21: KeyCode.F10,
    23: KeyCode.F11,
    24: KeyCode.F12,
}

_MOUSE_BUTTONS = {0: "left", 1: "middle", 2: "right"}


def _modifiers_from_param(value: int) -> KeyModifiers:
    """Decode an xterm modifier parameter (1 + bitmask)."""
    bits = max(0, value - 1)
    modifiers = KeyModifiers.NONE
    if bits & 1:
        modifiers |= KeyModifiers.SHIFT
    if bits & 2:
        modifiers |= KeyModifiers.ALT
    if bits & 4:
        modifiers |= KeyModifiers.CONTROL
    return modifiers


def _char_key(ch: str, modifiers: KeyModifiers = KeyModifiers.NONE) -> KeyEvent:
    """Key event for a single character, including control characters."""
    if ch in ("\r", "\n"):
        return KeyEvent(KeyCode.ENTER, modifiers)
    if ch == "\t":
        return KeyEvent(KeyCode.TAB, modifiers)
    if ch in ("\x7f", "\x08"):
        return KeyEvent(KeyCode.BACKSPACE, modifiers)
    if ch == "\x00":
        return KeyEvent(" ", modifiers | KeyModifiers.CONTROL)
    code = ord(ch)
    if 1 <= code <= 26:
        return KeyEvent(chr(ord("a") + code - 1), modifiers | KeyModifiers.CONTROL)
    if 28 <= code <= 31:
        return KeyEvent(chr(ord("4") + code - 28), modifiers | KeyModifiers.CONTROL)
    if ch.isalpha() and ch.isupper():
        modifiers |= KeyModifiers.SHIFT
    return KeyEvent(ch, modifiers)


class InputDecoder:
    """Incremental decoder from raw terminal bytes to events.

    Incomplete escape sequences are kept until more input arrives. A lone
    ``ESC`` is ambiguous until the reader sees no follow-up bytes, so the
    caller invokes :meth:`flush` when a read times out.
    """

    def __init__(self) -> None:
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""
        self._paste: Optional[list[str]] = None

    def feed(self, data: bytes) -> list[Event]:
        """Decode a chunk of input and return every complete event in it."""
        self._pending += self._utf8.decode(data)
        events: list[Event] = []
        while self._pending:
            consumed = self._decode_one(self._pending, events)
            if consumed == 0:
                break
            self._pending = self._pending[consumed:]
        return events

    def flush(self) -> list[Event]:
        """Resolve buffered input that can no longer be extended."""
        if self._paste is not None:
            return []
        events: list[Event] = []
        if self._pending == ESC:
            events.append(Key(KeyEvent(KeyCode.ESC)))
        self._pending = ""
        return events

    # =========================================================================
    # Decoding
    # =========================================================================

    def _decode_one(self, text: str, events: list[Event]) -> int:
        """Decode one event from the head of ``text``.

        Returns the number of characters consumed, or 0 if more input is
        needed.
        """
        if self._paste is not None:
            end = text.find(PASTE_END)
            if end == -1:
                # Keep a possible partial terminator for the next chunk.
                keep = len(PASTE_END) - 1
                self._paste.append(text[:-keep] if len(text) > keep else "")
                return max(0, len(text) - keep)
            self._paste.append(text[:end])
            events.append(Paste("".join(self._paste)))
            self._paste = None
            return end + len(PASTE_END)

        ch = text[0]
        if ch != ESC:
            events.append(Key(_char_key(ch)))
            return 1

        if len(text) == 1:
            return 0

        second = text[1]
        if second == "[":
            return self._decode_csi(text, events)
        if second == "O":
            if len(text) < 3:
                return 0
            key = _CSI_LETTER_KEYS.get(text[2])
            if key is not None:
                events.append(Key(KeyEvent(key)))
            return 3
        if second == ESC:
            events.append(Key(KeyEvent(KeyCode.ESC)))
            return 1

        events.append(Key(_char_key(second, KeyModifiers.ALT)))
        return 2

    def _decode_csi(self, text: str, events: list[Event]) -> int:
        end = 2
        while end < len(text) and not ("\x40" <= text[end] <= "\x7e"):
            end += 1
        if end >= len(text):
            return 0

        params = text[2:end]
        final = text[end]
        consumed = end + 1

        if params.startswith("<") and final in ("M", "m"):
            mouse = self._decode_sgr_mouse(params[1:], final)
            if mouse is not None:
                events.append(mouse)
            return consumed

        if final == "~" and params == "200":
            self._paste = []
            return consumed

        if not params and final == "I":
            events.append(FocusGained())
            return consumed
        if not params and final == "O":
            events.append(FocusLost())
            return consumed
        if final == "Z":
            events.append(Key(KeyEvent(KeyCode.BACK_TAB, KeyModifiers.SHIFT)))
            return consumed

        try:
            numbers = [int(p) if p else 1 for p in params.split(";")] if params else []
        except ValueError:
            return consumed
        modifiers = _modifiers_from_param(numbers[1]) if len(numbers) > 1 else KeyModifiers.NONE

        if final == "~":
            key = _CSI_TILDE_KEYS.get(numbers[0] if numbers else 0)
        else:
            key = _CSI_LETTER_KEYS.get(final)
        if key is not None:
            events.append(Key(KeyEvent(key, modifiers)))
        return consumed

    @staticmethod
    def _decode_sgr_mouse(params: str, final: str) -> Optional[Mouse]:
        try:
            code, column, row = (int(p) for p in params.split(";"))
        except ValueError:
            return None

        modifiers = KeyModifiers.NONE
        if code & 4:
            modifiers |= KeyModifiers.SHIFT
        if code & 8:
            modifiers |= KeyModifiers.ALT
        if code & 16:
            modifiers |= KeyModifiers.CONTROL

        button = _MOUSE_BUTTONS.get(code & 3)
        if code & 64:
            kind = "scroll_down" if code & 1 else "scroll_up"
            button = None
        elif code & 32:
            kind = "drag" if button else "moved"
        else:
            kind = "down" if final == "M" else "up"

        return Mouse(kind=kind, button=button, column=column - 1, row=row - 1, modifiers=modifiers)
