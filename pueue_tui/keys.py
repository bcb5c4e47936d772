"""Key descriptors and the textual chord grammar used for key bindings.

A binding is written as one or more angle-bracket segments, for example
``<q>``, ``<ctrl-d>`` or ``<g><g>``. Each segment is an optional run of
modifier prefixes (``ctrl-``, ``alt-``, ``shift-``) followed by a key name.
"""

from dataclasses import dataclass
from enum import Enum, Flag, auto
from typing import Union


class KeyParseError(ValueError):
    """Raised when a key or key sequence specification cannot be parsed."""


class KeyCode(Enum):
    """Named (non-character) keys."""
    BACKSPACE = "backspace"
    ENTER = "enter"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    PAGE_UP = "pageup"
    PAGE_DOWN = "pagedown"
    TAB = "tab"
    BACK_TAB = "backtab"
    DELETE = "delete"
    INSERT = "insert"
    ESC = "esc"
    F1 = "f1"
    F2 = "f2"
    F3 = "f3"
    F4 = "f4"
    F5 = "f5"
    F6 = "f6"
    F7 = "f7"
    F8 = "f8"
    F9 = "f9"
    F10 = "f10"
    F11 = "f11"
    F12 = "f12"


class KeyModifiers(Flag):
    """Modifier set of a key press."""
    NONE = 0
    SHIFT = auto()
    CONTROL = auto()
    ALT = auto()


Code = Union[KeyCode, str]


@dataclass(frozen=True)
class KeyEvent:
    """A single normalized key press.

    ``code`` is either a :class:`KeyCode` or a one-character string.
    """
    code: Code
    modifiers: KeyModifiers = KeyModifiers.NONE

    def __str__(self) -> str:
        return key_event_to_string(self)


KeySequence = tuple[KeyEvent, ...]

_MODIFIER_PREFIXES = (
    ("ctrl-", KeyModifiers.CONTROL),
    ("alt-", KeyModifiers.ALT),
    ("shift-", KeyModifiers.SHIFT),
)

_NAMED_KEYS: dict[str, Code] = {code.value: code for code in KeyCode}
_NAMED_KEYS.update({
    "space": " ",
    "hyphen": "-",
    "minus": "-",
})


def _extract_modifiers(raw: str) -> tuple[str, KeyModifiers]:
    """Strip leading modifier prefixes, returning the remainder and the set."""
    modifiers = KeyModifiers.NONE
    current = raw
    while True:
        for prefix, modifier in _MODIFIER_PREFIXES:
            if current.startswith(prefix):
                modifiers |= modifier
                current = current[len(prefix):]
                break
        else:
            return current, modifiers


def parse_key_event(raw: str) -> KeyEvent:
    """Parse a single key specification such as ``ctrl-d`` or ``shift-x``.

    Raises:
        KeyParseError: If the key name is not recognized.
    """
    remaining, modifiers = _extract_modifiers(raw.lower())

    code = _NAMED_KEYS.get(remaining)
    if code is KeyCode.BACK_TAB:
        modifiers |= KeyModifiers.SHIFT
    elif code is None:
        if len(remaining) != 1:
            raise KeyParseError(f"Unable to parse {raw}")
        code = remaining.upper() if KeyModifiers.SHIFT in modifiers else remaining

    return KeyEvent(code, modifiers)


def parse_key_sequence(raw: str) -> KeySequence:
    """Parse a chord specification into a sequence of key events.

    Accepts ``<ctrl-d>``, ``q`` and chained forms like ``<g><g>``.

    Raises:
        KeyParseError: On unbalanced brackets or an unknown key name.
    """
    if raw.count("<") != raw.count(">"):
        raise KeyParseError(f"Unable to parse `{raw}`")

    if "><" not in raw:
        raw = raw.removeprefix("<").removesuffix(">")
        segments = [raw]
    else:
        segments = []
        for segment in raw.split("><"):
            if segment.startswith("<"):
                segment = segment[1:]
            elif segment.endswith(">"):
                segment = segment[:-1]
            segments.append(segment)

    return tuple(parse_key_event(segment) for segment in segments)


def key_event_to_string(key_event: KeyEvent) -> str:
    """Render a key event back into the ``ctrl-shift-alt-key`` form."""
    code = key_event.code
    if isinstance(code, KeyCode):
        key_code = code.value
    elif code == " ":
        key_code = "space"
    else:
        key_code = code

    modifiers = []
    if KeyModifiers.CONTROL in key_event.modifiers:
        modifiers.append("ctrl")
    if KeyModifiers.SHIFT in key_event.modifiers:
        modifiers.append("shift")
    if KeyModifiers.ALT in key_event.modifiers:
        modifiers.append("alt")

    return "-".join(modifiers + [key_code])
