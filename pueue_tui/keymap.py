"""Key binding tables and multi-key sequence resolution."""

import logging
from enum import Enum, auto
from typing import Mapping, Optional

from .action import Action, Quit
from .keys import KeyEvent, KeySequence, parse_key_sequence

logger = logging.getLogger(__name__)


class Mode(Enum):
    """Interaction context; each mode owns its own binding table."""
    HOME = auto()


Keymaps = dict[Mode, dict[KeySequence, Action]]

DEFAULT_KEYBINDINGS: dict[Mode, dict[str, Action]] = {
    Mode.HOME: {
        "<q>": Quit(),
        "<ctrl-d>": Quit(),
        "<ctrl-c>": Quit(),
    },
}


def build_keymaps(bindings: Mapping[Mode, Mapping[str, Action]]) -> Keymaps:
    """Parse textual bindings into lookup tables keyed by key sequence.

    Raises:
        KeyParseError: If any binding specification is malformed.
    """
    keymaps: Keymaps = {}
    for mode, table in bindings.items():
        keymaps[mode] = {
            parse_key_sequence(binding): action for binding, action in table.items()
        }
    return keymaps


class KeySequenceResolver:
    """Resolve key presses against the binding table of the current mode.

    A key bound on its own resolves immediately. Otherwise it is appended to
    a buffer and the whole buffer is looked up as a multi-key sequence. The
    buffer is only emptied by :meth:`clear`, which the app calls on every
    tick, so a sequence has to be completed within one tick interval.
    """

    def __init__(self, keymaps: Keymaps, mode: Mode = Mode.HOME):
        self.keymaps = keymaps
        self.mode = mode
        self.buffer: list[KeyEvent] = []

    def resolve(self, key: KeyEvent) -> Optional[Action]:
        """Feed one key press, returning the bound action if any."""
        keymap = self.keymaps.get(self.mode)
        if keymap is None:
            return None

        action = keymap.get((key,))
        if action is not None:
            return action

        self.buffer.append(key)
        action = keymap.get(tuple(self.buffer))
        if action is None:
            logger.debug("No binding for %s", " ".join(str(k) for k in self.buffer))
        return action

    def clear(self) -> None:
        """Forget all buffered key presses."""
        self.buffer.clear()
