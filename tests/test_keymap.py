"""Tests for binding tables and the key-sequence resolver."""

import pytest

from pueue_tui.action import Quit, Render, Tick
from pueue_tui.keymap import DEFAULT_KEYBINDINGS, KeySequenceResolver, Mode, build_keymaps
from pueue_tui.keys import KeyEvent, KeyModifiers, KeyParseError


def make_resolver(bindings: dict[str, object]) -> KeySequenceResolver:
    return KeySequenceResolver(build_keymaps({Mode.HOME: bindings}))


class TestBuildKeymaps:
    """Tests for binding table construction."""

    def test_default_bindings_quit(self):
        keymaps = build_keymaps(DEFAULT_KEYBINDINGS)
        home = keymaps[Mode.HOME]
        assert home[(KeyEvent("q"),)] == Quit()
        assert home[(KeyEvent("d", KeyModifiers.CONTROL),)] == Quit()

    def test_malformed_binding_fails_at_construction(self):
        with pytest.raises(KeyParseError):
            build_keymaps({Mode.HOME: {"<ctrl-nope>": Quit()}})


class TestKeySequenceResolver:
    """Tests for single and multi-key resolution."""

    def test_single_key_binding(self):
        resolver = make_resolver({"<q>": Quit()})
        assert resolver.resolve(KeyEvent("q")) == Quit()
        assert resolver.buffer == []

    def test_single_key_ignores_accumulated_buffer(self):
        """A single-key hit returns immediately without touching the buffer."""
        resolver = make_resolver({"<q>": Quit()})
        resolver.resolve(KeyEvent("x"))
        assert resolver.resolve(KeyEvent("q")) == Quit()
        assert resolver.buffer == [KeyEvent("x")]

    def test_two_key_sequence(self):
        resolver = make_resolver({"<g><g>": Render()})
        assert resolver.resolve(KeyEvent("g")) is None
        assert resolver.resolve(KeyEvent("g")) == Render()

    def test_mismatched_second_key_keeps_buffer(self):
        resolver = make_resolver({"<g><g>": Render()})
        resolver.resolve(KeyEvent("g"))
        assert resolver.resolve(KeyEvent("h")) is None
        assert resolver.buffer == [KeyEvent("g"), KeyEvent("h")]

    def test_buffer_grows_until_cleared(self):
        resolver = make_resolver({"<g><g>": Render()})
        resolver.resolve(KeyEvent("h"))
        resolver.resolve(KeyEvent("g"))
        # Buffer is [h, g, g], which is not bound.
        assert resolver.resolve(KeyEvent("g")) is None

        resolver.clear()
        resolver.resolve(KeyEvent("g"))
        assert resolver.resolve(KeyEvent("g")) == Render()

    def test_clear_empties_buffer(self):
        resolver = make_resolver({"<a><b>": Tick()})
        resolver.resolve(KeyEvent("a"))
        resolver.clear()
        assert resolver.buffer == []

    def test_missing_mode_table(self):
        resolver = KeySequenceResolver({})
        assert resolver.resolve(KeyEvent("q")) is None
        assert resolver.buffer == []
