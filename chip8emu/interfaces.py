"""
Capability interfaces between the machine and the outside world.

The engine never talks to a window. A DisplaySink receives finished
frames and an InputSource feeds key events into the keypad, so the
interpreter runs the same under pyglet and in a headless test.
"""

from chip8emu.errors import QuitRequested

KEY_DOWN = "down"
KEY_UP = "up"
QUIT = "quit"


class DisplaySink:

    def present(self, frame):
        """Show a 32x64 array of 0/1 pixels."""
        raise NotImplementedError


class InputSource:

    def drain(self, keypad):
        """Apply pending key events to ``keypad``; raise QuitRequested on quit."""
        raise NotImplementedError


class HeadlessDisplay(DisplaySink):
    """Keeps every presented frame instead of drawing it."""

    def __init__(self):
        self.frames = []

    def present(self, frame):
        self.frames.append(frame)


class ScriptedInput(InputSource):
    """Replays key events, one batch per ``drain()`` call.

    Each batch is a list of ``(KEY_DOWN, key)``, ``(KEY_UP, key)`` or
    ``(QUIT,)`` tuples. Once the script runs out drains are empty.
    """

    def __init__(self, batches=()):
        self.batches = [list(batch) for batch in batches]
        self.drains = 0

    def drain(self, keypad):
        self.drains += 1
        if not self.batches:
            return
        for event in self.batches.pop(0):
            kind = event[0]
            if kind == QUIT:
                raise QuitRequested()
            if kind == KEY_DOWN:
                keypad.press(event[1])
            elif kind == KEY_UP:
                keypad.release(event[1])
            else:
                raise ValueError("Unknown input event: %r" % (event,))
