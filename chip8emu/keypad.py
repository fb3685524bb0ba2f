import time

from chip8emu.config import KEY_COUNT
from chip8emu.debug import log


class Keypad:
    """The 16 key hex keypad (0x0-0xF).

    Key state is written by the input side and read by Ex9E/ExA1. Fx0A
    waits for a fresh key-down: ``arm()`` starts listening, the first
    press after it is held and handed out once by ``take_key_press()``.
    Presses while nobody is listening only change the key state.
    """

    def __init__(self):
        self.keys = [False] * KEY_COUNT
        self._armed = False
        self._pending = None

    def is_pressed(self, index):
        return self.keys[index & 0xF]

    def press(self, index):
        self.keys[index] = True
        if self._armed and self._pending is None:
            self._pending = index

    def release(self, index):
        self.keys[index] = False

    def arm(self):
        self._armed = True
        self._pending = None

    def take_key_press(self):
        pressed = self._pending
        if pressed is not None:
            self._armed = False
            self._pending = None
        return pressed

    def wait_for_key_press(self, drain, sleep=time.sleep, poll_interval=0.001):
        """Block until a key goes down and return its index.

        ``drain`` is called on every pass to pull pending input in; it
        raises QuitRequested if the user quits, which ends the wait.
        """
        if not self._armed:
            self.arm()
        log("Waiting for key press")
        while True:
            drain(self)
            pressed = self.take_key_press()
            if pressed is not None:
                log("Key pressed:", hex(pressed))
                return pressed
            sleep(poll_interval)
