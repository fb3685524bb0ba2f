# We're subclassing pyglet (it handles the window, the graphics and the keyboard)
# and overriding whatever def we need from there. The machine itself only sees the
# window through the DisplaySink / InputSource interfaces.

import sys

import numpy as np
import pyglet
from pyglet.window import key

from chip8emu.config import (
    CYCLE_DELAY,
    background,
    foreground,
    height,
    scale,
    width,
    window_height,
    window_width,
)
from chip8emu.debug import log, toggle_logs
from chip8emu.errors import Chip8Error, DisplayInitError, QuitRequested
from chip8emu.interfaces import KEY_DOWN, KEY_UP, DisplaySink, InputSource
from chip8emu.loop import ControlLoop

#map binding keys
keymap = {
    key.X: 0x0, key._1: 0x1, key._2: 0x2, key._3: 0x3,
    key.Q: 0x4, key.W: 0x5, key.E: 0x6, key.A: 0x7,
    key.S: 0x8, key.D: 0x9, key.Z: 0xA, key.C: 0xB,
    key._4: 0xC, key.R: 0xD, key.F: 0xE, key.V: 0xF,
}

FG = np.array(foreground, dtype=np.uint8)
BG = np.array(background, dtype=np.uint8)


class Chip8Window(pyglet.window.Window, DisplaySink, InputSource):

    def __init__(self, engine):
        try:
            super().__init__(
                width=window_width,
                height=window_height,
                caption="CHIP-8 Emulator",
                vsync=False
            )
        except Exception as e:
            raise DisplayInitError("Window could not be created: %s" % e) from e

        self.engine = engine
        self.loop = ControlLoop(engine, self, self)
        self.exit_status = 0
        self._pending = []
        self._quit = False

        # Pre-allocated small framebuffer (64x32 RGBA), upscaled with numpy.repeat
        self._small_framebuf = np.zeros((height, width, 4), dtype=np.uint8)
        self._small_framebuf[...] = BG
        self.image = pyglet.image.ImageData(
            window_width,
            window_height,
            'RGBA',
            self._upscale().tobytes()
        )

        # Performance tracking counters
        self._last_frames = 0
        self._last_cycles = 0
        self._bench_time = pyglet.clock.get_default().time()
        self.fps_label = pyglet.text.Label(
            "FPS: 0",
            font_size=12,
            x=5,
            y=window_height - 15,
            anchor_x='left',
            anchor_y='center',
            color=(255, 255, 255, 255)
        )
        self.cps_label = pyglet.text.Label(
            "Cycles/s: 0",
            font_size=12,
            x=5,
            y=window_height - 30,
            anchor_x='left',
            anchor_y='center',
            color=(255, 255, 255, 255)
        )
        self.show_hud = False

        # Schedule the loops
        pyglet.clock.schedule_interval(self._cpu_tick, CYCLE_DELAY)
        pyglet.clock.schedule_interval(self._update_bench, 1.0)

    # ---- DisplaySink ----
    def present(self, frame):
        # pyglet's origin is bottom-left, CHIP-8 row 0 is the top
        pixels = np.flipud(frame)[..., np.newaxis]
        self._small_framebuf[...] = np.where(pixels == 1, FG, BG)
        self.image.set_data('RGBA', window_width * 4, self._upscale().tobytes())

    def _upscale(self):
        if scale != 1:
            return np.repeat(np.repeat(self._small_framebuf, scale, axis=0), scale, axis=1)
        return self._small_framebuf

    # ---- InputSource ----
    def drain(self, keypad):
        pending, self._pending = self._pending, []
        for kind, index in pending:
            if kind == KEY_DOWN:
                keypad.press(index)
            else:
                keypad.release(index)
        if self._quit:
            raise QuitRequested()

    def on_key_press(self, symbol, modifiers):
        #@Override
        if symbol == key.ESCAPE:
            self._quit = True
        elif symbol == key.F1:
            toggle_logs()
        elif symbol == key.F2:
            self.show_hud = not self.show_hud
        elif symbol in keymap:
            self._pending.append((KEY_DOWN, keymap[symbol]))

    def on_key_release(self, symbol, modifiers):
        #@Override
        if symbol in keymap:
            self._pending.append((KEY_UP, keymap[symbol]))

    def on_close(self):
        #@Override
        self._quit = True

    # ---- CPU cycle ----
    def _cpu_tick(self, dt):
        try:
            self.loop.iterate()
        except QuitRequested:
            log("Quit requested")
            self._shutdown(0)
        except Chip8Error as e:
            print("Emulation error:", e, file=sys.stderr)
            self._shutdown(1)

    def _shutdown(self, status):
        self.exit_status = status
        pyglet.clock.unschedule(self._cpu_tick)
        pyglet.clock.unschedule(self._update_bench)
        self.close()
        pyglet.app.exit()

    # ---- FPS / CPS ----
    def _update_bench(self, dt):
        now = pyglet.clock.get_default().time()
        elapsed = now - self._bench_time
        if elapsed <= 0:
            return
        frames = self.loop.frames - self._last_frames
        cycles = self.engine.cycle_count - self._last_cycles
        self.fps_label.text = f"FPS: {frames / elapsed:.1f}"
        self.cps_label.text = f"Cycles/s: {cycles / elapsed:.0f}"
        self._last_frames = self.loop.frames
        self._last_cycles = self.engine.cycle_count
        self._bench_time = now

    # ---- Drawing ----
    def on_draw(self):
        self.clear()
        self.image.blit(0, 0)
        if self.show_hud:
            self.fps_label.draw()
            self.cps_label.draw()


def run(engine):
    """Open the window, run until quit or a fatal error, return the exit status."""
    window = Chip8Window(engine)
    pyglet.app.run()
    return window.exit_status
