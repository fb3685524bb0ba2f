import time

from chip8emu.config import CYCLE_DELAY, TIMER_INTERVAL


class ControlLoop:
    """The single control loop that drives an Engine.

    Every iteration: tick the timers if a timer interval of wall-clock
    time has passed, drain input into the keypad, run one opcode, hand a
    frame to the sink if the opcode drew, then sleep CYCLE_DELAY. That
    pins throughput at roughly 60 instructions a second.
    """

    def __init__(self, engine, sink, source, clock=time.monotonic, sleep=time.sleep,
                 cycle_delay=CYCLE_DELAY, timer_interval=TIMER_INTERVAL):
        self.engine = engine
        self.sink = sink
        self.source = source
        self.clock = clock
        self.sleep = sleep
        self.cycle_delay = cycle_delay
        self.timer_interval = timer_interval
        self.last_tick = clock()
        self.frames = 0

    def _drain(self, keypad):
        self.source.drain(keypad)

    def service_timers(self):
        now = self.clock()
        if now - self.last_tick >= self.timer_interval:
            self.engine.timers.tick()
            self.last_tick = now
            return True
        return False

    def iterate(self):
        """Run one iteration without sleeping. Returns the frame drawn, if any."""
        # timers hold still while Fx0A is waiting
        if self.engine.waiting_for_key is None:
            self.service_timers()
        self._drain(self.engine.keypad)
        frame = self.engine.step()
        if frame is not None:
            self.sink.present(frame)
            self.frames += 1
        return frame

    def run(self, max_iterations=None):
        """Loop until an exception stops it (or ``max_iterations`` is reached).

        While the engine waits for a key this blocks inside the keypad,
        still draining input so a quit gets through.
        """
        count = 0
        while max_iterations is None or count < max_iterations:
            if self.engine.waiting_for_key is not None:
                pressed = self.engine.keypad.wait_for_key_press(self._drain, self.sleep)
                self.engine.deliver_key(pressed)
            else:
                self.iterate()
            count += 1
            self.sleep(self.cycle_delay)
        return count
