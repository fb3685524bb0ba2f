"""
Control Loop Tests
==================

Timer cadence, input draining, frame presentation, wait-for-key
suspension and quit handling, driven by a fake clock.
"""

import pytest

from chip8emu import ControlLoop, HeadlessDisplay, ScriptedInput
from chip8emu.config import CYCLE_DELAY
from chip8emu.errors import QuitRequested
from chip8emu.interfaces import KEY_DOWN, KEY_UP, QUIT


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_loop(engine, clock, sleeps):
    def make(batches=()):
        return ControlLoop(engine, HeadlessDisplay(), ScriptedInput(batches),
                           clock=clock, sleep=sleeps.append)
    return make


class TestTimerCadence:

    def test_ticks_once_per_elapsed_interval(self, engine, program, clock, make_loop):
        program(engine, 0x1200)
        engine.timers.delay_timer = 10
        loop = make_loop()

        clock.now = 0.010
        loop.iterate()
        assert engine.timers.delay_timer == 10

        clock.now = 0.016
        loop.iterate()
        assert engine.timers.delay_timer == 9

        clock.now = 0.020
        loop.iterate()
        assert engine.timers.delay_timer == 9

        # a long gap still only ticks once
        clock.now = 0.100
        loop.iterate()
        assert engine.timers.delay_timer == 8

    def test_ticks_independent_of_instruction_count(self, engine, program, clock, make_loop):
        program(engine, 0x1200)
        engine.timers.sound_timer = 3
        loop = make_loop()
        for _ in range(50):
            loop.iterate()
        assert engine.timers.sound_timer == 3
        assert engine.cycle_count == 50


class TestIteration:

    def test_draw_is_presented(self, engine, program, make_loop):
        program(engine, 0x6000, 0xF029, 0xD005)
        loop = make_loop()
        assert loop.iterate() is None
        assert loop.iterate() is None
        frame = loop.iterate()
        assert frame is not None
        assert loop.sink.frames == [frame]
        assert loop.frames == 1

    def test_clear_is_not_presented(self, engine, program, make_loop):
        program(engine, 0x00E0)
        loop = make_loop()
        loop.iterate()
        assert loop.sink.frames == []

    def test_input_drained_before_step(self, engine, program, make_loop):
        program(engine, 0x6107, 0xE19E)
        loop = make_loop([[(KEY_DOWN, 7)]])
        loop.iterate()
        loop.iterate()
        assert engine.registers.pc == 0x206

    def test_key_release(self, engine, program, make_loop):
        program(engine, 0x6107, 0xE19E)
        loop = make_loop([[(KEY_DOWN, 7)], [(KEY_UP, 7)]])
        loop.iterate()
        loop.iterate()
        assert engine.registers.pc == 0x204

    def test_key_traffic_without_wait_is_not_queued(self, engine, program, make_loop):
        program(engine, 0x1200)
        loop = make_loop([[(KEY_DOWN, 3), (KEY_UP, 3)]] * 1000)
        for _ in range(1000):
            loop.iterate()
        assert engine.keypad.take_key_press() is None
        assert not engine.keypad.is_pressed(3)

    def test_quit_stops_before_step(self, engine, program, make_loop):
        program(engine, 0x6001)
        loop = make_loop([[(QUIT,)]])
        with pytest.raises(QuitRequested):
            loop.iterate()
        assert engine.cycle_count == 0
        assert engine.registers.V[0] == 0


class TestWaitForKey:

    def test_timers_hold_while_waiting(self, engine, program, clock, make_loop):
        program(engine, 0xF30A, 0x1202)
        engine.timers.delay_timer = 5
        loop = make_loop([[], [], [(KEY_DOWN, 4)]])

        loop.iterate()
        assert engine.waiting_for_key == 3

        clock.now = 1.0
        loop.iterate()
        assert engine.timers.delay_timer == 5

        loop.iterate()
        assert engine.waiting_for_key is None
        assert engine.registers.V[3] == 4
        assert engine.timers.delay_timer == 5

        loop.iterate()
        assert engine.timers.delay_timer == 4

    def test_run_blocks_in_keypad(self, engine, program, make_loop, sleeps):
        program(engine, 0xF50A, 0x1202)
        loop = make_loop([[], [], [(KEY_DOWN, 0xB)]])
        assert loop.run(max_iterations=3) == 3
        assert engine.registers.V[5] == 0xB
        assert engine.registers.pc == 0x202
        assert sleeps.count(CYCLE_DELAY) == 3
        assert len(sleeps) == 4

    def test_quit_while_blocked(self, engine, program, make_loop):
        program(engine, 0xF50A)
        loop = make_loop([[], [(QUIT,)]])
        with pytest.raises(QuitRequested):
            loop.run()
        assert engine.waiting_for_key == 5
        assert engine.registers.V[5] == 0


class TestScriptedInput:

    def test_unknown_event_rejected(self, engine):
        source = ScriptedInput([[("wiggle", 1)]])
        with pytest.raises(ValueError):
            source.drain(engine.keypad)

    def test_counts_drains(self, engine):
        source = ScriptedInput()
        source.drain(engine.keypad)
        source.drain(engine.keypad)
        assert source.drains == 2
