"""
Machine Component Tests
=======================

Memory, registers, keypad, timers and quirk options on their own.
"""

import pytest

from chip8emu import FONTSET, Keypad, MemoryBank, Quirks, RegisterFile, TimerBank
from chip8emu.config import EDGE_OVERFLOW, FONT_START, MAX_PROGRAM_SIZE, RETURN_OBSERVED
from chip8emu.errors import QuitRequested, StackOverflowError, StackUnderflowError


# =============================================================================
# MemoryBank
# =============================================================================

class TestMemoryBank:

    def test_size_and_font(self):
        mem = MemoryBank()
        assert len(mem) == 4096
        assert mem.read(FONT_START, len(FONTSET)) == bytes(FONTSET)
        assert mem[0x000] == 0
        assert mem[0x200] == 0

    def test_read_word_is_big_endian(self):
        mem = MemoryBank()
        mem[0x300] = 0x12
        mem[0x301] = 0x34
        assert mem.read_word(0x300) == 0x1234

    def test_setitem_keeps_low_byte(self):
        mem = MemoryBank()
        mem[0x300] = 0x1FF
        assert mem[0x300] == 0xFF

    def test_load_program_at_0x200(self):
        mem = MemoryBank()
        assert mem.load_program(b"\xA2\x2A\x60\x0C") == 4
        assert mem.read(0x200, 4) == b"\xA2\x2A\x60\x0C"

    def test_largest_program_fits(self):
        mem = MemoryBank()
        mem.load_program(b"\x01" * MAX_PROGRAM_SIZE)
        assert len(mem) == 4096
        assert mem[0xFFF] == 1


# =============================================================================
# RegisterFile
# =============================================================================

class TestRegisterFile:

    def test_push_pop(self):
        regs = RegisterFile()
        regs.push(0x202)
        regs.push(0x404)
        assert regs.sp == 2
        assert regs.pop() == 0x404
        assert regs.pop() == 0x202
        assert regs.sp == 0

    def test_drop_keeps_frame(self):
        regs = RegisterFile()
        regs.push(0x202)
        regs.drop()
        assert regs.sp == 0
        assert regs.stack[0] == 0x202

    def test_overflow_at_sixteen(self):
        regs = RegisterFile()
        for addr in range(16):
            regs.push(addr)
        with pytest.raises(StackOverflowError):
            regs.push(0x200)
        assert regs.sp == 16

    def test_underflow(self):
        with pytest.raises(StackUnderflowError):
            RegisterFile().pop()

    def test_drop_wraps_like_a_byte(self):
        regs = RegisterFile()
        regs.drop()
        assert regs.sp == 0xFF
        with pytest.raises(StackOverflowError):
            regs.push(0x200)


# =============================================================================
# Keypad
# =============================================================================

class TestKeypad:

    def test_press_release(self):
        kp = Keypad()
        kp.press(0xA)
        assert kp.is_pressed(0xA)
        kp.release(0xA)
        assert not kp.is_pressed(0xA)

    def test_is_pressed_uses_low_nibble(self):
        kp = Keypad()
        kp.press(0x3)
        assert kp.is_pressed(0x13)

    def test_first_press_after_arm_is_taken_once(self):
        kp = Keypad()
        kp.arm()
        kp.press(2)
        kp.press(9)
        assert kp.take_key_press() == 2
        assert kp.take_key_press() is None

    def test_presses_without_arm_are_not_held(self):
        kp = Keypad()
        for _ in range(1000):
            kp.press(4)
            kp.release(4)
        assert kp.take_key_press() is None

    def test_take_disarms(self):
        kp = Keypad()
        kp.arm()
        kp.press(1)
        kp.take_key_press()
        kp.press(6)
        assert kp.take_key_press() is None

    def test_arm_forgets_earlier_presses(self):
        kp = Keypad()
        kp.press(2)
        kp.arm()
        assert kp.take_key_press() is None
        assert kp.is_pressed(2)

    def test_wait_for_key_press_blocks_until_key(self):
        kp = Keypad()
        calls = []

        def drain(keypad):
            calls.append(1)
            if len(calls) == 3:
                keypad.press(0xE)

        sleeps = []
        assert kp.wait_for_key_press(drain, sleeps.append) == 0xE
        assert len(calls) == 3
        assert len(sleeps) == 2

    def test_wait_for_key_press_can_be_cancelled(self):
        kp = Keypad()

        def drain(keypad):
            raise QuitRequested()

        with pytest.raises(QuitRequested):
            kp.wait_for_key_press(drain, lambda s: None)


# =============================================================================
# TimerBank
# =============================================================================

class TestTimerBank:

    @pytest.mark.parametrize("start,ticks", [(10, 3), (3, 3), (3, 10), (0, 5), (255, 255)])
    def test_tick_floors_at_zero(self, start, ticks):
        timers = TimerBank()
        timers.delay_timer = start
        timers.sound_timer = start
        for _ in range(ticks):
            timers.tick()
        assert timers.delay_timer == max(0, start - ticks)
        assert timers.sound_timer == max(0, start - ticks)

    def test_timers_are_independent(self):
        timers = TimerBank()
        timers.delay_timer = 5
        timers.sound_timer = 1
        timers.tick()
        assert timers.delay_timer == 4
        assert timers.sound_timer == 0
        assert not timers.sound_active


# =============================================================================
# Quirks
# =============================================================================

class TestQuirks:

    def test_defaults_reproduce_reference_engine(self):
        q = Quirks()
        assert q.return_mode == RETURN_OBSERVED
        assert q.sprite_edge == EDGE_OVERFLOW

    def test_rejects_unknown_return_mode(self):
        with pytest.raises(ValueError):
            Quirks(return_mode="sometimes")

    def test_rejects_unknown_edge_mode(self):
        with pytest.raises(ValueError):
            Quirks(sprite_edge="bounce")
