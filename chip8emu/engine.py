import random

from chip8emu.config import FONT_START, RETURN_STRICT, Quirks
from chip8emu.debug import log
from chip8emu.display import Display
from chip8emu.errors import MachineHalted, MemoryFault, UnknownOpcodeError
from chip8emu.keypad import Keypad
from chip8emu.memory import FONT_GLYPH_SIZE, MemoryBank
from chip8emu.registers import RegisterFile
from chip8emu.timers import TimerBank


class Engine:
    """Fetch, decode and execute, one opcode per ``step()``.

    The engine owns the whole machine state. ``step()`` returns a frame
    (a copy of the display) when the opcode was a draw and None otherwise;
    one draw opcode is one renderable frame.

    The engine has no display or input collaborators of its own; a
    ``DisplaySink`` and an ``InputSource`` are handed to ``ControlLoop``.
    """

    def __init__(self, quirks=None, rng=None):
        self.quirks = quirks or Quirks()
        self.rng = rng or random.Random()

        self.memory = MemoryBank()
        self.registers = RegisterFile()
        self.display = Display(self.quirks.sprite_edge)
        self.keypad = Keypad()
        self.timers = TimerBank()

        self.opcode = 0
        self.halted = False
        self.waiting_for_key = None  # register index while Fx0A is pending
        self.cycle_count = 0

        self.setup_funcmap()

    # ---- Opcode function map ----
    def setup_funcmap(self):
        self.funcmap = {
            0x0: self._0xxx,  # 00E0 / 00EE - Clear screen / return
            0x1: self._1nnn,  # 1nnn - Jump to a memory address
            0x2: self._2nnn,  # 2nnn - Call a subroutine at a memory address
            0x3: self._3xkk,  # 3xkk - Skip next instruction if a register equals a number
            0x4: self._4xkk,  # 4xkk - Skip next instruction if a register does NOT equal a number
            0x5: self._5xy0,  # 5xy0 - Skip next instruction if two registers are equal
            0x6: self._6xkk,  # 6xkk - Set a register to a number
            0x7: self._7xkk,  # 7xkk - Add a number to a register
            0x8: self._8xxx,  # 8xy0..8xyE - Math and logic between two registers
            0x9: self._9xy0,  # 9xy0 - Skip next instruction if two registers are NOT equal
            0xA: self._Annn,  # Annn - Set I to an address
            0xB: self._Bnnn,  # Bnnn - Jump to an address plus V0
            0xC: self._Cxkk,  # Cxkk - Set a register to a random number ANDed with a value
            0xD: self._Dxyn,  # Dxyn - Draw a sprite at (Vx, Vy)
            0xE: self._Exxx,  # Ex9E / ExA1 - Skip on key state
            0xF: self._Fxxx,  # Fx07..Fx65 - Timers, memory, I and key input
        }
        self.system_ops = {
            0x00E0: self._00E0,
            0x00EE: self._00EE,
        }
        self.alu_ops = {
            0x0: self._8xy0,
            0x1: self._8xy1,
            0x2: self._8xy2,
            0x3: self._8xy3,
            0x4: self._8xy4,
            0x5: self._8xy5,
            0x6: self._8xy6,
            0x7: self._8xy7,
            0xE: self._8xyE,
        }
        self.key_ops = {
            0x9E: self._Ex9E,
            0xA1: self._ExA1,
        }
        self.misc_ops = {
            0x07: self._Fx07,
            0x0A: self._Fx0A,
            0x15: self._Fx15,
            0x18: self._Fx18,
            0x1E: self._Fx1E,
            0x29: self._Fx29,
            0x33: self._Fx33,
            0x55: self._Fx55,
            0x65: self._Fx65,
        }

    # ---- Program ----
    def load(self, image):
        return self.memory.load_program(image)

    # ---- Cycle ----
    def step(self):
        if self.halted:
            raise MachineHalted(self.registers.pc)

        if self.waiting_for_key is not None:
            pressed = self.keypad.take_key_press()
            if pressed is not None:
                self.deliver_key(pressed)
            return None

        pc = self.registers.pc

        # Fetch opcode
        if pc + 1 >= len(self.memory):
            self.halted = True
            raise MachineHalted(pc)
        self.opcode = self.memory.read_word(pc)
        self.registers.pc = pc + 2
        self.cycle_count += 1

        # Decode & dispatch
        group = (self.opcode & 0xF000) >> 12
        handler = self.funcmap.get(group)
        if handler is None:
            raise UnknownOpcodeError(self.opcode, pc)
        return handler(self.opcode)

    def deliver_key(self, index):
        x = self.waiting_for_key
        self.registers.V[x] = index
        self.waiting_for_key = None
        log(f"V{x:X} = key {index:X}")

    def _check_range(self, addr, count):
        if addr + count > len(self.memory):
            raise MemoryFault(addr, count, len(self.memory))

    # ---- Group handlers ----
    def _0xxx(self, opcode):
        handler = self.system_ops.get(opcode)
        if handler is None:
            log("SYS call ignored: %04X" % opcode)
            return None
        return handler(opcode)

    def _8xxx(self, opcode):
        handler = self.alu_ops.get(opcode & 0xF)
        if handler is None:
            log("Unknown ALU op ignored: %04X" % opcode)
            return None
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        handler(x, y)
        return None

    def _Exxx(self, opcode):
        handler = self.key_ops.get(opcode & 0xFF)
        if handler is None:
            log("Unknown key op ignored: %04X" % opcode)
            return None
        handler((opcode >> 8) & 0xF)
        return None

    def _Fxxx(self, opcode):
        handler = self.misc_ops.get(opcode & 0xFF)
        if handler is None:
            log("Unknown misc op ignored: %04X" % opcode)
            return None
        handler((opcode >> 8) & 0xF)
        return None

    # 00E0 - Clear the display
    def _00E0(self, opcode):
        self.display.clear()
        log("Clear the display (all pixels turned off)")

    # 00EE - Return from subroutine
    def _00EE(self, opcode):
        regs = self.registers
        if self.quirks.return_mode == RETURN_STRICT:
            regs.pc = regs.pop()
            log("Return to", hex(regs.pc))
        else:
            # FIXME: the reference engine drops the frame without jumping back,
            # so execution carries on after the 00EE. Use return_mode="strict" for a real return.
            regs.drop()
            log("Return (stack pointer only), sp =", regs.sp)

    # 1nnn - Jump to address NNN
    def _1nnn(self, opcode):
        self.registers.pc = opcode & 0x0FFF
        log("Jump to address", hex(self.registers.pc))

    # 2nnn - Call subroutine at NNN
    def _2nnn(self, opcode):
        regs = self.registers
        regs.push(regs.pc)
        regs.pc = opcode & 0x0FFF
        log("Call subroutine at", hex(regs.pc))

    # 3xkk - Skip next instruction if Vx == kk
    def _3xkk(self, opcode):
        x = (opcode >> 8) & 0xF
        kk = opcode & 0xFF
        if self.registers.V[x] == kk:
            self.registers.pc += 2
            log(f"Skip next instruction: V{x:X} == {kk}")

    # 4xkk - Skip next instruction if Vx != kk
    def _4xkk(self, opcode):
        x = (opcode >> 8) & 0xF
        kk = opcode & 0xFF
        if self.registers.V[x] != kk:
            self.registers.pc += 2
            log(f"Skip next instruction: V{x:X} != {kk}")

    # 5xy0 - Skip next instruction if Vx == Vy
    def _5xy0(self, opcode):
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        if self.registers.V[x] == self.registers.V[y]:
            self.registers.pc += 2
            log(f"Skip next instruction: V{x:X} == V{y:X}")

    # 6xkk - Set Vx = kk
    def _6xkk(self, opcode):
        x = (opcode >> 8) & 0xF
        self.registers.V[x] = opcode & 0xFF
        log(f"Set V{x:X} = {self.registers.V[x]}")

    # 7xkk - Add immediate, no carry
    def _7xkk(self, opcode):
        x = (opcode >> 8) & 0xF
        V = self.registers.V
        V[x] = (V[x] + (opcode & 0xFF)) & 0xFF
        log(f"Add {opcode & 0xFF} to V{x:X}: {V[x]}")

    # 8xy0 - Vx = Vy
    def _8xy0(self, x, y):
        V = self.registers.V
        V[x] = V[y]
        log(f"Copy V{y:X} ({V[y]}) into V{x:X}")

    # 8xy1 - Vx = Vx OR Vy
    def _8xy1(self, x, y):
        V = self.registers.V
        V[x] |= V[y]
        log(f"V{x:X} = V{x:X} OR V{y:X} -> {V[x]}")

    # 8xy2 - Vx = Vx AND Vy
    def _8xy2(self, x, y):
        V = self.registers.V
        V[x] &= V[y]
        log(f"V{x:X} = V{x:X} AND V{y:X} -> {V[x]}")

    # 8xy3 - Vx = Vx XOR Vy
    def _8xy3(self, x, y):
        V = self.registers.V
        V[x] ^= V[y]
        log(f"V{x:X} = V{x:X} XOR V{y:X} -> {V[x]}")

    # 8xy4 - Vx = Vx + Vy, VF = carry
    def _8xy4(self, x, y):
        V = self.registers.V
        total = V[x] + V[y]
        # flag first, result last: with x == F the sum wins
        V[0xF] = 1 if total > 0xFF else 0
        V[x] = total & 0xFF
        log(f"Add V{y:X} to V{x:X}: result {V[x]}, carry={V[0xF]}")

    # The flag ops below write VF before the result, so with x or y == F
    # the arithmetic sees the fresh flag value.

    # 8xy5 - Vx = Vx - Vy, VF = NOT borrow
    def _8xy5(self, x, y):
        V = self.registers.V
        V[0xF] = 1 if V[x] >= V[y] else 0
        V[x] = (V[x] - V[y]) & 0xFF
        log(f"Subtract V{y:X} from V{x:X}: result {V[x]}, NOT borrow={V[0xF]}")

    # 8xy6 - Vx = Vx >> 1, VF = bit shifted out (Vy is not used)
    def _8xy6(self, x, y):
        V = self.registers.V
        V[0xF] = V[x] & 1
        V[x] >>= 1
        log(f"Shift V{x:X} right by 1: {V[x]}, least significant bit={V[0xF]}")

    # 8xy7 - Vx = Vy - Vx, VF = NOT borrow
    def _8xy7(self, x, y):
        V = self.registers.V
        V[0xF] = 1 if V[y] >= V[x] else 0
        V[x] = (V[y] - V[x]) & 0xFF
        log(f"Set V{x:X} = V{y:X} - V{x:X}: result {V[x]}, NOT borrow={V[0xF]}")

    # 8xyE - Vx = Vx << 1, VF = bit shifted out
    def _8xyE(self, x, y):
        V = self.registers.V
        V[0xF] = (V[x] >> 7) & 1
        V[x] = (V[x] << 1) & 0xFF
        log(f"Shift V{x:X} left by 1: {V[x]}, most significant bit={V[0xF]}")

    # 9xy0 - Skip next instruction if Vx != Vy
    def _9xy0(self, opcode):
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        if self.registers.V[x] != self.registers.V[y]:
            self.registers.pc += 2
            log(f"Skip next instruction: V{x:X} != V{y:X}")

    # Annn - Set I = NNN
    def _Annn(self, opcode):
        self.registers.I = opcode & 0x0FFF
        log(f"Set I = {self.registers.I:03X}")

    # Bnnn - Jump to address NNN + V0
    def _Bnnn(self, opcode):
        self.registers.pc = (opcode & 0x0FFF) + self.registers.V[0]
        log(f"Jump to address V0 + {opcode & 0x0FFF:03X} = {self.registers.pc:03X}")

    # Cxkk - Vx = random byte AND kk
    def _Cxkk(self, opcode):
        x = (opcode >> 8) & 0xF
        kk = opcode & 0xFF
        self.registers.V[x] = self.rng.getrandbits(8) & kk
        log(f"Set V{x:X} = random_byte & {kk} -> {self.registers.V[x]}")

    # Dxyn - Draw n-byte sprite from memory[I] at (Vx, Vy), VF = collision
    def _Dxyn(self, opcode):
        regs = self.registers
        x = (opcode >> 8) & 0xF
        y = (opcode >> 4) & 0xF
        n = opcode & 0xF
        x0, y0 = regs.V[x], regs.V[y]
        self._check_range(regs.I, n)
        sprite = self.memory.read(regs.I, n)
        regs.V[0xF] = 0
        if self.display.draw(x0, y0, n, sprite):
            regs.V[0xF] = 1
        log(f"Drew sprite, collision={regs.V[0xF]}")
        return self.display.frame()

    # Ex9E - Skip next instruction if key Vx is pressed
    def _Ex9E(self, x):
        if self.keypad.is_pressed(self.registers.V[x]):
            self.registers.pc += 2
            log(f"Skip next instruction: key {self.registers.V[x]:X} pressed")

    # ExA1 - Skip next instruction if key Vx is not pressed
    def _ExA1(self, x):
        if not self.keypad.is_pressed(self.registers.V[x]):
            self.registers.pc += 2
            log(f"Skip next instruction: key {self.registers.V[x]:X} not pressed")

    # Fx07 - Vx = delay timer
    def _Fx07(self, x):
        self.registers.V[x] = self.timers.delay_timer

    # Fx0A - Wait for a key press, store it in Vx
    def _Fx0A(self, x):
        self.keypad.arm()
        self.waiting_for_key = x
        log(f"Wait for key into V{x:X}")

    # Fx15 - delay timer = Vx
    def _Fx15(self, x):
        self.timers.delay_timer = self.registers.V[x]

    # Fx18 - sound timer = Vx
    def _Fx18(self, x):
        self.timers.sound_timer = self.registers.V[x]

    # Fx1E - I = I + Vx, VF = 1 past 0xFFF, wraps to 12 bits
    def _Fx1E(self, x):
        regs = self.registers
        regs.V[0xF] = 1 if regs.I + regs.V[x] > 0xFFF else 0
        # VF is already the new flag here, so Fx1E with x == F adds the flag
        regs.I = (regs.I + regs.V[x]) & 0xFFF
        log(f"Set I = {regs.I:03X}, overflow={regs.V[0xF]}")

    # Fx29 - I = address of the font glyph for Vx
    def _Fx29(self, x):
        self.registers.I = FONT_START + self.registers.V[x] * FONT_GLYPH_SIZE
        log(f"Set I = font glyph {self.registers.V[x]:X} at {self.registers.I:03X}")

    # Fx33 - BCD of Vx into memory[I..I+2]
    def _Fx33(self, x):
        regs = self.registers
        self._check_range(regs.I, 3)
        val = regs.V[x]
        self.memory[regs.I] = val // 100
        self.memory[regs.I + 1] = (val // 10) % 10
        self.memory[regs.I + 2] = val % 10

    # Fx55 - memory[I..I+x] = V0..Vx
    def _Fx55(self, x):
        regs = self.registers
        self._check_range(regs.I, x + 1)
        self.memory.write(regs.I, regs.V[:x + 1])

    # Fx65 - V0..Vx = memory[I..I+x]
    def _Fx65(self, x):
        regs = self.registers
        self._check_range(regs.I, x + 1)
        regs.V[:x + 1] = list(self.memory.read(regs.I, x + 1))
