import numpy as np

from chip8emu.config import PROGRAM_START, REGISTER_COUNT, STACK_DEPTH
from chip8emu.errors import StackOverflowError, StackUnderflowError


class RegisterFile:
    """V0..VF, the index register, the program counter and the call stack.

    VF doubles as the flag register: carry, borrow, shifted-out bit and
    sprite collision all land there.
    """

    def __init__(self):
        self.V = [0] * REGISTER_COUNT
        self.I = 0
        self.pc = PROGRAM_START
        self.stack = np.zeros(STACK_DEPTH, dtype=np.uint16)
        self.sp = 0

    def push(self, addr):
        if self.sp >= STACK_DEPTH:
            raise StackOverflowError(
                "Stack overflow error: Too many nested subroutine calls (sp=%d)" % self.sp
            )
        self.stack[self.sp] = addr
        self.sp += 1

    def drop(self):
        # moves sp down without reading the frame; sp is a byte, so 0 wraps
        # to 255 and the next call overflows
        self.sp = (self.sp - 1) & 0xFF

    def pop(self):
        if self.sp == 0:
            raise StackUnderflowError("Stack underflow on 00EE")
        self.sp -= 1
        return int(self.stack[self.sp])
