"""
Exceptions raised by the emulator.

Every fatal condition derives from Chip8Error so the front end can stop
the machine with a single except clause. QuitRequested is kept outside
that hierarchy: it is the user closing the window, not a failure.
"""


class Chip8Error(Exception):
    """Base class for conditions that stop the machine."""


class RomLoadError(Chip8Error):
    """The program image could not be opened, was empty, or does not fit."""


class DisplayInitError(Chip8Error):
    """The rendering surface could not be created."""


class StackOverflowError(Chip8Error):
    """A call was made with all 16 stack slots in use."""


class StackUnderflowError(Chip8Error):
    """A return was made with an empty call stack."""


class UnknownOpcodeError(Chip8Error):
    """The top-level opcode group has no handler."""

    def __init__(self, opcode, address):
        super().__init__("Unknown opcode: 0x%04X at 0x%03X" % (opcode, address))
        self.opcode = opcode
        self.address = address


class MemoryFault(Chip8Error):
    """An I-indexed access ran past the end of memory."""

    def __init__(self, address, count, size):
        super().__init__(
            "Memory access out of bounds: 0x%03X..0x%03X (memory is %d bytes)"
            % (address, address + count - 1, size)
        )
        self.address = address
        self.count = count


class MachineHalted(Chip8Error):
    """The program counter left memory, so no further opcode can be fetched."""

    def __init__(self, pc):
        super().__init__("PC out of bounds: 0x%03X" % pc)
        self.pc = pc


class QuitRequested(Exception):
    """The input side asked the emulator to stop."""
