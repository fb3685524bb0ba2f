# CHIP8 Virtual Machine
# Input - 16 key keypad, state stored per key and checked by the skip/wait opcodes.
# Output - 64x32 display (array of pixels that are either on or off (0 || 1)).
# CPU - Cowgods CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
# Memory - 4096 bytes which includes: the reserved area, fonts, and the inputted ROM.

from chip8emu.config import Quirks
from chip8emu.display import Display
from chip8emu.engine import Engine
from chip8emu.errors import (
    Chip8Error,
    DisplayInitError,
    MachineHalted,
    MemoryFault,
    QuitRequested,
    RomLoadError,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
)
from chip8emu.interfaces import DisplaySink, HeadlessDisplay, InputSource, ScriptedInput
from chip8emu.keypad import Keypad
from chip8emu.loader import load_rom
from chip8emu.loop import ControlLoop
from chip8emu.memory import FONTSET, MemoryBank
from chip8emu.registers import RegisterFile
from chip8emu.timers import TimerBank

__version__ = "1.0.0"
