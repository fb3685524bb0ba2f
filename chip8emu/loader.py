from chip8emu.config import MAX_PROGRAM_SIZE
from chip8emu.errors import RomLoadError


def read_rom(path):
    print("Attempting to load ROM:", path)
    try:
        with open(path, "rb") as f:
            rom = f.read(MAX_PROGRAM_SIZE + 1)
    except OSError as e:
        raise RomLoadError("Failed to open ROM file: %s (%s)" % (path, e)) from e

    if len(rom) > MAX_PROGRAM_SIZE:
        raise RomLoadError("ROM file is too large to fit in memory: %s" % path)
    if not rom:
        raise RomLoadError("Failed to read ROM file: %s" % path)
    return rom


def load_rom(engine, path):
    """Copy the program at ``path`` into memory at 0x200, return its size."""
    rom = read_rom(path)
    size = engine.load(rom)
    print("Loaded ROM: %s (%d bytes)" % (path, size))
    return size
