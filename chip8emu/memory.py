from chip8emu.config import FONT_START, MEMORY_SIZE, PROGRAM_START

# set fonts (binary pixel patterns)
FONTSET = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
] #notice 80 bytes

FONT_GLYPH_SIZE = 5


class MemoryBank:
    """4KB of byte-addressable RAM.

    0x000-0x1FF is reserved (the font lives at 0x050), programs start at
    0x200. Bounds are the engine's job, this is a plain store.
    """

    def __init__(self, size=MEMORY_SIZE):
        self.size = size
        self.data = bytearray(size)
        self.data[FONT_START:FONT_START + len(FONTSET)] = bytes(FONTSET)

    def __len__(self):
        return self.size

    def __getitem__(self, addr):
        return self.data[addr]

    def __setitem__(self, addr, value):
        self.data[addr] = value & 0xFF

    def read(self, addr, count=1):
        return bytes(self.data[addr:addr + count])

    def write(self, addr, values):
        self.data[addr:addr + len(values)] = bytes(values)

    def read_word(self, addr):
        # big-endian opcode fetch
        return (self.data[addr] << 8) | self.data[addr + 1]

    def load_program(self, image, offset=PROGRAM_START):
        self.data[offset:offset + len(image)] = bytes(image)
        return len(image)
