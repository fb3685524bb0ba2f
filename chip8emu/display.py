import numpy as np

from chip8emu.config import EDGE_CLIP, EDGE_OVERFLOW, EDGE_WRAP, height, width


class Display:
    """64x32 monochrome framebuffer.

    Pixels live in a flat buffer, row-major, index = x + y * 64, so a
    sprite that runs off the right edge in ``overflow`` mode continues on
    the next row, exactly like the linear indexing it reproduces.
    """

    def __init__(self, edge_mode=EDGE_OVERFLOW):
        self.width = width
        self.height = height
        self.edge_mode = edge_mode
        self.vram = np.zeros(width * height, dtype=np.uint8)

    def clear(self):
        self.vram[:] = 0

    def draw(self, x0, y0, rows, sprite):
        """XOR ``rows`` sprite bytes in at (x0, y0). Returns True on collision."""
        x0 %= self.width
        y0 %= self.height
        size = len(self.vram)
        collision = False

        for row in range(rows):
            bits = sprite[row]
            if bits == 0:
                continue
            for col in range(8):
                if not bits & (0x80 >> col):
                    continue
                px = x0 + col
                py = y0 + row
                if self.edge_mode == EDGE_WRAP:
                    px %= self.width
                    py %= self.height
                elif self.edge_mode == EDGE_CLIP:
                    if px >= self.width or py >= self.height:
                        continue
                index = px + py * self.width
                if index >= size:
                    # past the end of the buffer, nothing to flip
                    continue
                if self.vram[index] == 1:
                    collision = True
                self.vram[index] ^= 1

        return collision

    def frame(self):
        # snapshot for the renderer, rows first
        return self.vram.reshape(self.height, self.width).copy()
