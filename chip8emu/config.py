# ---- Configuration ----
scale = 10
width, height = 64, 32
window_width, window_height = width * scale, height * scale

# one instruction per iteration, then a fixed delay (~60 instructions/s)
CYCLE_DELAY = 0.016
# timers count down once per elapsed interval of wall-clock time
TIMER_INTERVAL = 0.016

background = (0, 0, 0, 255)
foreground = (255, 255, 255, 255)

# ---- Memory layout ----
MEMORY_SIZE = 4096
FONT_START = 0x050
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START  # 3584 bytes
STACK_DEPTH = 16
REGISTER_COUNT = 16
KEY_COUNT = 16

# ---- Quirks ----
# 00EE: "observed" only drops the stack pointer, "strict" also jumps back to the caller
RETURN_OBSERVED = "observed"
RETURN_STRICT = "strict"
RETURN_MODES = (RETURN_OBSERVED, RETURN_STRICT)

# Dxyn: how pixels past the right/bottom edge are handled once the origin is wrapped
EDGE_OVERFLOW = "overflow"
EDGE_WRAP = "wrap"
EDGE_CLIP = "clip"
EDGE_MODES = (EDGE_OVERFLOW, EDGE_WRAP, EDGE_CLIP)


class Quirks:
    """Behaviors where CHIP-8 interpreters disagree.

    The defaults reproduce the reference engine: a subroutine return that
    never restores pc, and sprites whose rows run on past the edge of the
    64x32 grid.
    """

    def __init__(self, return_mode=RETURN_OBSERVED, sprite_edge=EDGE_OVERFLOW):
        if return_mode not in RETURN_MODES:
            raise ValueError("return_mode must be one of %s, got %r" % (RETURN_MODES, return_mode))
        if sprite_edge not in EDGE_MODES:
            raise ValueError("sprite_edge must be one of %s, got %r" % (EDGE_MODES, sprite_edge))
        self.return_mode = return_mode
        self.sprite_edge = sprite_edge

    def __repr__(self):
        return "Quirks(return_mode=%r, sprite_edge=%r)" % (self.return_mode, self.sprite_edge)
