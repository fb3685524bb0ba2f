import argparse
import sys

from chip8emu.config import EDGE_MODES, EDGE_OVERFLOW, RETURN_MODES, RETURN_OBSERVED, Quirks
from chip8emu.debug import set_logs
from chip8emu.engine import Engine
from chip8emu.errors import Chip8Error
from chip8emu.loader import load_rom


class UsageParser(argparse.ArgumentParser):
    # bad or missing arguments exit with status 1
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, "%s: error: %s\n" % (self.prog, message))


def build_parser():
    parser = UsageParser(prog="chip8emu", description="CHIP-8 virtual machine")
    parser.add_argument("rom", help="program image to run")
    parser.add_argument("--return-mode", choices=RETURN_MODES, default=RETURN_OBSERVED,
                        help="00EE behavior: 'observed' only pops the stack pointer, "
                             "'strict' also returns to the caller")
    parser.add_argument("--sprite-edge", choices=EDGE_MODES, default=EDGE_OVERFLOW,
                        help="what happens to sprite pixels past the right/bottom edge")
    parser.add_argument("--logs", action="store_true", help="print an opcode trace")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    set_logs(args.logs)

    engine = Engine(Quirks(return_mode=args.return_mode, sprite_edge=args.sprite_edge))
    try:
        load_rom(engine, args.rom)
        # pyglet needs a display, keep it out of the import path until here
        from chip8emu import window
        return window.run(engine)
    except Chip8Error as e:
        print(e, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
