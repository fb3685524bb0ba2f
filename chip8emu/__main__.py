import sys

from chip8emu.cli import main

sys.exit(main())
