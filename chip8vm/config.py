# ---- Configuration ----
import argparse

scale = 10
cpu_hz = 500
timer_HZ = 60
tone_hz = 440


def _positive_int(text):
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer: %r" % text)
    return value


def build_parser():
    parser = argparse.ArgumentParser(
        prog="chip8vm",
        description="Run CHIP-8 programs. F2 switches to the next ROM, F3 toggles sound, "
                    "F4 locks the CPU to 60 Hz, F1 toggles trace logs.",
    )
    parser.add_argument("roms", nargs="+", help="ROM files, played in the given order")
    parser.add_argument("--scale", type=_positive_int, default=scale,
                        help="window pixels per CHIP-8 pixel (default: %(default)s)")
    parser.add_argument("--cpu-hz", type=_positive_int, default=cpu_hz,
                        help="instructions per second (default: %(default)s)")
    parser.add_argument("--legacy-shift", action="store_true",
                        help="8xyE shifts right like 8xy6, for programs tuned to that behaviour")
    parser.add_argument("--strict", action="store_true",
                        help="stop on unknown opcodes instead of logging them")
    parser.add_argument("--verbose", action="store_true", help="log every executed instruction")
    parser.add_argument("--mute", action="store_true", help="start with sound off")
    return parser


def parse_args(argv=None):
    return build_parser().parse_args(argv)
