import logging
import sys

from .config import parse_args
from .log import set_verbose


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s]: %(message)s", stream=sys.stdout)
    set_verbose(args.verbose)

    # pyglet opens a display on import, keep it out of the way until needed
    from .app import run
    run(args)


if __name__ == "__main__":
    main()
