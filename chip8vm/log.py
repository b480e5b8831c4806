# Switchable trace output. Debug traces are off unless turned on (CLI flag or F1
# in the window); errors always go through.
import logging

logger = logging.getLogger("chip8vm")

logsOn = False


def log(*args):
    if logsOn:
        logger.debug(" ".join(str(a) for a in args))


def error(*args):
    logger.error(" ".join(str(a) for a in args))


def set_verbose(on):
    global logsOn
    logsOn = bool(on)
    if logsOn and logger.getEffectiveLevel() > logging.DEBUG:
        logger.setLevel(logging.DEBUG)


def toggle_verbose():
    set_verbose(not logsOn)
    logger.info("logsOn: %s", logsOn)
    return logsOn
