import sys
import logging


def setup_logger():
    logger = logging.getLogger("bkassets")
    logger.setLevel(logging.DEBUG)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter("  %(message)s"))

    if not logger.handlers:
        logger.addHandler(handler)

    return logger


def set_verbose(verbose: bool):
    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG if verbose else logging.INFO)


logger = setup_logger()
