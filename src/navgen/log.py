"""Logging setup for the command line."""

import logging

LOG_FORMAT = "%(asctime)s.%(msecs)03d # %(levelname)s %(name)s %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(verbose: bool = False) -> None:
    """Configure the root logger once per process.

    Args:
        verbose: Log DEBUG records instead of INFO and above
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_navgen", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handler._navgen = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Request lines from httpx are noise at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
