import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Install one stream handler on the package logger.
    Safe to call more than once (tests build the app repeatedly).
    """
    root = logging.getLogger("observation_tracker")
    root.setLevel(level.upper())

    if not any(getattr(h, "_observation_tracker", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._observation_tracker = True  # marker for idempotent setup
        root.addHandler(handler)
