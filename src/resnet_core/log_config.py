# --- src/resnet_core/log_config.py ---
import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] [%(name)s] %(message)s"

# Third-party loggers that flood the root handler at DEBUG level (numba logs every
# compilation pass).
NOISY_LOGGERS = ("numba", "numba.core")


def setup_logging(level=logging.INFO, stream=None):
    """
    Routes all records to a single stream handler on the root logger.

    Existing root handlers are replaced, so repeated calls do not duplicate output.
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    logging.getLogger(__name__).debug(f"Logging configured at level {logging.getLevelName(level)}.")
