# logger.py
import logging
import os
import sys

# --------------------------------------------------------
# One logger tree for every OcuScore module
# --------------------------------------------------------
LOGGER_NAME = "ocuscore"
LOG_LEVEL = os.getenv("OCUSCORE_LOG_LEVEL", "INFO").upper()

logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

# Avoid duplicate handlers on re-import (uvicorn --reload)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logger.addHandler(handler)

logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Child logger under the ocuscore tree, e.g. ``ocuscore.glaucoma``."""
    return logger.getChild(name.rsplit(".", 1)[-1])
