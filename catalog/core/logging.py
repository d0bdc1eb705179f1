"""
Logging setup - one colored stream handler on the root logger.
Modules log through logging.getLogger(__name__).
"""

import logging
import sys

import colorlog


def configure_logging(level: int | str = logging.INFO) -> None:
    handler = colorlog.StreamHandler(sys.stdout)
    handler.setFormatter(
        colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s %(levelname)-8s [%(name)s]%(reset)s %(message)s",
            datefmt="%H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    logging.getLogger("uvicorn.error").setLevel(level)
    logging.getLogger("uvicorn.access").setLevel(level)
    # Request-level chatter from the ES transport is only useful when debugging
    logging.getLogger("elastic_transport").setLevel(logging.WARNING)
