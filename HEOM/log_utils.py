# This file is part of https://github.com/Turku-Quantum-Optics/hops
#
# Copyright (c) 2024-2025, Turku Quantum Optics
#
# Licensed under the BSD 3-Clause License, see accompanying LICENSE,
# and README.md for further information.

import logging

from rich.logging import RichHandler

# Every module logs to a child of this logger
LOGGER_NAME = "HEOM"

def configure_logging(level: int | str = logging.INFO, log_file: str | None = None) -> logging.Logger:
    """Attach a rich console handler (and optionally a file handler) to the package logger.

    Calling it again replaces the handlers installed by the previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_heom_handler", False):
            logger.removeHandler(handler)
            handler.close()

    console = RichHandler(show_path=False, markup=False)
    console._heom_handler = True
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        file_handler._heom_handler = True
        logger.addHandler(file_handler)

    logger.setLevel(level)
    return logger
