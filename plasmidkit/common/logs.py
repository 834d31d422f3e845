# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Logging setup for command line use. The engine itself only emits messages
    through the root logger and never configures handlers.
"""

import contextlib
import logging
import os
from typing import Dict, Generator, Optional

LOG_FORMAT = '%(levelname)-8s %(asctime)s   %(message)s'
DATE_FORMAT = "%d/%m %H:%M:%S"


def get_log_level(verbose: bool = False, debug: bool = False) -> int:
    """ Converts the verbosity flags into a logging level """
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


@contextlib.contextmanager
def changed_logging(logfile: Optional[str] = None, verbose: bool = False,
                    debug: bool = False) -> Generator:
    """ Changes logging setup for the duration of the context
        e.g.:

        with changed_logging(logfile="digest.log", debug=True):
            logging.warning("warning")  # will appear on console and in digest.log
            logging.debug("debug")  # will appear on console and in digest.log
        logging.warning("warning")  # will appear on console only
        logging.debug("debug")  # will not appear in either

        Arguments:
            logfile: None or the path to a file to write logging messages to
            verbose: whether to show INFO level messages and above
            debug: whether to show DEBUG level messages and above

        Returns:
            None
    """
    log_level = get_log_level(verbose, debug)
    logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT)
    logger = logging.getLogger()
    original_log_level = logger.getEffectiveLevel()
    handler = None
    original_levels: Dict[logging.Handler, int] = {}
    try:
        logger.setLevel(log_level)
        if logfile:
            # the logfile always receives INFO, so the console handlers have to
            # be limited to the requested level separately
            if log_level > logging.INFO:
                logger.setLevel(logging.INFO)
                for stream in logger.handlers:
                    original_levels[stream] = stream.level
                    stream.setLevel(log_level)

            dirname = os.path.dirname(logfile)
            if dirname and not os.path.exists(dirname):
                os.makedirs(dirname)
            handler = logging.FileHandler(logfile)
            handler.setLevel(min(log_level, logging.INFO))
            handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
            logger.addHandler(handler)
        yield
    finally:
        logger.setLevel(original_log_level)
        if handler:
            logger.removeHandler(handler)
            handler.flush()
            handler.close()
            for stream, original_level in original_levels.items():
                stream.setLevel(original_level)
