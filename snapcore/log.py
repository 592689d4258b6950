"""
snapcore/log.py
---------------
Logging setup shared by the Snap Suite packages.
"""
import logging


def configure_logging(name="snapiso", level=logging.INFO, logfile=None):
    """Configure the logger of one Snap package.

    Sets up a console handler with a short timestamped format and an
    optional file handler. Calling it again replaces the handlers instead
    of stacking duplicates. Called automatically when snapiso is imported.

    Parameters
    ----------
    name : str, default "snapiso"
        Logger name (the package name).
    level : int, default logging.INFO
        Logging level (e.g., logging.DEBUG, logging.WARNING).
    logfile : str, optional
        Path to a log file. If given, messages go to both console and file.

    Examples
    --------
    >>> import logging
    >>> from snapcore.log import configure_logging
    >>> configure_logging(level=logging.DEBUG, logfile="snapiso.log")

    Notes
    -----
    The log format is: "HH:MM:SS message"
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt="%(asctime)s %(message)s", datefmt="%H:%M:%S")

    logger_handler = logging.StreamHandler()
    logger_handler.setFormatter(formatter)
    logger.addHandler(logger_handler)

    if logfile is not None:
        file_handler = logging.FileHandler(logfile)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
