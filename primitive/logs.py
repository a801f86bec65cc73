import logging


def get_logger():
    """
    Returns the "primitive" logger, used to record at debug level the URI
    strings that cannot be parsed and the lifecycle of file streams (closing,
    contents that cannot be read back). Handlers are left to the application.
    """
    logger = logging.getLogger("primitive")
    logger.setLevel(logging.INFO)
    return logger
