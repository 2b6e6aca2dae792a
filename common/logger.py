import logging
import colorlog

from common.config import LOG_LEVEL


def get_logger(name):
    # Create a logger
    root_logger = logging.getLogger(name)
    root_logger.setLevel(LOG_LEVEL)

    # Handlers are attached once; every module calls get_logger at import
    if root_logger.handlers:
        return root_logger

    # Create a console handler with a color formatter
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)
    color_formatter = colorlog.ColoredFormatter(
        "%(log_color)s%(asctime)s %(module)s %(levelname)-8s: %(message)s%(reset)s",
        datefmt='%Y-%m-%d %H:%M:%S',  # Format for the timestamp
        reset=True,
        log_colors={
            'DEBUG':    'cyan',
            'INFO':     'green',
            'WARNING':  'yellow',
            'ERROR':    'red',
            'CRITICAL': 'red,bg_white',
        },
        secondary_log_colors={},
        style='%'
    )
    console_handler.setFormatter(color_formatter)
    root_logger.addHandler(console_handler)

    # Keep the gateway and http libraries quiet
    silenced_libraries = ['interactions', 'aiohttp', 'websockets', 'asyncio']
    for library in silenced_libraries:
        library_logger = logging.getLogger(library)
        library_logger.setLevel(logging.WARNING)

    return root_logger
