"""
Default logger initializer for pydfufile
"""

import logging

__all__ = ('logger', 'set_verbose')


formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")
stream_handler = logging.StreamHandler()
stream_handler.setFormatter(formatter)
logger = logging.getLogger('pydfufile')
logger.setLevel(logging.INFO)
logger.addHandler(stream_handler)


def set_verbose(verbose: bool) -> None:
    """DEBUG level shows record offsets and counts while parsing"""
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
