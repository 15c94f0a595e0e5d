"""
Pydfufile exceptions.
(C) 2023 Yaroshenko Dmytro (https://github.com/o-murphy)

This program is free software; you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation; either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program; if not, write to the Free Software
Foundation, Inc., 59 Temple Place, Suite 330, Boston, MA  02111-1307  USA
"""
import logging
import sys
from enum import IntEnum
from functools import wraps


class SysExit(IntEnum):
    """Exit codes, see sysexits.h"""
    EX_OK = 0
    OTHER = 1
    EX_USAGE = 64  # command line usage error
    EX_DATAERR = 65  # data format error
    EX_NOINPUT = 66  # cannot open input
    EX_SOFTWARE = 70  # internal software error
    EX_IOERR = 74  # input/output error


class Errx(Exception):
    """
    Base class of all pydfufile errors.
    Carries the exit code the cli reports when the error is not handled.
    """
    exit_code = SysExit.OTHER
    message = None

    def __init__(self, message=None, exit_code: SysExit = None):
        super().__init__(message if message is not None else self.message)
        if isinstance(exit_code, SysExit):
            self.exit_code = exit_code


class DataError(Errx, ValueError):
    """EX_DATAERR"""
    exit_code = SysExit.EX_DATAERR


class InsufficientFileSize(DataError):
    """File is shorter than the structure being parsed requires"""
    message = "File size is too small to contain prefix and suffix"


class InvalidSuffixSignature(DataError):
    """Suffix signature is not "UFD" (DFU reversed)"""
    message = "Invalid file suffix signature"


class InvalidPrefixSignature(DataError):
    """DfuSe file prefix signature is not 'DfuSe'"""
    message = "Invalid file prefix signature"


class InvalidTargetPrefixSignature(DataError):
    """DfuSe target prefix signature is not 'Target'"""
    message = "Invalid target prefix signature"


class _IOError(Errx, IOError):
    """EX_IOERR"""
    exit_code = SysExit.EX_IOERR


class NoInputError(Errx, OSError):
    """EX_NOINPUT"""
    exit_code = SysExit.EX_NOINPUT


class UsageError(Errx):
    """Invalid command-line arguments or options"""
    exit_code = SysExit.EX_USAGE


def except_and_safe_exit(_logger: logging.Logger = None):
    """decorator to handle exceptions and exit safely"""

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Errx as e:
                if str(e) and _logger:
                    if _logger.isEnabledFor(logging.DEBUG):
                        _logger.exception(e)
                    else:
                        _logger.error(e)
                sys.exit(e.exit_code)
            # pylint: disable=broad-exception-caught
            except Exception as e:
                if _logger:
                    if _logger.isEnabledFor(logging.DEBUG):
                        _logger.exception(f"Unhandled exception occurred: {e}")
                    else:
                        _logger.error(f"Unhandled exception occurred: {e}")
                sys.exit(SysExit.EX_SOFTWARE)

        return wrapper

    return decorator


__all__ = (
    'SysExit',
    'Errx',
    'DataError',
    'InsufficientFileSize',
    'InvalidSuffixSignature',
    'InvalidPrefixSignature',
    'InvalidTargetPrefixSignature',
    'NoInputError',
    'UsageError',
    '_IOError',
    'except_and_safe_exit',
)
