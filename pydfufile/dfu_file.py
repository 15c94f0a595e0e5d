"""
Load DFU files including suffix and DfuSe prefix
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
import errno
import io
import os
from dataclasses import dataclass
from typing import Optional, Union

from pydfufile import dfuse
from pydfufile.content import ContentType, PlainContent
from pydfufile.crc32 import crc32, CRC32_MASK
from pydfufile.cursor import file_size, read_exact
from pydfufile.dfuse import DfuSeContent, Image, ImageElement
from pydfufile.exceptions import InsufficientFileSize, NoInputError, _IOError
from pydfufile.logger import logger
from pydfufile.suffix import Suffix, SUFFIX_LENGTH, SUFFIX_CRC_OFFSET

_logger = logger.getChild(__name__.rsplit('.', maxsplit=1)[-1])

CRC_CHUNK_SIZE = 1024

Content = Union[PlainContent, DfuSeContent]


@dataclass
class DfuFile:
    """
    Open DFU file with its parsed content and suffix.

    Owns the file object, use as a context manager
    or call close() when done:

        with DfuFile.open("firmware.dfu") as dfu_file:
            image = dfu_file.find_image_by_alt(0)
    """
    file_p: io.IOBase
    path: str
    content: Content
    suffix: Suffix

    def __enter__(self) -> 'DfuFile':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @classmethod
    def open(cls, path: [str, os.PathLike]) -> 'DfuFile':
        """open and parse an existing file"""
        path = os.fspath(path)
        try:
            file_p = open(path, "rb")  # pylint: disable=consider-using-with
        except IOError as e:
            if e.errno in (errno.ENOENT, errno.EISDIR):
                raise NoInputError(f"Could not open file {path} for reading") from e
            if e.errno == errno.EACCES:
                raise _IOError(f"Permission denied: {path}") from e
            raise _IOError(f"Error opening file {path}: {e}") from e

        try:
            return cls.from_fileobj(file_p, path)
        except BaseException:
            file_p.close()
            raise

    @classmethod
    def from_fileobj(cls, file_p: io.IOBase, path: Optional[str] = None) -> 'DfuFile':
        """parse an already open seekable binary file, the result owns it"""
        if path is None:
            path = getattr(file_p, 'name', '<stream>')

        total = file_size(file_p)
        if total < SUFFIX_LENGTH:
            raise InsufficientFileSize("File size is too small to contain suffix")

        if dfuse.detect(file_p):
            _logger.debug(f"{path}: DfuSe file detected")
            content = DfuSeContent.from_file(file_p)
        else:
            _logger.debug(f"{path}: plain DFU file")
            content = PlainContent()

        suffix = Suffix.from_file(file_p)
        return cls(file_p, path, content, suffix)

    def close(self) -> None:
        """release the file"""
        if self.file_p is not None and not self.file_p.closed:
            self.file_p.close()

    @property
    def content_type(self) -> ContentType:
        """PLAIN or DFUSE"""
        return self.content.content_type

    @property
    def images(self) -> [list[Image], tuple]:
        """images of a DfuSe file, empty for plain files"""
        return self.content.images

    def find_image_by_alt(self, alt_setting: int) -> Optional[Image]:
        """first image for the alternate setting, None if absent or file is plain"""
        return self.content.find_image_by_alt(alt_setting)

    def find_image_by_name(self, name: str) -> Optional[Image]:
        """first image with the target name, None if absent or file is plain"""
        return self.content.find_image_by_name(name)

    def read_element(self, element: ImageElement, position: int,
                     buffer: [bytearray, memoryview]) -> int:
        """read element data into buffer, see ImageElement.read_at"""
        return element.read_at(self.file_p, position, buffer)

    def calc_crc(self, chunk_size: int = CRC_CHUNK_SIZE) -> int:
        """
        Calculate the CRC32 checksum of the whole file
        up to the dwCRC field of the suffix.
        Valid files store the same value in suffix.dwCRC
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        end = file_size(self.file_p) - SUFFIX_LENGTH + SUFFIX_CRC_OFFSET
        self.file_p.seek(0, io.SEEK_SET)

        crc = 0
        pos = 0
        while pos < end:
            read_size = min(chunk_size, end - pos)
            crc = crc32(read_exact(self.file_p, read_size), crc)
            pos += read_size

        return crc ^ CRC32_MASK

    def verify_crc(self) -> bool:
        """True if the calculated checksum matches the suffix"""
        crc = self.calc_crc()
        if crc != self.suffix.dwCRC:
            _logger.warning(f"DFU suffix CRC 0x{self.suffix.dwCRC:08x} does not match "
                            f"calculated 0x{crc:08x}")
            return False
        return True


__all__ = (
    'CRC_CHUNK_SIZE',
    'Content',
    'ContentType',
    'DfuFile',
    'PlainContent',
    'DfuSeContent',
)
