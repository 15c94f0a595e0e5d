"""
This implements the ST Microsystems DFU file extensions (DfuSe)
as per the DfuSe 1.1a specification (Document UM0391)
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
import io
from dataclasses import dataclass, field
from typing import Optional

from construct import Struct, Int8ul, Int32ul, Bytes, Padding

from pydfufile.content import ContentType
from pydfufile.cursor import Cursor, file_size, read_at
from pydfufile.exceptions import (DataError, InsufficientFileSize,
                                  InvalidPrefixSignature, InvalidTargetPrefixSignature,
                                  _IOError)
from pydfufile.logger import logger
from pydfufile.suffix import Suffix, SUFFIX_LENGTH

_logger = logger.getChild(__name__.rsplit('.', maxsplit=1)[-1])

DFUSE_BCD = 0x011a
DFUSE_VERSION = 0x01

PREFIX_SIGNATURE = "DfuSe"
TARGET_SIGNATURE = "Target"

PREFIX_LENGTH = 11
TARGET_PREFIX_LENGTH = 274
TARGET_NAME_LENGTH = 255
IMAGE_ELEMENT_LENGTH = 8

DFUSE_PREFIX = Struct(
    "szSignature" / Bytes(5),
    "bVersion" / Int8ul,
    "DFUImageSize" / Int32ul,
    "bTargets" / Int8ul,
)

DFUSE_TARGET_PREFIX = Struct(
    "szSignature" / Bytes(6),
    "bAlternateSetting" / Int8ul,
    "bTargetNamed" / Int8ul,
    Padding(3),
    "szTargetName" / Bytes(TARGET_NAME_LENGTH),
    "dwTargetSize" / Int32ul,
    "dwNbElements" / Int32ul,
)

DFUSE_IMAGE_ELEMENT = Struct(
    "dwElementAddress" / Int32ul,
    "dwElementSize" / Int32ul,
)


def decode_c_string(data: [bytes, bytearray], max_length: int = TARGET_NAME_LENGTH) -> str:
    """
    Decode a fixed size, null terminated string field.

    The bytes after the terminator are often garbage instead of padding,
    so the string ends at the first null byte,
    or at max_length if there is none.
    """
    data = bytes(data[:max_length])
    end = data.find(b'\x00')
    if end >= 0:
        data = data[:end]
    return data.decode('utf-8', errors='replace')


def _check_length(data: [bytes, bytearray], length: int, what: str) -> bytes:
    if len(data) != length:
        raise DataError(f"{what} must be {length} bytes, got {len(data)}")
    return bytes(data)


def detect(fp: io.IOBase) -> bool:
    """
    Check if the file is a DfuSe file:
    starts with the DfuSe signature and the suffix declares DfuSe bcdDFU.
    The file position is not preserved.
    """
    signature = read_at(fp, 0, len(PREFIX_SIGNATURE))
    suffix = Suffix.from_file(fp)
    return signature == PREFIX_SIGNATURE.encode() and suffix.bcdDFU == DFUSE_BCD


# pylint: disable=invalid-name
@dataclass
class Prefix:
    """
    File prefix, see UM0391 section 2.1.
    Placed as a header, used to retrieve the file context
    """
    szSignature: str = PREFIX_SIGNATURE
    bVersion: int = DFUSE_VERSION
    DFUImageSize: int = 0
    bTargets: int = 0

    @staticmethod
    def from_bytes(data: [bytes, bytearray]) -> 'Prefix':
        """parse bytes to a Prefix, the signature is not checked"""
        parsed = DFUSE_PREFIX.parse(_check_length(data, PREFIX_LENGTH, "DfuSe prefix"))
        return Prefix(
            szSignature=parsed.szSignature.decode('utf-8', errors='replace'),
            bVersion=parsed.bVersion,
            DFUImageSize=parsed.DFUImageSize,
            bTargets=parsed.bTargets,
        )

    @staticmethod
    def from_file(fp: io.IOBase) -> 'Prefix':
        """reads the prefix from the start of a file"""
        if file_size(fp) < PREFIX_LENGTH + SUFFIX_LENGTH:
            raise InsufficientFileSize

        prefix = Prefix.from_bytes(read_at(fp, 0, PREFIX_LENGTH))

        if prefix.szSignature != PREFIX_SIGNATURE:
            raise InvalidPrefixSignature
        if prefix.bVersion != DFUSE_VERSION:
            _logger.warning(f"DFU format revision {prefix.bVersion} not supported")

        _logger.debug(f"File contains {prefix.bTargets} DFU images")
        return prefix


@dataclass
class TargetPrefix:
    """
    Target prefix of an image, see UM0391 section 2.3.2.
    Describes the associated image
    """
    szSignature: str = TARGET_SIGNATURE
    bAlternateSetting: int = 0
    bTargetNamed: int = 0
    szTargetName: str = ""
    dwTargetSize: int = 0
    dwNbElements: int = 0

    @staticmethod
    def from_bytes(data: [bytes, bytearray]) -> 'TargetPrefix':
        """parse bytes to a TargetPrefix, the signature is not checked"""
        parsed = DFUSE_TARGET_PREFIX.parse(
            _check_length(data, TARGET_PREFIX_LENGTH, "DfuSe target prefix")
        )
        return TargetPrefix(
            szSignature=parsed.szSignature.decode('utf-8', errors='replace'),
            bAlternateSetting=parsed.bAlternateSetting,
            bTargetNamed=parsed.bTargetNamed,
            szTargetName=decode_c_string(parsed.szTargetName),
            dwTargetSize=parsed.dwTargetSize,
            dwNbElements=parsed.dwNbElements,
        )

    @staticmethod
    def from_file(fp: io.IOBase, cursor: Cursor) -> 'TargetPrefix':
        """
        reads a target prefix at cursor.offset
        and advances the cursor past it
        """
        data = read_at(fp, cursor.offset, TARGET_PREFIX_LENGTH)
        target_prefix = TargetPrefix.from_bytes(data)

        if target_prefix.szSignature != TARGET_SIGNATURE:
            raise InvalidTargetPrefixSignature(
                f"Invalid target prefix signature at offset {cursor.offset}"
            )
        cursor.advance(TARGET_PREFIX_LENGTH)
        return target_prefix


@dataclass
class ImageElement:
    """
    An image element, see UM0391 section 2.3.3.
    The data itself stays in the file at data_position
    """
    dwElementAddress: int = 0
    dwElementSize: int = 0
    data_position: int = 0

    def __repr__(self) -> str:
        return (f"ImageElement("
                f"dwElementAddress=0x{self.dwElementAddress:08x}, "
                f"dwElementSize={self.dwElementSize}, "
                f"data_position={self.data_position})")

    @staticmethod
    def from_bytes(data: [bytes, bytearray], data_position: int = 0) -> 'ImageElement':
        """parse element descriptor bytes to an ImageElement"""
        parsed = DFUSE_IMAGE_ELEMENT.parse(
            _check_length(data, IMAGE_ELEMENT_LENGTH, "DfuSe image element")
        )
        return ImageElement(
            dwElementAddress=parsed.dwElementAddress,
            dwElementSize=parsed.dwElementSize,
            data_position=data_position,
        )

    @staticmethod
    def from_file(fp: io.IOBase, cursor: Cursor) -> 'ImageElement':
        """
        reads an element descriptor at cursor.offset,
        advances the cursor past the descriptor and the element data
        """
        data = read_at(fp, cursor.offset, IMAGE_ELEMENT_LENGTH)
        element = ImageElement.from_bytes(data, cursor.advance(IMAGE_ELEMENT_LENGTH))
        cursor.advance(element.dwElementSize)
        return element

    @property
    def end_address(self) -> int:
        """address following the last byte of the element"""
        return self.dwElementAddress + self.dwElementSize

    def read_at(self, fp: io.IOBase, position: int, buffer: [bytearray, memoryview]) -> int:
        """
        Read element data into buffer.

        :param fp: file the element was parsed from
        :param position: offset relative to the start of the element data
        :param buffer: writable buffer, filled as far as possible
        :return: number of valid bytes in the buffer,
            less than its size at end of file or at the element border
        """
        remaining = self.dwElementSize - position
        if position < 0 or remaining <= 0:
            return 0
        try:
            fp.seek(self.data_position + position, io.SEEK_SET)
            read_size = fp.readinto(buffer) or 0
        except OSError as e:
            raise _IOError(f"Error reading element data at 0x{self.dwElementAddress:08x}: {e}") from e
        return min(read_size, remaining)


@dataclass
class Image:
    """
    An image, see UM0391 section 2.3.1.
    A target prefix followed by a number of image elements
    """
    target_prefix: TargetPrefix = field(default_factory=TargetPrefix)
    image_elements: list[ImageElement] = field(default_factory=list)

    @staticmethod
    def from_file(fp: io.IOBase, cursor: Cursor) -> 'Image':
        """reads a target prefix and its elements starting at cursor.offset"""
        target_prefix = TargetPrefix.from_file(fp, cursor)
        _logger.debug(f"Parsing DFU image for alternate setting {target_prefix.bAlternateSetting}, "
                      f"{target_prefix.dwNbElements} elements, "
                      f"total size = {target_prefix.dwTargetSize}")

        image_elements = []
        for _ in range(target_prefix.dwNbElements):
            element = ImageElement.from_file(fp, cursor)
            _logger.debug(f"Parsed element at 0x{element.dwElementAddress:08x}, "
                          f"size = {element.dwElementSize}")
            image_elements.append(element)

        image = Image(target_prefix, image_elements)
        if image.elements_size > target_prefix.dwTargetSize:
            _logger.warning(f"Elements of target {target_prefix.szTargetName!r} "
                            f"occupy {image.elements_size} bytes, "
                            f"more than the declared {target_prefix.dwTargetSize}")
        return image

    @property
    def elements_size(self) -> int:
        """bytes taken by the element descriptors and their data"""
        return sum(IMAGE_ELEMENT_LENGTH + e.dwElementSize for e in self.image_elements)


@dataclass
class DfuSeContent:
    """DfuSe file content with extensions from STMicroelectronics"""
    content_type = ContentType.DFUSE

    prefix: Prefix = field(default_factory=Prefix)
    images: list[Image] = field(default_factory=list)

    def __str__(self) -> str:
        return f"DfuSe v{self.prefix.bVersion}"

    @staticmethod
    def from_file(fp: io.IOBase) -> 'DfuSeContent':
        """parses prefix and images from the start of a file"""
        prefix = Prefix.from_file(fp)

        cursor = Cursor(PREFIX_LENGTH)
        images = [Image.from_file(fp, cursor) for _ in range(prefix.bTargets)]

        body_size = file_size(fp) - SUFFIX_LENGTH
        if prefix.DFUImageSize != body_size:
            _logger.warning(f"DfuSe prefix declares {prefix.DFUImageSize} bytes, "
                            f"file has {body_size} bytes before the suffix")
        if cursor.offset > body_size:
            _logger.warning(f"DfuSe images end at offset {cursor.offset}, "
                            f"beyond the start of the suffix")

        _logger.debug("Done parsing DfuSe file")
        return DfuSeContent(prefix, images)

    def find_image_by_alt(self, alt_setting: int) -> Optional[Image]:
        """first image for the alternate setting, None if there is none"""
        for image in self.images:
            if image.target_prefix.bAlternateSetting == alt_setting:
                return image
        return None

    def find_image_by_name(self, name: str) -> Optional[Image]:
        """first image with the target name, None if there is none"""
        for image in self.images:
            if image.target_prefix.szTargetName == name:
                return image
        return None


__all__ = (
    'DFUSE_BCD',
    'PREFIX_LENGTH',
    'TARGET_PREFIX_LENGTH',
    'TARGET_NAME_LENGTH',
    'IMAGE_ELEMENT_LENGTH',
    'DFUSE_PREFIX',
    'DFUSE_TARGET_PREFIX',
    'DFUSE_IMAGE_ELEMENT',
    'decode_c_string',
    'detect',
    'Prefix',
    'TargetPrefix',
    'ImageElement',
    'Image',
    'DfuSeContent',
)
