"""
DFU file suffix, see DFU 1.1 specification, appendix B
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
from dataclasses import dataclass

from construct import Struct, Int8ul, Int16ul, Int32ul, Bytes

from pydfufile.cursor import file_size, read_at
from pydfufile.exceptions import DataError, InsufficientFileSize, InvalidSuffixSignature
from pydfufile.logger import logger

_logger = logger.getChild(__name__.rsplit('.', maxsplit=1)[-1])

SUFFIX_LENGTH = 16
SUFFIX_SIGNATURE = "UFD"
SUFFIX_CRC_OFFSET = 12
DFU_BCD = 0x0100

DFU_SUFFIX = Struct(
    "bcdDevice" / Int16ul,
    "idProduct" / Int16ul,
    "idVendor" / Int16ul,
    "bcdDFU" / Int16ul,
    "ucDfuSignature" / Bytes(3),
    "bLength" / Int8ul,
    "dwCRC" / Int32ul,
)


# pylint: disable=invalid-name
@dataclass
class Suffix:
    """File suffix containing the metadata"""
    bcdDevice: int = 0xffff  # wildcard value
    idProduct: int = 0xffff  # wildcard value
    idVendor: int = 0xffff  # wildcard value
    bcdDFU: int = DFU_BCD
    ucDfuSignature: str = SUFFIX_SIGNATURE
    bLength: int = SUFFIX_LENGTH
    dwCRC: int = 0

    def __repr__(self) -> str:
        return (f"Suffix("
                f"bcdDevice=0x{self.bcdDevice:04x}, "
                f"idProduct=0x{self.idProduct:04x}, "
                f"idVendor=0x{self.idVendor:04x}, "
                f"bcdDFU=0x{self.bcdDFU:04x}, "
                f"ucDfuSignature={self.ucDfuSignature!r}, "
                f"bLength={self.bLength}, "
                f"dwCRC=0x{self.dwCRC:08x})")

    @staticmethod
    def from_bytes(data: [bytes, bytearray]) -> 'Suffix':
        """parse bytes to a Suffix, the signature is not checked"""
        if len(data) != SUFFIX_LENGTH:
            raise DataError(f"DFU suffix must be {SUFFIX_LENGTH} bytes, got {len(data)}")
        parsed = DFU_SUFFIX.parse(bytes(data))
        return Suffix(
            bcdDevice=parsed.bcdDevice,
            idProduct=parsed.idProduct,
            idVendor=parsed.idVendor,
            bcdDFU=parsed.bcdDFU,
            ucDfuSignature=parsed.ucDfuSignature.decode('utf-8', errors='replace'),
            bLength=parsed.bLength,
            dwCRC=parsed.dwCRC,
        )

    @staticmethod
    def from_file(fp: io.IOBase) -> 'Suffix':
        """reads the suffix from the last bytes of a file"""
        size = file_size(fp)
        if size < SUFFIX_LENGTH:
            raise InsufficientFileSize("File size is too small to contain suffix")

        suffix = Suffix.from_bytes(read_at(fp, size - SUFFIX_LENGTH, SUFFIX_LENGTH))

        if suffix.ucDfuSignature != SUFFIX_SIGNATURE:
            raise InvalidSuffixSignature
        if suffix.bLength != SUFFIX_LENGTH:
            _logger.warning(f"Unsupported DFU suffix length {suffix.bLength}")

        _logger.debug(f"DFU suffix version 0x{suffix.bcdDFU:04x}")
        return suffix


__all__ = (
    'SUFFIX_LENGTH',
    'SUFFIX_SIGNATURE',
    'SUFFIX_CRC_OFFSET',
    'DFU_BCD',
    'DFU_SUFFIX',
    'Suffix',
)
