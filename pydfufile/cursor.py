"""
Positional helpers shared by the DFU record parsers
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

from pydfufile.exceptions import _IOError


@dataclass
class Cursor:
    """
    File position as offset from the start,
    shared by nested parsers and advanced by each of them
    """
    offset: int = 0

    def advance(self, count: int) -> int:
        """move forward by count bytes, returns the new offset"""
        self.offset += count
        return self.offset


def file_size(fp: io.IOBase) -> int:
    """size of a seekable file object, leaves it positioned at the end"""
    try:
        return fp.seek(0, io.SEEK_END)
    except OSError as e:
        raise _IOError(f"Could not seek to end of file: {e}") from e


def read_exact(fp: io.IOBase, size: int) -> bytes:
    """read exactly size bytes from the current position"""
    try:
        data = fp.read(size)
    except OSError as e:
        raise _IOError(f"Error reading {size} bytes: {e}") from e
    if data is None or len(data) != size:
        raise _IOError(f"Unexpected end of file: "
                       f"wanted {size} bytes, got {len(data or b'')}")
    return data


def read_at(fp: io.IOBase, offset: int, size: int) -> bytes:
    """seek to offset and read exactly size bytes"""
    if offset < 0:
        raise _IOError(f"Invalid seek to negative offset {offset}")
    try:
        fp.seek(offset, io.SEEK_SET)
    except OSError as e:
        raise _IOError(f"Could not seek to offset {offset}: {e}") from e
    return read_exact(fp, size)


__all__ = (
    'Cursor',
    'file_size',
    'read_exact',
    'read_at',
)
