"""
DFU file content variants
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
from dataclasses import dataclass
from enum import IntEnum


class ContentType(IntEnum):
    """Dfu file content type"""
    PLAIN = 0
    DFUSE = 1


@dataclass
class PlainContent:
    """
    Standard file with raw content,
    everything before the suffix is firmware
    """
    content_type = ContentType.PLAIN

    def __str__(self) -> str:
        return "Plain"

    @property
    def images(self) -> tuple:
        """plain files carry no images"""
        return ()

    def find_image_by_alt(self, alt_setting: int) -> None:  # pylint: disable=unused-argument
        return None

    def find_image_by_name(self, name: str) -> None:  # pylint: disable=unused-argument
        return None


__all__ = (
    'ContentType',
    'PlainContent',
)
