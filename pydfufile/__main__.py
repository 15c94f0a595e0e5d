"""
pydfufile
Dumps the structure of a DFU file and its calculated CRC32
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
import argparse
import importlib.metadata
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pydfufile import __copyright__
from pydfufile.content import ContentType
from pydfufile.dfu_file import DfuFile
from pydfufile.exceptions import UsageError, SysExit, except_and_safe_exit
from pydfufile.logger import logger, set_verbose

try:
    __version__ = importlib.metadata.version("pydfufile")
except importlib.metadata.PackageNotFoundError:
    __version__ = 'UNKNOWN'

_logger = logger.getChild('dump')

VERSION = (f'pydfufile " v{__version__} "\n {__copyright__[0]}\n'
           f'This program is Free Software and has ABSOLUTELY NO WARRANTY\n\n')


def add_cli_options(parser: argparse.ArgumentParser) -> None:
    """Add cli options"""
    parser.add_argument('-V', '--version', action='version',
                        version=VERSION,
                        help='Print the version number')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print parsing details')
    parser.add_argument('file', action='store', metavar='<file>',
                        help="DFU file to inspect")


def suffix_table(dfu_file: DfuFile) -> Table:
    """Suffix properties"""
    suffix = dfu_file.suffix
    table = Table(title=f"{escape(dfu_file.path)}: {dfu_file.content}")
    table.add_column("Suffix field")
    table.add_column("Value")
    table.add_row("BCD device", f"0x{suffix.bcdDevice:04X}")
    table.add_row("Product ID", f"0x{suffix.idProduct:04X}")
    table.add_row("Vendor ID", f"0x{suffix.idVendor:04X}")
    table.add_row("BCD DFU", f"0x{suffix.bcdDFU:04X}")
    table.add_row("Signature", suffix.ucDfuSignature)
    table.add_row("Length", str(suffix.bLength))
    table.add_row("CRC", f"0x{suffix.dwCRC:08X}")
    return table


def images_table(dfu_file: DfuFile) -> Table:
    """DfuSe prefix, images and elements"""
    prefix = dfu_file.content.prefix
    table = Table(title=f"DfuSe v{prefix.bVersion}, "
                        f"{prefix.bTargets} images, "
                        f"{prefix.DFUImageSize} bytes")
    table.add_column("Alt")
    table.add_column("Name")
    table.add_column("Target size", justify="right")
    table.add_column("Element")
    table.add_column("Address")
    table.add_column("End")
    table.add_column("Size", justify="right")
    table.add_column("Offset", justify="right")

    for image in dfu_file.images:
        target = image.target_prefix
        name = escape(target.szTargetName) if target.bTargetNamed else ""
        if not image.image_elements:
            table.add_row(str(target.bAlternateSetting), name, str(target.dwTargetSize))
        for index, element in enumerate(image.image_elements):
            head = (str(target.bAlternateSetting), name, str(target.dwTargetSize)) \
                if index == 0 else ("", "", "")
            table.add_row(*head,
                          str(index),
                          f"0x{element.dwElementAddress:08X}",
                          f"0x{element.end_address:08X}",
                          str(element.dwElementSize),
                          str(element.data_position))
    return table


@except_and_safe_exit(_logger)
def main() -> None:
    """cli entry point"""
    parser = argparse.ArgumentParser(
        prog='pydfufile',
        exit_on_error=False,
    )
    add_cli_options(parser)

    try:
        args = parser.parse_args()
    except argparse.ArgumentError as err:
        parser.print_help()
        raise UsageError(str(err)) from err

    set_verbose(args.verbose)

    console = Console()
    with DfuFile.open(args.file) as dfu_file:
        console.print(suffix_table(dfu_file))
        if dfu_file.content_type == ContentType.DFUSE:
            console.print(images_table(dfu_file))

        crc = dfu_file.calc_crc()
        status = "[green]OK" if crc == dfu_file.suffix.dwCRC else "[red]MISMATCH"
        console.print(f"Calculated CRC32: 0x{crc:08X} {status}")

    sys.exit(SysExit.EX_OK)


if __name__ == '__main__':
    main()
