import io
import struct
import unittest

from dfu_samples import (build_dfuse, build_element, build_plain, build_target,
                         TWO_IMAGES, DFUSE_BCD)
from pydfufile import dfuse
from pydfufile.cursor import Cursor
from pydfufile.dfuse import (DfuSeContent, Image, ImageElement, Prefix, TargetPrefix,
                             decode_c_string, IMAGE_ELEMENT_LENGTH, PREFIX_LENGTH,
                             TARGET_PREFIX_LENGTH)
from pydfufile.exceptions import (DataError, InsufficientFileSize, InvalidPrefixSignature,
                                  InvalidTargetPrefixSignature, _IOError)


class TestDecodeCString(unittest.TestCase):

    def test_trims_at_null(self):
        region = b"Main" + b"\x00" + b"\xa5" * 250
        self.assertEqual(len(region), 255)
        self.assertEqual(decode_c_string(region), "Main")

    def test_no_null(self):
        region = bytes(ord('A') + i % 26 for i in range(255))
        name = decode_c_string(region)
        self.assertEqual(len(name), 255)
        self.assertEqual(name, region.decode())

    def test_empty(self):
        self.assertEqual(decode_c_string(bytes(255)), "")

    def test_max_length(self):
        self.assertEqual(decode_c_string(b"x" * 300), "x" * 255)
        self.assertEqual(decode_c_string(b"abcdef", max_length=3), "abc")


class TestPrefix(unittest.TestCase):

    def test_from_bytes(self):
        prefix = Prefix.from_bytes(struct.pack('<5sBIB', b'DfuSe', 1, 0x12345678, 3))
        self.assertEqual(prefix.szSignature, "DfuSe")
        self.assertEqual(prefix.bVersion, 1)
        self.assertEqual(prefix.DFUImageSize, 0x12345678)
        self.assertEqual(prefix.bTargets, 3)

    def test_from_file(self):
        prefix = Prefix.from_file(io.BytesIO(build_dfuse(TWO_IMAGES)))
        self.assertEqual(prefix.bTargets, 2)

    def test_invalid_signature(self):
        data = build_dfuse(TWO_IMAGES, signature=b'DfuSx')
        with self.assertRaises(InvalidPrefixSignature):
            Prefix.from_file(io.BytesIO(data))

    def test_too_short(self):
        data = struct.pack('<5sBIB', b'DfuSe', 1, 0, 0) + bytes(15)
        with self.assertRaises(InsufficientFileSize):
            Prefix.from_file(io.BytesIO(data))

    def test_unsupported_version_warns(self):
        data = build_dfuse(TWO_IMAGES, version=2)
        with self.assertLogs('pydfufile', level='WARNING'):
            prefix = Prefix.from_file(io.BytesIO(data))
        self.assertEqual(prefix.bVersion, 2)

    def test_wrong_length(self):
        with self.assertRaises(DataError):
            Prefix.from_bytes(bytes(10))


class TestTargetPrefix(unittest.TestCase):

    def test_from_bytes(self):
        raw = build_target(5, "ST...", [])
        target = TargetPrefix.from_bytes(raw)
        self.assertEqual(target.szSignature, "Target")
        self.assertEqual(target.bAlternateSetting, 5)
        self.assertEqual(target.bTargetNamed, 1)
        self.assertEqual(target.szTargetName, "ST...")
        self.assertEqual(target.dwTargetSize, 0)
        self.assertEqual(target.dwNbElements, 0)

    def test_name_with_garbage(self):
        raw = build_target(0, b"Main\x00" + b"\xff" * 250, [])
        self.assertEqual(TargetPrefix.from_bytes(raw).szTargetName, "Main")

    def test_name_not_utf8(self):
        raw = build_target(0, b"\xa5" * 255, [])
        target = TargetPrefix.from_bytes(raw)
        self.assertEqual(target.szTargetName, "\ufffd" * 255)
        self.assertEqual(target.dwNbElements, 0)

    def test_from_file_advances_cursor(self):
        raw = bytes(7) + build_target(1, "Flash", [(0x08000000, bytes(16))])
        cursor = Cursor(7)
        target = TargetPrefix.from_file(io.BytesIO(raw), cursor)
        self.assertEqual(cursor.offset, 7 + TARGET_PREFIX_LENGTH)
        self.assertEqual(target.dwNbElements, 1)
        self.assertEqual(target.dwTargetSize, IMAGE_ELEMENT_LENGTH + 16)

    def test_invalid_signature(self):
        raw = build_target(1, "Flash", [], signature=b'Tarxet')
        cursor = Cursor()
        with self.assertRaises(InvalidTargetPrefixSignature):
            TargetPrefix.from_file(io.BytesIO(raw), cursor)
        self.assertEqual(cursor.offset, 0)

    def test_truncated(self):
        raw = build_target(1, "Flash", [])[:100]
        with self.assertRaises(_IOError):
            TargetPrefix.from_file(io.BytesIO(raw), Cursor())


class TestImageElement(unittest.TestCase):

    def setUp(self):
        self.data = (build_element(0x08000000, b'\x11' * 10)
                     + build_element(0x08000100, b'\x22' * 10))
        self.fp = io.BytesIO(self.data)

    def test_from_bytes(self):
        element = ImageElement.from_bytes(struct.pack('<II', 0x08004000, 0x200), 42)
        self.assertEqual(element.dwElementAddress, 0x08004000)
        self.assertEqual(element.dwElementSize, 0x200)
        self.assertEqual(element.data_position, 42)
        self.assertEqual(element.end_address, 0x08004200)

    def test_from_file_advances_cursor(self):
        cursor = Cursor()
        first = ImageElement.from_file(self.fp, cursor)
        self.assertEqual(first.data_position, IMAGE_ELEMENT_LENGTH)
        self.assertEqual(cursor.offset, IMAGE_ELEMENT_LENGTH + 10)

        second = ImageElement.from_file(self.fp, cursor)
        self.assertEqual(second.dwElementAddress, 0x08000100)
        self.assertEqual(second.data_position, 2 * IMAGE_ELEMENT_LENGTH + 10)
        self.assertEqual(cursor.offset, len(self.data))

    def test_read_at(self):
        element = ImageElement.from_file(self.fp, Cursor())
        buffer = bytearray(10)
        self.assertEqual(element.read_at(self.fp, 0, buffer), 10)
        self.assertEqual(bytes(buffer), b'\x11' * 10)

    def test_read_at_clips_to_element(self):
        element = ImageElement.from_file(self.fp, Cursor())
        buffer = bytearray(64)
        count = element.read_at(self.fp, 4, buffer)
        self.assertEqual(count, 6)
        self.assertEqual(bytes(buffer[:count]), b'\x11' * 6)

    def test_read_at_end_of_element(self):
        element = ImageElement.from_file(self.fp, Cursor())
        self.assertEqual(element.read_at(self.fp, 10, bytearray(8)), 0)
        self.assertEqual(element.read_at(self.fp, 50, bytearray(8)), 0)

    def test_read_at_end_of_file(self):
        cursor = Cursor(IMAGE_ELEMENT_LENGTH + 10)
        element = ImageElement.from_file(self.fp, cursor)
        buffer = bytearray(32)
        self.assertEqual(element.read_at(self.fp, 2, buffer), 8)
        self.assertEqual(bytes(buffer[:8]), b'\x22' * 8)

    def test_read_at_memoryview(self):
        element = ImageElement.from_file(self.fp, Cursor())
        buffer = bytearray(20)
        self.assertEqual(element.read_at(self.fp, 0, memoryview(buffer)[5:9]), 4)
        self.assertEqual(bytes(buffer[5:9]), b'\x11' * 4)


class TestImage(unittest.TestCase):

    def test_from_file(self):
        raw = build_target(3, "Flash", [(0x08000000, bytes(4)), (0x08001000, bytes(12))])
        cursor = Cursor()
        image = Image.from_file(io.BytesIO(raw), cursor)
        self.assertEqual(cursor.offset, len(raw))
        self.assertEqual(len(image.image_elements), 2)
        self.assertEqual(image.image_elements[1].dwElementAddress, 0x08001000)
        self.assertEqual(image.elements_size, image.target_prefix.dwTargetSize)

    def test_oversized_elements_warn(self):
        raw = bytearray(build_target(0, "Flash", [(0x08000000, bytes(32))]))
        raw[266:270] = struct.pack('<I', 4)
        with self.assertLogs('pydfufile', level='WARNING'):
            image = Image.from_file(io.BytesIO(bytes(raw)), Cursor())
        self.assertEqual(image.image_elements[0].dwElementSize, 32)

    def test_missing_element(self):
        raw = bytearray(build_target(0, "Flash", [(0x08000000, bytes(4))]))
        raw[270:274] = struct.pack('<I', 2)
        with self.assertRaises(_IOError):
            Image.from_file(io.BytesIO(bytes(raw)), Cursor())


class TestDetect(unittest.TestCase):

    def test_dfuse(self):
        self.assertTrue(dfuse.detect(io.BytesIO(build_dfuse(TWO_IMAGES))))

    def test_plain(self):
        self.assertFalse(dfuse.detect(io.BytesIO(build_plain(bytes(64)))))

    def test_dfuse_signature_with_plain_bcd(self):
        data = build_dfuse(TWO_IMAGES, bcd_dfu=0x0100)
        self.assertFalse(dfuse.detect(io.BytesIO(data)))

    def test_dfuse_bcd_without_signature(self):
        data = build_plain(bytes(64), bcd_dfu=DFUSE_BCD)
        self.assertFalse(dfuse.detect(io.BytesIO(data)))


class TestDfuSeContent(unittest.TestCase):

    def setUp(self):
        self.content = DfuSeContent.from_file(io.BytesIO(build_dfuse(TWO_IMAGES)))

    def test_images(self):
        self.assertEqual(str(self.content), "DfuSe v1")
        self.assertEqual(len(self.content.images), 2)
        self.assertEqual([i.target_prefix.bAlternateSetting for i in self.content.images], [0, 1])
        first = self.content.images[0].image_elements[0]
        self.assertEqual(first.data_position, PREFIX_LENGTH + TARGET_PREFIX_LENGTH
                         + IMAGE_ELEMENT_LENGTH)

    def test_find_image_by_alt(self):
        self.assertIs(self.content.find_image_by_alt(1), self.content.images[1])
        self.assertIsNone(self.content.find_image_by_alt(7))

    def test_find_image_by_name(self):
        self.assertIs(self.content.find_image_by_name("Option Bytes"), self.content.images[1])
        self.assertIsNone(self.content.find_image_by_name("Option"))

    def test_first_match_wins(self):
        data = build_dfuse([(0, "A", [(0, b'1')]), (0, "A", [(0, b'2')])])
        content = DfuSeContent.from_file(io.BytesIO(data))
        self.assertIs(content.find_image_by_alt(0), content.images[0])
        self.assertIs(content.find_image_by_name("A"), content.images[0])

    def test_no_images(self):
        content = DfuSeContent.from_file(io.BytesIO(build_dfuse([])))
        self.assertEqual(content.images, [])
        self.assertIsNone(content.find_image_by_alt(0))

    def test_declared_size_mismatch_warns(self):
        data = bytearray(build_dfuse(TWO_IMAGES))
        data[6:10] = struct.pack('<I', len(data))
        with self.assertLogs('pydfufile', level='WARNING') as logs:
            content = DfuSeContent.from_file(io.BytesIO(bytes(data)))
        self.assertTrue(any("DfuSe prefix declares" in line for line in logs.output))
        self.assertEqual(content.prefix.DFUImageSize, len(data))
        self.assertEqual(len(content.images), 2)

    def test_element_running_into_suffix_warns(self):
        data = bytearray(build_dfuse([(0, "Flash", [(0x08000000, bytes(8))])]))
        size_field = PREFIX_LENGTH + TARGET_PREFIX_LENGTH + 4
        data[size_field:size_field + 4] = struct.pack('<I', 8 + 16)
        with self.assertLogs('pydfufile', level='WARNING') as logs:
            content = DfuSeContent.from_file(io.BytesIO(bytes(data)))
        self.assertTrue(any("DfuSe images end at offset" in line for line in logs.output))
        element = content.images[0].image_elements[0]
        self.assertEqual(element.dwElementSize, 24)
        self.assertEqual(element.end_address, 0x08000018)


if __name__ == '__main__':
    unittest.main()
