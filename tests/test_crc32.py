import random
import unittest
import zlib

from pydfufile.crc32 import crc32, crc32_byte, crc32_table


class TestCrc32(unittest.TestCase):

    def test_crc32_byte(self):
        result = crc32_byte(0, 0)
        self.assertEqual(result, 0x0)
        self.assertEqual(crc32_byte(0, 1), crc32_table[1])

    def test_table(self):
        self.assertEqual(len(crc32_table), 256)
        self.assertEqual(crc32_table[128], 0xedb88320)

    def test_check_value(self):
        self.assertEqual(crc32(b"123456789"), 0xcbf43926)

    def test_empty(self):
        self.assertEqual(crc32(b""), 0)
        self.assertEqual(crc32(b"", 0x12345678), 0x12345678)

    def test_matches_zlib(self):
        data = bytes(range(256)) * 3
        self.assertEqual(crc32(data), zlib.crc32(data))

    def test_chunk_size_independent(self):
        rnd = random.Random(1234)
        data = bytes(rnd.getrandbits(8) for _ in range(10000))
        whole = crc32(data)

        for _ in range(5):
            cuts = sorted(rnd.sample(range(1, len(data)), 7))
            crc = 0
            start = 0
            for end in cuts + [len(data)]:
                crc = crc32(data[start:end], crc)
                start = end
            self.assertEqual(crc, whole)

        self.assertEqual(crc32(data), whole)

    def test_accepts_memoryview(self):
        data = bytearray(b"firmware")
        self.assertEqual(crc32(memoryview(data)), crc32(bytes(data)))


if __name__ == '__main__':
    unittest.main()
