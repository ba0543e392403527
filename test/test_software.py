#
# This file is part of LiteCRC.
#
# Copyright (c) 2026 LiteCRC Developers
# SPDX-License-Identifier: BSD-2-Clause

import zlib
import random
import unittest

from litecrc.common import *
from litecrc.software.crc32 import *

class TestSoftware(unittest.TestCase):
    def test_byte_step_bit_serial(self):
        # One byte step is 8 iterations of the bit-serial LFSR.
        state = 0x12345678
        byte  = 0xa5
        ref   = state
        for n in range(8):
            bit = (byte >> n) & 0b1
            ref = (ref >> 1) ^ (CRC32_POLYNOM_REFLECTED if (ref ^ bit) & 0b1 else 0)
        self.assertEqual(crc32_byte_step(state, byte), ref)

    def test_polynom_reflected(self):
        reflected = int("{:032b}".format(CRC32_POLYNOM)[::-1], 2)
        self.assertEqual(reflected, CRC32_POLYNOM_REFLECTED)

    def test_byte_step_zlib(self):
        for byte in range(256):
            self.assertEqual(crc32_finalize(crc32_byte_step(CRC32_INIT, byte)), zlib.crc32(bytes([byte])))

    def test_crc32_ethernet(self):
        data = bytes([0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07, 0x08])
        self.assertEqual(crc32(data), zlib.crc32(data))
        self.assertEqual(crc32(b"123456789"), 0xcbf43926)
        self.assertEqual(crc32(b""), 0x00000000)

    def test_block_update_skips_absent_bytes(self):
        data = bytes([0x11, 0x22, 0x33, 0x44, 0x55, 0x66, 0x77, 0x88])
        keep = 0b10100101
        crc  = crc32_finalize(crc32_block_update(CRC32_INIT, data, keep))
        self.assertEqual(crc, zlib.crc32(bytes([0x11, 0x33, 0x66, 0x88])))

    def test_block_update_int_and_bytes(self):
        data = bytes(range(8))
        self.assertEqual(
            crc32_block_update(CRC32_INIT, data, 0xff),
            crc32_block_update(CRC32_INIT, int.from_bytes(data, "little"), 0xff, n_bytes=8))

    def test_block_update_all_absent(self):
        self.assertEqual(crc32_block_update(0xdeadbeef, bytes(8), 0x00), 0xdeadbeef)

    def test_block_update_split_equivalence(self):
        # Two 4-byte updates chained == one 8-byte update, for every presence mask.
        prng = random.Random(42)
        for keep in range(256):
            for _ in range(4):
                seed  = prng.getrandbits(32)
                data  = prng.getrandbits(64)
                full  = crc32_block_update(seed, data, keep, n_bytes=8)
                low   = crc32_block_update(seed, data & 0xffffffff, keep & 0xf, n_bytes=4)
                split = crc32_block_update(low, data >> 32, keep >> 4, n_bytes=4)
                self.assertEqual(split, full)

    def test_block_update_any_split(self):
        prng = random.Random(7)
        for _ in range(64):
            seed = prng.getrandbits(32)
            data = prng.getrandbits(64)
            keep = prng.getrandbits(8)
            full = crc32_block_update(seed, data, keep, n_bytes=8)
            for chunk in [1, 2, 4]:
                crc = seed
                for i in range(0, 8, chunk):
                    crc = crc32_block_update(crc,
                        data    = data >> 8*i,
                        keep    = (keep >> i) & (2**chunk - 1),
                        n_bytes = chunk)
                self.assertEqual(crc, full)

    def test_split_beats(self):
        payload = bytes(range(20))
        beats   = split_beats(payload, data_width=64)
        self.assertEqual(len(beats), 3)
        self.assertEqual([beat.last for beat in beats], [False, False, True])
        self.assertEqual([beat.keep for beat in beats], [0xff, 0xff, 0x0f])
        self.assertEqual(b"".join(beat_bytes(beat.data, beat.keep, 8) for beat in beats), payload)

    def test_split_beats_empty(self):
        self.assertEqual(split_beats(b"", data_width=32), [Beat(data=0, keep=0, last=True)])

if __name__ == '__main__':
        unittest.main()
