#
# This file is part of LiteCRC.
#
# Copyright (c) 2026 LiteCRC Developers
# SPDX-License-Identifier: BSD-2-Clause

"""Reference CRC32 functions.

Pure functions over integers implementing the reflected (LSB-first) IEEE 802.3 CRC32, byte by
byte. They are the reference for the gateware (which unrolls the same bit-serial algorithm into
XOR networks) and the building blocks of the behavioral model.
"""

from collections import namedtuple

from litecrc.common import *

# Beat ---------------------------------------------------------------------------------------------

Beat = namedtuple("Beat", ["data", "keep", "last"])
Beat.__doc__ = """Beat of a packet.

data : int
    Beat data, byte i on bits [8*i:8*i+8].
keep : int
    Presence mask, bit i set when byte i is part of the packet.
last : bool
    Last beat of the packet.
"""

# Byte/Block Update --------------------------------------------------------------------------------

def crc32_byte_step(state, byte):
    """Reduce one byte into the CRC32 state (8 iterations, LSB first)."""
    for n in range(8):
        if (state ^ (byte >> n)) & 0b1:
            state = (state >> 1) ^ CRC32_POLYNOM_REFLECTED
        else:
            state = (state >> 1)
    return state

def crc32_block_update(seed, data, keep, n_bytes=None):
    """Fold crc32_byte_step over the present bytes of a block.

    Parameters
    ----------
    seed : int
        CRC32 state before the block.
    data : int or bytes
        Block data, byte i on bits [8*i:8*i+8] when given as an int.
    keep : int
        Presence mask, bytes with a cleared bit leave the state unchanged.
    n_bytes : int, optional
        Number of bytes of the block (required when data is an int).
    """
    if isinstance(data, (bytes, bytearray)):
        n_bytes = len(data)
        data    = int.from_bytes(data, "little")
    state = seed
    for i in range(n_bytes):
        if (keep >> i) & 0b1:
            state = crc32_byte_step(state, (data >> 8*i) & 0xff)
    return state

def crc32_finalize(state):
    return state ^ CRC32_XOROUT

def crc32(data, init=CRC32_INIT):
    """IEEE 802.3 CRC32 of a byte string."""
    return crc32_finalize(crc32_block_update(init, bytes(data), keep=2**len(data) - 1))

# Helpers ------------------------------------------------------------------------------------------

def split_beats(payload, data_width=CRC_DEFAULT_DATA_WIDTH):
    """Split a packet payload into beats, the last one possibly partial."""
    n_bytes = data_width//8
    payload = bytes(payload)
    beats   = []
    for offset in range(0, max(len(payload), 1), n_bytes):
        chunk = payload[offset:offset + n_bytes]
        beats.append(Beat(
            data = int.from_bytes(chunk, "little"),
            keep = 2**len(chunk) - 1,
            last = (offset + n_bytes) >= len(payload),
        ))
    return beats

def beat_bytes(data, keep, n_bytes):
    """Return the present bytes of a beat."""
    return bytes((data >> 8*i) & 0xff for i in range(n_bytes) if (keep >> i) & 0b1)
