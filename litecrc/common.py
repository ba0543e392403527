#
# This file is part of LiteCRC.
#
# Copyright (c) 2026 LiteCRC Developers
# SPDX-License-Identifier: BSD-2-Clause

from litex.soc.interconnect import stream

# CRC32 (IEEE 802.3) -------------------------------------------------------------------------------

CRC32_WIDTH             = 32
CRC32_POLYNOM           = 0x04c11db7
CRC32_POLYNOM_REFLECTED = 0xedb88320
CRC32_INIT              = 0xffffffff
CRC32_XOROUT            = 0xffffffff

# Engine defaults ----------------------------------------------------------------------------------

CRC_DATA_WIDTHS         = [8, 16, 32, 64]
CRC_DEFAULT_DATA_WIDTH  = 64
CRC_DEFAULT_STAGES      = 2

# Layouts ------------------------------------------------------------------------------------------

def crc_sink_description(data_width):
    payload_layout = [
        ("data", data_width),
        ("keep", data_width//8),
    ]
    return stream.EndpointDescription(payload_layout)

def crc_source_description(data_width):
    payload_layout = [
        ("data", data_width),
        ("keep", data_width//8),
        ("crc",  CRC32_WIDTH),
    ]
    return stream.EndpointDescription(payload_layout)

def crc_entry_layout(data_width):
    return [
        ("data",   data_width),
        ("keep",   data_width//8),
        ("valid",  1),
        ("last",   1),
        ("enable", 1),
        ("crc",    CRC32_WIDTH),
    ]
