#
# This file is part of LiteCRC.
#
# Copyright (c) 2026 LiteCRC Developers
# SPDX-License-Identifier: BSD-2-Clause

from migen import *

from litex.gen import *

from litex.soc.interconnect import stream
from litex.soc.interconnect.csr import *

from litecrc.common import *
from litecrc.crc import CRC32Engine

class LiteCRC32(LiteXModule):
    """Pipelined IEEE 802.3 CRC32 core.

    Wraps CRC32Engine and exposes its standing configuration (crc_init/crc_enable) and its
    reinitialization through CSRs.
    """
    def __init__(self, data_width=CRC_DEFAULT_DATA_WIDTH, stages=CRC_DEFAULT_STAGES, with_csr=True):
        self.sink   = stream.Endpoint(crc_sink_description(data_width))
        self.source = stream.Endpoint(crc_source_description(data_width))

        # # #

        # Engine.
        self.engine = engine = CRC32Engine(data_width=data_width, stages=stages)
        self.comb += [
            self.sink.connect(engine.sink),
            engine.source.connect(self.source),
        ]

        # CSRs.
        if with_csr:
            self.add_csr()

    def add_csr(self):
        self.crc_init   = CSRStorage(32, reset=CRC32_INIT, description="CRC initial value of each packet.")
        self.crc_enable = CSRStorage(reset=1, description="CRC computation enable (Data is only forwarded when 0).")
        self.reset      = CSR()

        # # #

        self.comb += [
            self.engine.crc_init.eq(self.crc_init.storage),
            self.engine.crc_enable.eq(self.crc_enable.storage),
            self.engine.reset.eq(self.reset.re),
        ]
