#
# This file is part of LiteCRC.
#
# Copyright (c) 2026 LiteCRC Developers
# SPDX-License-Identifier: BSD-2-Clause

from functools import reduce
from operator import xor

from migen import *

from litex.gen import *

from litex.soc.interconnect import stream

from litecrc.common import *

# CRC32 Byte Step ----------------------------------------------------------------------------------

class CRC32ByteStep(LiteXModule):
    """CRC32 byte reduction.

    Combinatorial reduction of one byte into the CRC32 state: the reflected bit-serial LFSR is
    unrolled over the 8 data bits (LSB first) into one XOR equation per state bit.
    """
    def __init__(self):
        self.data     = Signal(8)           # Data (Input).
        self.crc_prev = Signal(CRC32_WIDTH) # CRC Previous (Input).
        self.crc_next = Signal(CRC32_WIDTH) # CRC Next (Output).

        # # #

        for i, taps in enumerate(self.taps()):
            xors = []
            for t, n in sorted(taps):
                if t == "state":
                    xors += [self.crc_prev[n]]
                elif t == "din":
                    xors += [self.data[n]]
            self.comb += self.crc_next[i].eq(reduce(xor, xors) if xors else 0)

    @staticmethod
    def taps():
        """Return, for each CRC bit, the set of state/data bits XORed into it."""
        crc_bits = [{("state", i)} for i in range(CRC32_WIDTH)]
        for n in range(8):
            feedback = crc_bits.pop(0) ^ {("din", n)}
            crc_bits.append(set())
            for bit in range(CRC32_WIDTH):
                if (CRC32_POLYNOM_REFLECTED >> bit) & 0b1:
                    crc_bits[bit] = crc_bits[bit] ^ feedback
        return crc_bits

# CRC32 Block Update -------------------------------------------------------------------------------

class CRC32BlockUpdate(LiteXModule):
    """CRC32 masked block update.

    Folds the present bytes of a block (in ascending order) into the CRC32 state, absent bytes
    leave the state unchanged.

    Parameters
    ----------
    n_bytes : int
        Number of bytes of the block.

    Attributes
    ----------
    data : in
        Block data, byte i on bits [8*i:8*i+8].
    keep : in
        Presence mask.
    crc_prev : in
        CRC32 state before the block.
    crc_next : out
        CRC32 state after the block.
    """
    def __init__(self, n_bytes):
        self.data     = Signal(8*n_bytes)
        self.keep     = Signal(n_bytes)
        self.crc_prev = Signal(CRC32_WIDTH)
        self.crc_next = Signal(CRC32_WIDTH)

        # # #

        crc = self.crc_prev
        for i in range(n_bytes):
            step     = CRC32ByteStep()
            crc_byte = Signal(CRC32_WIDTH)
            self.submodules += step
            self.comb += [
                step.data.eq(self.data[8*i:8*(i+1)]),
                step.crc_prev.eq(crc),
                crc_byte.eq(Mux(self.keep[i], step.crc_next, crc)),
            ]
            crc = crc_byte
        self.comb += self.crc_next.eq(crc)

# CRC32 Flow Control -------------------------------------------------------------------------------

class CRC32FlowControl(LiteXModule):
    """Ready/Valid flow control of the pipeline.

    The pipeline advances when its output register is empty or being accepted by the consumer,
    sink beats are only accepted on cycles the pipeline advances.
    """
    def __init__(self):
        self.sink_valid   = Signal() # Input.
        self.source_valid = Signal() # Input.
        self.source_ready = Signal() # Input.
        self.advance      = Signal() # Output.
        self.sink_ready   = Signal() # Output.
        self.input_fire   = Signal() # Output.
        self.output_fire  = Signal() # Output.

        # # #

        self.comb += [
            self.advance.eq(~self.source_valid | self.source_ready),
            self.sink_ready.eq(self.advance),
            self.input_fire.eq(self.sink_valid & self.advance),
            self.output_fire.eq(self.source_valid & self.source_ready),
        ]

# CRC32 Pipeline -----------------------------------------------------------------------------------

def entry_eq(dst, src, crc):
    return [
        dst.data.eq(src.data),
        dst.keep.eq(src.keep),
        dst.valid.eq(src.valid),
        dst.last.eq(src.last),
        dst.enable.eq(src.enable),
        dst.crc.eq(crc),
    ]

class CRC32Pipeline(LiteXModule):
    """CRC32 evaluation/alignment pipeline.

    The beat is split in `stages` groups of bytes, each evaluated by its own stage. Entry i holds
    the beat with its CRC folded over the groups 0..i, data and flags travel with the CRC so that
    the tail entry always presents a beat with its own complete CRC.

    Attributes
    ----------
    advance : in
        Shift the pipeline.
    entry : in
        New entry (crc field is the seed of the beat, folded by stage 0 on entry).
    entries : out
        Pipeline entries (head first).
    completion : out
        Complete CRC of the beat held by the first entry.
    """
    def __init__(self, data_width, stages):
        n_bytes     = data_width//8
        stage_bytes = n_bytes//stages
        self.advance    = Signal()
        self.entry      = Record(crc_entry_layout(data_width))
        self.entries    = [Record(crc_entry_layout(data_width)) for i in range(stages)]
        self.completion = Signal(CRC32_WIDTH)

        # # #

        def stage_keep(entry, stage):
            keep = entry.keep[stage*stage_bytes:(stage + 1)*stage_bytes]
            return keep & Replicate(entry.enable & entry.valid, stage_bytes)

        def stage_data(entry, stage):
            return entry.data[8*stage*stage_bytes:8*(stage + 1)*stage_bytes]

        # Stage 0: Fold the first bytes of the incoming beat.
        stage0 = CRC32BlockUpdate(stage_bytes)
        self.submodules += stage0
        self.comb += [
            stage0.data.eq(stage_data(self.entry, 0)),
            stage0.keep.eq(stage_keep(self.entry, 0)),
            stage0.crc_prev.eq(self.entry.crc),
        ]
        self.sync += If(self.advance,
            entry_eq(self.entries[0], self.entry, stage0.crc_next)
        )

        # Stage 1..N-1: Fold the next bytes while shifting.
        updates = []
        for stage in range(1, stages):
            update = CRC32BlockUpdate(stage_bytes)
            prev   = self.entries[stage - 1]
            self.submodules += update
            updates.append(update)
            self.comb += [
                update.data.eq(stage_data(prev, stage)),
                update.keep.eq(stage_keep(prev, stage)),
                update.crc_prev.eq(prev.crc),
            ]
            self.sync += If(self.advance,
                entry_eq(self.entries[stage], prev, update.crc_next)
            )

        # Completion of the first entry.
        if stages == 1:
            self.comb += self.completion.eq(self.entries[0].crc)
        elif stages == 2:
            self.comb += self.completion.eq(updates[0].crc_next)
        else:
            remaining = CRC32BlockUpdate(n_bytes - stage_bytes)
            self.submodules += remaining
            self.comb += [
                remaining.data.eq(self.entries[0].data[8*stage_bytes:]),
                remaining.keep.eq(self.entries[0].keep[stage_bytes:] &
                    Replicate(self.entries[0].enable & self.entries[0].valid, n_bytes - stage_bytes)),
                remaining.crc_prev.eq(self.entries[0].crc),
                self.completion.eq(remaining.crc_next),
            ]

# CRC32 Link ---------------------------------------------------------------------------------------

class CRC32Link(LiteXModule):
    """CRC32 cross-beat/cross-packet link.

    Provides the seed of each beat: the initial value for the first beat of a packet, the running
    CRC of the packet otherwise. The previous beat of the packet may still be at the head of the
    pipeline when the next one is accepted, its completed CRC is then forwarded.
    """
    def __init__(self, crc_init=CRC32_INIT):
        self.crc_init   = Signal(CRC32_WIDTH) # Input.
        self.advance    = Signal()            # Input.
        self.fire       = Signal()            # Input.
        self.last       = Signal()            # Input.
        self.head_valid = Signal()            # Input.
        self.head_last  = Signal()            # Input.
        self.completion = Signal(CRC32_WIDTH) # Input.
        self.seed       = Signal(CRC32_WIDTH) # Output.

        self.crc          = Signal(CRC32_WIDTH, reset=crc_init)
        self.packet_start = Signal(reset=1)

        # # #

        self.comb += [
            If(self.packet_start,
                self.seed.eq(self.crc_init)
            ).Elif(self.head_valid,
                self.seed.eq(self.completion)
            ).Else(
                self.seed.eq(self.crc)
            )
        ]
        self.sync += [
            If(self.advance & self.head_valid,
                If(self.head_last,
                    self.crc.eq(self.crc_init)
                ).Else(
                    self.crc.eq(self.completion)
                )
            ),
            If(self.fire,
                self.packet_start.eq(self.last)
            )
        ]

# CRC32 Engine -------------------------------------------------------------------------------------

@ResetInserter()
class CRC32Engine(LiteXModule):
    """Pipelined IEEE 802.3 CRC32 engine.

    Computes the CRC32 of the packets of the sink stream (present bytes only) and forwards the
    beats to the source with a fixed latency of `stages` advancing cycles, the finalized CRC being
    presented with the last beat of each packet (0 on other beats or when computation is disabled).

    Parameters
    ----------
    data_width : int
        Width of the data bus (8, 16, 32 or 64).
    stages : int
        Number of CRC evaluation stages, must divide the number of bytes of the data bus.
    crc_init : int
        Reset value of crc_init.

    Attributes
    ----------
    sink : in
        Beats to checksum (data, keep, last).
    source : out
        Forwarded beats with their crc.
    crc_init : in
        Initial CRC value of each packet.
    crc_enable : in
        CRC computation enable (bypass when 0).
    reset : in
        Engine reinitialization. Beats in flight are dropped, and so is a beat presented on the
        sink during the reset cycle: sink.ready may be high while reset is asserted, the producer
        must not present data until reset is released.
    """
    def __init__(self, data_width=CRC_DEFAULT_DATA_WIDTH, stages=CRC_DEFAULT_STAGES, crc_init=CRC32_INIT):
        assert data_width in CRC_DATA_WIDTHS
        assert stages >= 1 and (data_width//8) % stages == 0
        self.sink       = sink   = stream.Endpoint(crc_sink_description(data_width))
        self.source     = source = stream.Endpoint(crc_source_description(data_width))
        self.crc_init   = Signal(CRC32_WIDTH, reset=crc_init)
        self.crc_enable = Signal(reset=1)

        # # #

        self.flow     = flow     = CRC32FlowControl()
        self.pipeline = pipeline = CRC32Pipeline(data_width, stages)
        self.link     = link     = CRC32Link(crc_init)

        head  = pipeline.entries[0]
        tail  = pipeline.entries[-1]

        # Flow Control.
        self.comb += [
            flow.sink_valid.eq(sink.valid),
            flow.source_valid.eq(tail.valid),
            flow.source_ready.eq(source.ready),
            sink.ready.eq(flow.sink_ready),
        ]

        # Link.
        self.comb += [
            link.crc_init.eq(self.crc_init),
            link.advance.eq(flow.advance),
            link.fire.eq(flow.input_fire),
            link.last.eq(sink.last),
            link.head_valid.eq(head.valid),
            link.head_last.eq(head.last),
            link.completion.eq(pipeline.completion),
        ]

        # Pipeline.
        self.comb += [
            pipeline.advance.eq(flow.advance),
            pipeline.entry.data.eq(sink.data),
            pipeline.entry.keep.eq(sink.keep),
            pipeline.entry.valid.eq(flow.input_fire),
            pipeline.entry.last.eq(flow.input_fire & sink.last),
            pipeline.entry.enable.eq(self.crc_enable),
            pipeline.entry.crc.eq(link.seed),
        ]

        # Output.
        self.comb += [
            source.valid.eq(tail.valid),
            source.last.eq(tail.last),
            source.data.eq(tail.data),
            source.keep.eq(tail.keep),
            If(tail.valid & tail.last & tail.enable,
                source.crc.eq(~tail.crc)
            ).Else(
                source.crc.eq(0)
            )
        ]
