#
# This file is part of LiteCRC.
#
# Copyright (c) 2026 LiteCRC Developers
# SPDX-License-Identifier: BSD-2-Clause

"""Cycle-accurate behavioral model of the CRC32 engine.

Mirrors litecrc.crc.CRC32Engine cycle by cycle: every call to CRC32EngineModel.step() is one clock
cycle, the returned StepResult is what the gateware presents on its outputs during that cycle and
the model state is then committed as the gateware registers would be on the clock edge.
"""

from collections import namedtuple

from litecrc.common import *
from litecrc.software.crc32 import Beat, crc32_block_update, crc32_finalize

# Records ------------------------------------------------------------------------------------------

SourceBeat = namedtuple("SourceBeat", ["data", "keep", "last", "crc"])
StepResult = namedtuple("StepResult", ["sink_ready", "source"])

CRCPipelineEntry = namedtuple("CRCPipelineEntry", ["data", "keep", "valid", "last", "enable", "crc"])

CRC_PIPELINE_BUBBLE = CRCPipelineEntry(data=0, keep=0, valid=False, last=False, enable=False, crc=0)

# Flow Controller ----------------------------------------------------------------------------------

class CRCFlowController:
    """One-deep output buffer backpressure.

    The pipeline only stalls when its output holds a valid entry the consumer has not taken.
    """
    @staticmethod
    def advance(tail, source_ready):
        return (not tail.valid) or bool(source_ready)

    @staticmethod
    def input_fire(sink_valid, advance):
        return bool(sink_valid) and advance

    @staticmethod
    def output_fire(tail, source_ready):
        return tail.valid and bool(source_ready)

# Alignment Pipeline -------------------------------------------------------------------------------

class CRCAlignmentPipeline:
    """N-slot shift pipeline, one CRC evaluation stage per slot.

    Slot i holds the CRC of its beat folded over the bytes of stages 0..i, the tail (slot N-1)
    holds the beat with its complete CRC.
    """
    def __init__(self, data_width, stages):
        self.data_width  = data_width
        self.stages      = stages
        self.n_bytes     = data_width//8
        self.stage_bytes = self.n_bytes//stages
        self.reset()

    def reset(self):
        self.entries = [CRC_PIPELINE_BUBBLE]*self.stages

    @property
    def head(self):
        return self.entries[0]

    @property
    def tail(self):
        return self.entries[-1]

    def stage_update(self, stage, crc, data, keep, enable):
        """Fold the bytes of a stage into crc (no folding when computation is disabled)."""
        shift = stage*self.stage_bytes
        if not enable:
            return crc
        return crc32_block_update(crc,
            data    = data >> 8*shift,
            keep    = (keep >> shift) & (2**self.stage_bytes - 1),
            n_bytes = self.stage_bytes)

    def completion(self):
        """Complete CRC of the head entry (remaining stages applied)."""
        head = self.head
        crc  = head.crc
        for stage in range(1, self.stages):
            crc = self.stage_update(stage, crc, head.data, head.keep, head.enable)
        return crc

    def push(self, entry):
        entries = [entry]
        for stage in range(1, self.stages):
            prev = self.entries[stage - 1]
            entries.append(prev._replace(crc=self.stage_update(stage, prev.crc, prev.data, prev.keep, prev.enable)))
        self.entries = entries

    def emit(self):
        tail = self.tail
        if not tail.valid:
            return None
        crc = crc32_finalize(tail.crc) if (tail.last and tail.enable) else 0
        return SourceBeat(data=tail.data, keep=tail.keep, last=tail.last, crc=crc)

# Link State ---------------------------------------------------------------------------------------

class CRCLinkState:
    """Running CRC across the beats of a packet."""
    def __init__(self, crc_init=CRC32_INIT):
        self.reset(crc_init)

    def reset(self, crc_init):
        self.crc          = crc_init
        self.packet_start = True

    def seed(self, crc_init, head, completion):
        # New packet: start from the initial value.
        if self.packet_start:
            return crc_init
        # Previous beat still at the pipeline head: forward its completed CRC.
        if head.valid:
            return completion
        return self.crc

    def update(self, crc_init, head, completion, fire, last, advance):
        if advance and head.valid:
            self.crc = crc_init if head.last else completion
        if fire:
            self.packet_start = bool(last)

# Engine -------------------------------------------------------------------------------------------

class CRC32EngineModel:
    """Behavioral model of the pipelined CRC32 engine.

    Parameters
    ----------
    data_width : int
        Beat width in bits (8, 16, 32 or 64).
    stages : int
        Number of CRC evaluation stages, equal to the latency in advancing cycles.
    crc_init : int
        Initial value of the CRC of each packet.
    crc_enable : bool
        CRC computation enable, the engine only forwards data when disabled.
    """
    def __init__(self, data_width=CRC_DEFAULT_DATA_WIDTH, stages=CRC_DEFAULT_STAGES,
        crc_init=CRC32_INIT, crc_enable=True):
        if data_width not in CRC_DATA_WIDTHS:
            raise ValueError("Unsupported data_width {}, expected one of {}.".format(data_width, CRC_DATA_WIDTHS))
        if stages < 1 or (data_width//8) % stages:
            raise ValueError("Unsupported stages {} for a {}-bit data path.".format(stages, data_width))
        self.data_width = data_width
        self.stages     = stages
        self.crc_init   = crc_init
        self.crc_enable = crc_enable

        # # #

        self.flow     = CRCFlowController()
        self.pipeline = CRCAlignmentPipeline(data_width, stages)
        self.link     = CRCLinkState(crc_init)

    def reset(self):
        """Reinitialize the engine, the next beat starts a new packet."""
        self.pipeline.reset()
        self.link.reset(self.crc_init)

    def _check_beat(self, beat):
        if not (0 <= beat.data < 2**self.data_width):
            raise ValueError("Beat data 0x{:x} does not fit in {} bits.".format(beat.data, self.data_width))
        if not (0 <= beat.keep < 2**(self.data_width//8)):
            raise ValueError("Beat keep 0x{:x} does not fit in {} bits.".format(beat.keep, self.data_width//8))

    def step(self, beat=None, source_ready=True):
        """Run one clock cycle.

        Parameters
        ----------
        beat : Beat or None
            Beat presented on the sink (None when sink is not valid).
        source_ready : bool
            Consumer readiness.

        Returns
        -------
        StepResult
            sink_ready and the SourceBeat presented on the source (None when not valid).
        """
        if beat is not None:
            self._check_beat(beat)

        pipeline = self.pipeline
        link     = self.link

        # Outputs.
        advance = self.flow.advance(pipeline.tail, source_ready)
        result  = StepResult(sink_ready=advance, source=pipeline.emit())

        # Commit.
        if advance:
            fire       = self.flow.input_fire(beat is not None, advance)
            head       = pipeline.head
            completion = pipeline.completion()
            enable     = bool(self.crc_enable)
            seed       = link.seed(self.crc_init, head, completion)
            if fire:
                entry = CRCPipelineEntry(
                    data   = beat.data,
                    keep   = beat.keep,
                    valid  = True,
                    last   = bool(beat.last),
                    enable = enable,
                    crc    = pipeline.stage_update(0, seed, beat.data, beat.keep, enable))
            else:
                entry = CRC_PIPELINE_BUBBLE._replace(crc=seed)
            link.update(self.crc_init, head, completion, fire, fire and beat.last, advance)
            pipeline.push(entry)

        return result

    def run(self, beats, source_ready=None):
        """Run a sequence of sink beats (None for idle cycles) until everything is emitted.

        source_ready is an optional callable returning the consumer readiness for a given cycle.
        Returns the list of SourceBeats accepted by the consumer.
        """
        pending = list(beats)
        emitted = []
        cycle   = 0
        while pending or any(entry.valid for entry in self.pipeline.entries):
            ready  = True if source_ready is None else source_ready(cycle)
            beat   = pending[0] if pending else None
            tail   = self.pipeline.tail
            result = self.step(beat, ready)
            if self.flow.output_fire(tail, ready):
                emitted.append(result.source)
            if pending and (beat is None or result.sink_ready):
                pending.pop(0)
            cycle += 1
        return emitted
