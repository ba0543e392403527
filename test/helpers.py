#
# This file is part of LiteCRC.
#
# Copyright (c) 2026 LiteCRC Developers
# SPDX-License-Identifier: BSD-2-Clause

import random

from migen import *

from litecrc.software.crc32 import Beat, split_beats
from litecrc.model import SourceBeat, StepResult

# Packets ------------------------------------------------------------------------------------------

def random_payload(prng, min_length=0, max_length=64):
    return bytes(prng.randrange(256) for _ in range(prng.randint(min_length, max_length)))

def random_packets(prng, n, data_width, **kwargs):
    return [random_payload(prng, **kwargs) for _ in range(n)]

def packets_beats(packets, data_width):
    return [beat for payload in packets for beat in split_beats(payload, data_width)]

# Stimulus -----------------------------------------------------------------------------------------

def generate_stimulus(model, beats, prng=None, idle_probability=0.0, stall_probability=0.0):
    """Drive the model with beats, honoring its sink readiness.

    Returns the per-cycle stimulus (beat or None, source ready) and the model results; the
    stimulus can be replayed on the gateware since it is only valid if both agree on ready.
    """
    prng     = prng or random.Random(0)
    pending  = list(beats)
    stimulus = []
    results  = []
    while pending or any(entry.valid for entry in model.pipeline.entries):
        ready = prng.random() >= stall_probability
        beat  = None
        if pending and prng.random() >= idle_probability:
            beat = pending[0]
        result = model.step(beat, ready)
        stimulus.append((beat, ready))
        results.append(result)
        if beat is not None and result.sink_ready:
            pending.pop(0)
    return stimulus, results

def emitted_beats(stimulus, results):
    return [result.source for (beat, ready), result in zip(stimulus, results)
        if result.source is not None and ready]

def split_packets(beats):
    packets = [[]]
    for beat in beats:
        packets[-1].append(beat)
        if beat.last:
            packets.append([])
    return packets[:-1]

# Simulation ---------------------------------------------------------------------------------------

def drive_engine(dut, beat, ready):
    yield dut.sink.valid.eq(int(beat is not None))
    if beat is not None:
        yield dut.sink.data.eq(beat.data)
        yield dut.sink.keep.eq(beat.keep)
        yield dut.sink.last.eq(int(beat.last))
    else:
        yield dut.sink.last.eq(0)
    yield dut.source.ready.eq(int(ready))

def observe_engine(dut):
    sink_ready = (yield dut.sink.ready)
    source     = None
    if (yield dut.source.valid):
        source = SourceBeat(
            data = (yield dut.source.data),
            keep = (yield dut.source.keep),
            last = (yield dut.source.last),
            crc  = (yield dut.source.crc),
        )
    return StepResult(sink_ready=sink_ready, source=source)

def simulate_engine(dut, stimulus, vcd_name=None):
    """Replay a per-cycle stimulus on the gateware and return per-cycle observations."""
    observations = []
    def gen(dut):
        for beat, ready in stimulus:
            yield from drive_engine(dut, beat, ready)
            yield
            # Inputs written before the clock edge are now visible with the registers of the cycle.
            observations.append((yield from observe_engine(dut)))
    run_simulation(dut, gen(dut), vcd_name=vcd_name)
    return observations
