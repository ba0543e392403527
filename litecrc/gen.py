#!/usr/bin/env python3

#
# This file is part of LiteCRC.
#
# Copyright (c) 2026 LiteCRC Developers
# SPDX-License-Identifier: BSD-2-Clause

"""
LiteCRC standalone core generator

LiteCRC aims to be directly used as a python package when the SoC is created using LiteX. However,
for some use cases it could be interesting to generate a standalone verilog file of the core:
- integration of the core in a design using a more traditional flow.
- need to version/package the core.
- avoid Migen/LiteX dependencies.
- etc...
"""

import os
import sys
import logging
import argparse

from migen import *

from litex.gen.fhdl import verilog

from litecrc.common import *
from litecrc.crc import CRC32Engine

# Logging ------------------------------------------------------------------------------------------

LOG_FORMAT_COLOR = "\u001b[37;1m%(levelname)-8s| \u001b[0m\u001b[1m%(module)-12s|\u001b[0m %(message)s"
LOG_FORMAT_PLAIN = "%(levelname)-8s:%(module)-12s> %(message)s"

def configure_default_logging(level=logging.INFO):
    log_format = LOG_FORMAT_COLOR if sys.stdout.isatty() else LOG_FORMAT_PLAIN
    logging.basicConfig(level=level, format=log_format)

# IOs ----------------------------------------------------------------------------------------------

def get_core_ios(core):
    return {
        core.cd_sys.clk,
        core.cd_sys.rst,
        *core.sink.flatten(),
        *core.source.flatten(),
        core.crc_init,
        core.crc_enable,
        core.reset,
    }

# Arguments ----------------------------------------------------------------------------------------

def crc_init_type(value):
    try:
        crc_init = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError("invalid CRC value: {}".format(value))
    if not (0 <= crc_init < 2**CRC32_WIDTH):
        raise argparse.ArgumentTypeError("CRC value {} does not fit in {} bits".format(value, CRC32_WIDTH))
    return crc_init

# Build --------------------------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(description="LiteCRC standalone core generator.")
    parser.add_argument("--data-width", default=CRC_DEFAULT_DATA_WIDTH, type=int, help="Data Width (8, 16, 32 or 64).")
    parser.add_argument("--stages",     default=CRC_DEFAULT_STAGES,     type=int, help="CRC evaluation stages.")
    parser.add_argument("--crc-init",   default=hex(CRC32_INIT),      type=crc_init_type, help="Reset value of the CRC initial value.")
    parser.add_argument("--name",       default="litecrc_core",      help="Core/Output file name.")
    parser.add_argument("--output-dir", default="build",             help="Output directory.")
    parser.add_argument("--verbose",    action="store_true",         help="Enable debug logging.")
    args = parser.parse_args()

    configure_default_logging(logging.DEBUG if args.verbose else logging.INFO)

    # Check Arguments ------------------------------------------------------------------------------
    if args.data_width not in CRC_DATA_WIDTHS:
        parser.error("--data-width must be one of {}.".format(CRC_DATA_WIDTHS))
    if args.stages < 1 or (args.data_width//8) % args.stages:
        parser.error("--stages must divide the number of bytes of the data path ({}).".format(args.data_width//8))

    # Generate core --------------------------------------------------------------------------------
    logging.info("Generating {}-bit CRC32 engine with {} stage(s)...".format(args.data_width, args.stages))
    core = CRC32Engine(data_width=args.data_width, stages=args.stages, crc_init=args.crc_init)
    core.cd_sys = ClockDomain("sys")
    os.makedirs(args.output_dir, exist_ok=True)
    filename = os.path.join(args.output_dir, args.name + ".v")
    ios = get_core_ios(core)
    logging.debug("Core has {} IOs.".format(len(ios)))
    verilog.convert(core, ios=ios, name=args.name).write(filename)
    logging.info("Verilog written to {}.".format(filename))

if __name__ == "__main__":
    main()
