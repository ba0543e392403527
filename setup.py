#!/usr/bin/env python3

from setuptools import setup
from setuptools import find_packages


setup(
    name                 = "litecrc",
    description          = "Small footprint and configurable pipelined CRC32 core",
    author               = "LiteCRC Developers",
    test_suite           = "test",
    license              = "BSD",
    python_requires      = "~=3.7",
    install_requires     = ["migen", "litex"],
    packages             = find_packages(exclude=("test*", "sim*", "doc*", "examples*")),
    include_package_data = True,
    keywords             = "HDL ASIC FPGA hardware design CRC32 Ethernet",
    classifiers          = [
        "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
        "Environment :: Console",
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
    ],
    entry_points         = {
        "console_scripts": [
            "litecrc_gen=litecrc.gen:main",
        ],
    },
)
