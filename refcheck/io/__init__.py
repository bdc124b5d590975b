"""
Input Module.

Decoding of OSM files into ordered entity streams.
"""

from refcheck.io.osm_reader import (
    STDIN,
    InputError,
    InputFormatError,
    read_entities,
)

__all__ = [
    "STDIN",
    "InputError",
    "InputFormatError",
    "read_entities",
]
