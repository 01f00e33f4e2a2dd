"""
This package handles ASCII armor: decoding armored keys and signatures into
packet octets, and reading the clear-text part of clear-signed messages.
"""

from .base import crc24, decode, encode, is_armored  # noqa: F401
from .cleartext import (  # noqa: F401
    ClearSignedReader,
    ClearTextCanonicalizer,
    canonical_line,
)

__all__ = [
    "ClearSignedReader",
    "ClearTextCanonicalizer",
    "canonical_line",
    "crc24",
    "decode",
    "encode",
    "is_armored",
]
