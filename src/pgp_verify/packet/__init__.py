"""
This package parses the subset of OpenPGP packets needed to check a
signature: public keys and subkeys, signatures, user IDs and one level of
compressed data.
"""

from .base import (  # noqa: F401
    TAG_COMPRESSED_DATA,
    TAG_PUBLIC_KEY,
    TAG_PUBLIC_SUBKEY,
    TAG_SIGNATURE,
    TAG_USER_ID,
    Packet,
    UserIDPacket,
    read_packet,
)
from .keys import PublicKey  # noqa: F401
from .parser import decompress, parse_packets, read_signature  # noqa: F401
from .signature import SIGTYPE_BINARY, SIGTYPE_TEXT, SignaturePacket  # noqa: F401

__all__ = [
    "Packet",
    "PublicKey",
    "SignaturePacket",
    "UserIDPacket",
    "decompress",
    "parse_packets",
    "read_packet",
    "read_signature",
]
