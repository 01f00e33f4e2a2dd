"""
Turns a stream of packet octets into a lazy sequence of typed packets.
"""

import bz2
import io
import logging
import zlib

from pgp_verify.errors import MalformedDocument, MalformedPacket
from pgp_verify.packet.base import (
    TAG_COMPRESSED_DATA,
    TAG_NAMES,
    TAG_PUBLIC_KEY,
    TAG_PUBLIC_SUBKEY,
    TAG_SIGNATURE,
    TAG_USER_ID,
    BodyReader,
    UserIDPacket,
    read_packet,
)
from pgp_verify.packet.keys import PublicKey
from pgp_verify.packet.signature import SignaturePacket

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"

log = logging.getLogger(__name__)

PACKET_TYPES = {
    TAG_SIGNATURE: SignaturePacket,
    TAG_PUBLIC_KEY: PublicKey,
    TAG_USER_ID: UserIDPacket,
    TAG_PUBLIC_SUBKEY: PublicKey,
}

COMPRESSION_UNCOMPRESSED = 0
COMPRESSION_ZIP = 1
COMPRESSION_ZLIB = 2
COMPRESSION_BZIP2 = 3


def decompress(body):
    """Inflate the body of a Compressed Data packet (RFC 4880 section 5.6)."""
    reader = BodyReader(body)
    algorithm = reader.octet()
    data = reader.rest()
    try:
        if algorithm == COMPRESSION_UNCOMPRESSED:
            return data
        if algorithm == COMPRESSION_ZIP:
            inflater = zlib.decompressobj(-zlib.MAX_WBITS)
            return inflater.decompress(data) + inflater.flush()
        if algorithm == COMPRESSION_ZLIB:
            return zlib.decompress(data)
        if algorithm == COMPRESSION_BZIP2:
            return bz2.decompress(data)
    except (zlib.error, OSError, ValueError) as e:
        raise MalformedPacket(f"Corrupt compressed data: {e}")
    raise MalformedDocument(f"Unknown compression algorithm {algorithm}")


def parse_packets(stream, wanted=None, allow_compressed=True):
    """
    Lazily yield packets from a binary ``stream``.

    Packets whose tag is not understood, or not in ``wanted`` when given,
    are skipped by their declared length. The contents of a Compressed Data
    packet are yielded in its place; compressed data nested inside it is a
    MalformedDocument.
    """
    while True:
        packet = read_packet(stream)
        if packet is None:
            return
        tag, body = packet

        if tag == TAG_COMPRESSED_DATA:
            if not allow_compressed:
                raise MalformedDocument(
                    "Nested compressed data packets are not supported"
                )
            inner = decompress(body)
            log.debug(
                "Inflated compressed packet: %d -> %d octets", len(body), len(inner)
            )
            yield from parse_packets(
                io.BytesIO(inner), wanted=wanted, allow_compressed=False
            )
            continue

        packet_type = PACKET_TYPES.get(tag)
        if packet_type is None or (wanted is not None and tag not in wanted):
            log.debug(
                "Skipping %s packet (tag %d, %d octets)",
                TAG_NAMES.get(tag, "unknown"),
                tag,
                len(body),
            )
            continue
        yield packet_type(tag, body)


def read_signature(octets):
    """
    Return the first Signature packet in ``octets``. Any further signatures
    are not read.
    """
    for packet in parse_packets(io.BytesIO(octets), wanted={TAG_SIGNATURE}):
        return packet
    raise MalformedDocument("No signature packet found")
