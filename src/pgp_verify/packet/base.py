"""
Low level OpenPGP packet framing (RFC 4880 section 4.2) and helpers for
reading the fields of a packet body.
"""

from pgp_verify.errors import MalformedPacket

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"

TAG_SIGNATURE = 2
TAG_PUBLIC_KEY = 6
TAG_COMPRESSED_DATA = 8
TAG_USER_ID = 13
TAG_PUBLIC_SUBKEY = 14

TAG_NAMES = {
    1: "Public-Key Encrypted Session Key",
    2: "Signature",
    3: "Symmetric-Key Encrypted Session Key",
    4: "One-Pass Signature",
    5: "Secret-Key",
    6: "Public-Key",
    7: "Secret-Subkey",
    8: "Compressed Data",
    9: "Symmetrically Encrypted Data",
    10: "Marker",
    11: "Literal Data",
    12: "Trust",
    13: "User ID",
    14: "Public-Subkey",
    17: "User Attribute",
    18: "Sym. Encrypted and Integrity Protected Data",
    19: "Modification Detection Code",
}


def read_exact(stream, length):
    data = stream.read(length)
    if len(data) != length:
        raise MalformedPacket(
            f"Truncated packet: expected {length} octets, got {len(data)}"
        )
    return data


def _read_new_format_length(stream):
    """
    Returns (length, partial). Partial body lengths are only followed by
    more length headers, which _read_new_format_body deals with.
    """
    first = read_exact(stream, 1)[0]
    if first < 192:
        return first, False
    if first < 224:
        second = read_exact(stream, 1)[0]
        return ((first - 192) << 8) + second + 192, False
    if first == 255:
        return int.from_bytes(read_exact(stream, 4), "big"), False
    return 1 << (first & 0x1F), True


def _read_new_format_body(stream):
    chunks = []
    while True:
        length, partial = _read_new_format_length(stream)
        chunks.append(read_exact(stream, length))
        if not partial:
            return b"".join(chunks)


def read_packet(stream):
    """
    Read one packet from ``stream``, returning a (tag, body) tuple, or None
    at a clean end of stream.
    """
    first = stream.read(1)
    if not first:
        return None

    ctb = first[0]
    if not ctb & 0x80:
        raise MalformedPacket(f"Invalid packet tag octet 0x{ctb:02X}")

    if ctb & 0x40:
        tag = ctb & 0x3F
        body = _read_new_format_body(stream)
    else:
        tag = (ctb >> 2) & 0x0F
        length_type = ctb & 0x03
        if length_type == 3:
            # Indeterminate length: the packet runs to the end of the stream.
            body = stream.read()
        else:
            length_octets = (1, 2, 4)[length_type]
            length = int.from_bytes(read_exact(stream, length_octets), "big")
            body = read_exact(stream, length)

    if tag == 0:
        raise MalformedPacket("Packet tag 0 is reserved")
    return tag, body


class BodyReader:
    """Sequential reader over the body of a single packet."""

    def __init__(self, body):
        self.body = body
        self.offset = 0

    @property
    def remaining(self):
        return len(self.body) - self.offset

    def read(self, length):
        if length > self.remaining:
            raise MalformedPacket(
                f"Truncated packet body: wanted {length} octets at offset "
                f"{self.offset}, {self.remaining} left"
            )
        data = self.body[self.offset : self.offset + length]
        self.offset += length
        return data

    def rest(self):
        return self.read(self.remaining)

    def octet(self):
        return self.read(1)[0]

    def uint(self, length):
        return int.from_bytes(self.read(length), "big")

    def mpi_bytes(self):
        bits = self.uint(2)
        return self.read((bits + 7) // 8)

    def mpi(self):
        return int.from_bytes(self.mpi_bytes(), "big")


class Packet:
    def __init__(self, tag, body):
        self.tag = tag
        self.body = body

    @property
    def tag_name(self):
        return TAG_NAMES.get(self.tag, "Unknown")

    def __repr__(self):
        return f"<{type(self).__name__} tag={self.tag} len={len(self.body)}>"


class UserIDPacket(Packet):
    def __init__(self, tag, body):
        super(UserIDPacket, self).__init__(tag, body)
        self.user_id = body.decode("utf-8", errors="replace")
