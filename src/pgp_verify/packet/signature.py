"""
Signature packets (RFC 4880 section 5.2), versions 3 and 4.
"""

from pgp_verify.errors import MalformedPacket
from pgp_verify.packet.base import BodyReader, Packet
from pgp_verify.packet.keys import PK_DSA, PK_ECDSA, PK_EDDSA, RSA_ALGORITHMS

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"

SIGTYPE_BINARY = 0x00
SIGTYPE_TEXT = 0x01

SUBPACKET_CREATION_TIME = 2
SUBPACKET_ISSUER = 16
SUBPACKET_ISSUER_FINGERPRINT = 33


def parse_subpackets(area):
    """Returns a list of (type, critical, data) tuples."""
    reader = BodyReader(area)
    subpackets = []
    while reader.remaining:
        first = reader.octet()
        if first < 192:
            length = first
        elif first < 255:
            length = ((first - 192) << 8) + reader.octet() + 192
        else:
            length = reader.uint(4)
        if length == 0:
            raise MalformedPacket("Signature subpacket with zero length")
        data = reader.read(length)
        subpackets.append((data[0] & 0x7F, bool(data[0] & 0x80), data[1:]))
    return subpackets


def _first(subpackets, subpacket_type):
    for found_type, _, data in subpackets:
        if found_type == subpacket_type:
            return data
    return None


def _read_values(reader, algorithm):
    if algorithm in RSA_ALGORITHMS:
        return (reader.mpi(),)
    if algorithm in (PK_DSA, PK_ECDSA, PK_EDDSA):
        return (reader.mpi(), reader.mpi())
    # Left opaque; the provider reports the algorithm as unsupported.
    return (reader.rest(),)


class SignaturePacket(Packet):
    """
    A parsed signature.

    ``hash_trailer`` holds the octets that are hashed after the signed data,
    and ``hash_prefix`` the left 16 bits of the resulting digest, which lets
    a mismatch be spotted before the public key operation.
    """

    def __init__(self, tag, body):
        super(SignaturePacket, self).__init__(tag, body)
        self.hashed_subpackets = []
        self.unhashed_subpackets = []

        reader = BodyReader(body)
        self.version = reader.octet()
        if self.version in (2, 3):
            if reader.octet() != 5:
                raise MalformedPacket("Version 3 signature hashed length must be 5")
            hashed = reader.read(5)
            self.signature_type = hashed[0]
            self.created = int.from_bytes(hashed[1:], "big")
            self.issuer_key_id = reader.read(8)
            self.public_key_algorithm = reader.octet()
            self.hash_algorithm = reader.octet()
            self.hash_trailer = hashed
        elif self.version == 4:
            self.signature_type = reader.octet()
            self.public_key_algorithm = reader.octet()
            self.hash_algorithm = reader.octet()
            hashed_area = reader.read(reader.uint(2))
            hashed_end = reader.offset
            unhashed_area = reader.read(reader.uint(2))
            self.hashed_subpackets = parse_subpackets(hashed_area)
            self.unhashed_subpackets = parse_subpackets(unhashed_area)
            self.hash_trailer = (
                body[:hashed_end] + b"\x04\xff" + hashed_end.to_bytes(4, "big")
            )

            created = _first(self.hashed_subpackets, SUBPACKET_CREATION_TIME)
            self.created = int.from_bytes(created, "big") if created else None
            self.issuer_key_id = self._find_issuer()
        else:
            raise MalformedPacket(f"Unsupported signature version {self.version}")

        self.hash_prefix = reader.read(2)
        self.values = _read_values(reader, self.public_key_algorithm)

    def _find_issuer(self):
        for area in (self.hashed_subpackets, self.unhashed_subpackets):
            issuer = _first(area, SUBPACKET_ISSUER)
            if issuer is not None:
                if len(issuer) != 8:
                    raise MalformedPacket("Issuer subpacket must be 8 octets")
                return issuer

        for area in (self.hashed_subpackets, self.unhashed_subpackets):
            fingerprint = _first(area, SUBPACKET_ISSUER_FINGERPRINT)
            # Only v4 fingerprints map to a key ID by their last 8 octets.
            if fingerprint is not None and fingerprint[:1] == b"\x04":
                return fingerprint[-8:]
        return None

    @property
    def is_text(self):
        return self.signature_type == SIGTYPE_TEXT

    @property
    def issuer_key_id_hex(self):
        if self.issuer_key_id is None:
            return None
        return self.issuer_key_id.hex().upper()

    def __repr__(self):
        return (
            f"<SignaturePacket v{self.version} type=0x{self.signature_type:02x} "
            f"issuer={self.issuer_key_id_hex} pk={self.public_key_algorithm} "
            f"hash={self.hash_algorithm}>"
        )
