"""
Public-Key and Public-Subkey packets (RFC 4880 section 5.5.2).
"""

import hashlib

from pgp_verify.errors import MalformedPacket
from pgp_verify.packet.base import TAG_PUBLIC_SUBKEY, BodyReader, Packet

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"

PK_RSA = 1
PK_RSA_ENCRYPT_ONLY = 2
PK_RSA_SIGN_ONLY = 3
PK_ELGAMAL = 16
PK_DSA = 17
PK_ECDH = 18
PK_ECDSA = 19
PK_ELGAMAL_SIGN = 20
PK_EDDSA = 22

RSA_ALGORITHMS = (PK_RSA, PK_RSA_ENCRYPT_ONLY, PK_RSA_SIGN_ONLY)
EC_ALGORITHMS = (PK_ECDH, PK_ECDSA, PK_EDDSA)

PUBLIC_KEY_ALGORITHM_NAMES = {
    PK_RSA: "RSA",
    PK_RSA_ENCRYPT_ONLY: "RSA Encrypt-Only",
    PK_RSA_SIGN_ONLY: "RSA Sign-Only",
    PK_ELGAMAL: "Elgamal",
    PK_DSA: "DSA",
    PK_ECDH: "ECDH",
    PK_ECDSA: "ECDSA",
    PK_ELGAMAL_SIGN: "Elgamal Encrypt or Sign",
    PK_EDDSA: "EdDSA",
}


def _read_curve_oid(reader):
    length = reader.octet()
    if length in (0, 0xFF):
        raise MalformedPacket(f"Reserved curve OID length {length}")
    return reader.read(length)


def _read_material(reader, algorithm):
    """
    Returns (curve_oid, material). ``material`` is a tuple of integers for
    the integer-based algorithms and of the encoded point for the curve
    based ones. Unknown algorithms get an empty tuple; they can still be
    looked up but not used for verification.
    """
    if algorithm in RSA_ALGORITHMS:
        return None, (reader.mpi(), reader.mpi())
    if algorithm == PK_DSA:
        return None, (reader.mpi(), reader.mpi(), reader.mpi(), reader.mpi())
    if algorithm in (PK_ELGAMAL, PK_ELGAMAL_SIGN):
        return None, (reader.mpi(), reader.mpi(), reader.mpi())
    if algorithm in EC_ALGORITHMS:
        oid = _read_curve_oid(reader)
        # ECDH keys carry KDF parameters after the point; they are not needed.
        return oid, (reader.mpi_bytes(),)
    return None, ()


class PublicKey(Packet):
    """
    A parsed public key. Instances are treated as immutable.

    ``key_id`` is the 8-octet identifier signatures refer to their issuer by;
    for v4 keys it is the low-order 8 octets of the SHA-1 fingerprint.
    """

    def __init__(self, tag, body):
        super(PublicKey, self).__init__(tag, body)
        self.is_subkey = tag == TAG_PUBLIC_SUBKEY

        reader = BodyReader(body)
        self.version = reader.octet()
        if self.version == 4:
            self.created = reader.uint(4)
            self.algorithm = reader.octet()
            self.curve_oid, self.material = _read_material(reader, self.algorithm)
            prefix = b"\x99" + len(body).to_bytes(2, "big")
            self.fingerprint = hashlib.sha1(prefix + body).digest()
            self.key_id = self.fingerprint[-8:]
        elif self.version in (2, 3):
            self.created = reader.uint(4)
            reader.uint(2)  # validity period in days
            self.algorithm = reader.octet()
            if self.algorithm not in RSA_ALGORITHMS:
                raise MalformedPacket(
                    f"Version {self.version} keys must be RSA, got algorithm "
                    f"{self.algorithm}"
                )
            modulus = reader.mpi_bytes()
            exponent = reader.mpi_bytes()
            self.curve_oid = None
            self.material = (
                int.from_bytes(modulus, "big"),
                int.from_bytes(exponent, "big"),
            )
            self.fingerprint = hashlib.md5(
                modulus + exponent, usedforsecurity=False
            ).digest()
            self.key_id = modulus[-8:].rjust(8, b"\x00")
        else:
            raise MalformedPacket(f"Unsupported public key version {self.version}")

    @property
    def algorithm_name(self):
        return PUBLIC_KEY_ALGORITHM_NAMES.get(self.algorithm, "Unknown")

    @property
    def key_id_hex(self):
        return self.key_id.hex().upper()

    @property
    def fingerprint_hex(self):
        return self.fingerprint.hex().upper()

    def __repr__(self):
        kind = "subkey" if self.is_subkey else "key"
        return (
            f"<PublicKey {kind} {self.key_id_hex} {self.algorithm_name} "
            f"v{self.version}>"
        )
