"""
A CryptoProvider backed by the ``cryptography`` package.
"""

import logging

from cryptography.exceptions import InvalidSignature
from cryptography.exceptions import UnsupportedAlgorithm as BackendUnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, ec, padding, rsa, utils
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from pgp_verify.errors import MalformedPacket, UnsupportedAlgorithm
from pgp_verify.packet.keys import (
    PK_DSA,
    PK_ECDSA,
    PK_EDDSA,
    PUBLIC_KEY_ALGORITHM_NAMES,
    RSA_ALGORITHMS,
)
from pgp_verify.signing.provider.base import (
    HASH_ALGORITHM_NAMES,
    HASH_MD5,
    HASH_SHA1,
    HASH_SHA3_256,
    HASH_SHA3_512,
    HASH_SHA224,
    HASH_SHA256,
    HASH_SHA384,
    HASH_SHA512,
    CryptoProvider,
)

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"

log = logging.getLogger(__name__)

HASHES = {
    HASH_MD5: hashes.MD5,
    HASH_SHA1: hashes.SHA1,
    HASH_SHA256: hashes.SHA256,
    HASH_SHA384: hashes.SHA384,
    HASH_SHA512: hashes.SHA512,
    HASH_SHA224: hashes.SHA224,
    HASH_SHA3_256: hashes.SHA3_256,
    HASH_SHA3_512: hashes.SHA3_512,
}

# Curve OIDs as they appear in key packets (RFC 6637, RFC 4880bis).
ECDSA_CURVES = {
    bytes.fromhex("2A8648CE3D030107"): ec.SECP256R1,
    bytes.fromhex("2B81040022"): ec.SECP384R1,
    bytes.fromhex("2B81040023"): ec.SECP521R1,
    bytes.fromhex("2B2403030208010107"): ec.BrainpoolP256R1,
    bytes.fromhex("2B240303020801010B"): ec.BrainpoolP384R1,
    bytes.fromhex("2B240303020801010D"): ec.BrainpoolP512R1,
}
ED25519_OID = bytes.fromhex("2B06010401DA470F01")
ED25519_POINT_PREFIX = 0x40
# Parameter sizes the backend accepts for DSA.
DSA_P_BITS = (1024, 2048, 3072, 4096)
DSA_Q_BITS = (160, 224, 256)
SIGNATURE_FAMILIES = ("RSA", "DSA", "ECDSA", "EdDSA")


def _family(algorithm):
    if algorithm in RSA_ALGORITHMS:
        return "RSA"
    return PUBLIC_KEY_ALGORITHM_NAMES.get(algorithm)


class CryptographyProvider(CryptoProvider):
    def _hash_algorithm(self, hash_algorithm):
        try:
            return HASHES[hash_algorithm]()
        except KeyError:
            name = HASH_ALGORITHM_NAMES.get(hash_algorithm, "unknown")
            raise UnsupportedAlgorithm(
                f"Hash algorithm {hash_algorithm} ({name}) is not supported"
            )

    def hash_context(self, hash_algorithm):
        algorithm = self._hash_algorithm(hash_algorithm)
        try:
            return hashes.Hash(algorithm)
        except BackendUnsupportedAlgorithm as e:
            raise UnsupportedAlgorithm(
                f"Hash algorithm {algorithm.name} is not available: {e}"
            )

    def load_public_key(self, public_key):
        algorithm = public_key.algorithm
        try:
            if algorithm in RSA_ALGORITHMS:
                n, e = public_key.material
                return rsa.RSAPublicNumbers(e, n).public_key()
            if algorithm == PK_DSA:
                p, q, g, y = public_key.material
                if (
                    p.bit_length() not in DSA_P_BITS
                    or q.bit_length() not in DSA_Q_BITS
                ):
                    raise UnsupportedAlgorithm(
                        f"DSA key {public_key.key_id_hex} with {p.bit_length()}-bit p "
                        f"and {q.bit_length()}-bit q is not supported"
                    )
                parameters = dsa.DSAParameterNumbers(p, q, g)
                return dsa.DSAPublicNumbers(y, parameters).public_key()
            if algorithm == PK_ECDSA:
                curve = ECDSA_CURVES.get(public_key.curve_oid)
                if curve is None:
                    raise UnsupportedAlgorithm(
                        f"ECDSA curve {public_key.curve_oid.hex()} is not supported"
                    )
                (point,) = public_key.material
                return ec.EllipticCurvePublicKey.from_encoded_point(curve(), point)
            if algorithm == PK_EDDSA:
                if public_key.curve_oid != ED25519_OID:
                    raise UnsupportedAlgorithm(
                        f"EdDSA curve {public_key.curve_oid.hex()} is not supported"
                    )
                (point,) = public_key.material
                if len(point) != 33 or point[0] != ED25519_POINT_PREFIX:
                    raise MalformedPacket("Ed25519 public key is not a native point")
                return Ed25519PublicKey.from_public_bytes(point[1:])
        except (ValueError, BackendUnsupportedAlgorithm) as e:
            raise MalformedPacket(
                f"Unusable {public_key.algorithm_name} key {public_key.key_id_hex}: {e}"
            )

        raise UnsupportedAlgorithm(
            f"Public key algorithm {algorithm} ({public_key.algorithm_name}) "
            "is not supported for signatures"
        )

    def check_signature(self, signature):
        self._hash_algorithm(signature.hash_algorithm)
        if _family(signature.public_key_algorithm) not in SIGNATURE_FAMILIES:
            raise UnsupportedAlgorithm(
                f"Public key algorithm {signature.public_key_algorithm} is not "
                "supported for signatures"
            )

    def verify(self, loaded_key, signature, digest):
        algorithm = self._hash_algorithm(signature.hash_algorithm)
        prehashed = utils.Prehashed(algorithm)
        try:
            if isinstance(loaded_key, rsa.RSAPublicKey):
                if _family(signature.public_key_algorithm) != "RSA":
                    return self._mismatch(loaded_key, signature)
                (value,) = signature.values
                size = (loaded_key.key_size + 7) // 8
                if value.bit_length() > size * 8:
                    return False
                loaded_key.verify(
                    value.to_bytes(size, "big"), digest, padding.PKCS1v15(), prehashed
                )
            elif isinstance(loaded_key, dsa.DSAPublicKey):
                if signature.public_key_algorithm != PK_DSA:
                    return self._mismatch(loaded_key, signature)
                r, s = signature.values
                loaded_key.verify(utils.encode_dss_signature(r, s), digest, prehashed)
            elif isinstance(loaded_key, ec.EllipticCurvePublicKey):
                if signature.public_key_algorithm != PK_ECDSA:
                    return self._mismatch(loaded_key, signature)
                r, s = signature.values
                loaded_key.verify(
                    utils.encode_dss_signature(r, s), digest, ec.ECDSA(prehashed)
                )
            elif isinstance(loaded_key, Ed25519PublicKey):
                if signature.public_key_algorithm != PK_EDDSA:
                    return self._mismatch(loaded_key, signature)
                r, s = signature.values
                if r.bit_length() > 256 or s.bit_length() > 256:
                    return False
                # EdDSA in OpenPGP signs the digest itself, not the data.
                loaded_key.verify(r.to_bytes(32, "big") + s.to_bytes(32, "big"), digest)
            else:
                raise UnsupportedAlgorithm(
                    f"Unsupported key object {type(loaded_key).__name__}"
                )
        except InvalidSignature:
            return False
        return True

    def _mismatch(self, loaded_key, signature):
        log.debug(
            "Signature algorithm %s does not match key type %s",
            signature.public_key_algorithm,
            type(loaded_key).__name__,
        )
        return False
