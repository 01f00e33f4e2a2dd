"""
The interface between the verifier and whatever implements hashing and the
public key math.
"""

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"

HASH_MD5 = 1
HASH_SHA1 = 2
HASH_RIPEMD160 = 3
HASH_SHA256 = 8
HASH_SHA384 = 9
HASH_SHA512 = 10
HASH_SHA224 = 11
HASH_SHA3_256 = 12
HASH_SHA3_512 = 14

HASH_ALGORITHM_NAMES = {
    HASH_MD5: "MD5",
    HASH_SHA1: "SHA1",
    HASH_RIPEMD160: "RIPEMD160",
    HASH_SHA256: "SHA256",
    HASH_SHA384: "SHA384",
    HASH_SHA512: "SHA512",
    HASH_SHA224: "SHA224",
    HASH_SHA3_256: "SHA3-256",
    HASH_SHA3_512: "SHA3-512",
}


class CryptoProvider:
    """
    Represents a cryptographic backend. A verification asks it for four
    things, in order:

    1) check_signature(signature): raise if the signature algorithms cannot
       be handled, before any content is hashed.

    2) load_public_key(public_key): a backend key object for a parsed
       PublicKey, also done before hashing so that an unusable key is
       reported early.

    3) hash_context(hash_algorithm): an object with update(data) and
       finalize() -> bytes for the OpenPGP hash algorithm ID given.

    4) verify(loaded_key, signature, digest): whether the signature values
       validate the finished digest. A mismatch returns False; only
       unsupported algorithms and unusable key material raise.

    Unsupported algorithms raise pgp_verify.errors.UnsupportedAlgorithm.
    """

    def hash_context(self, hash_algorithm):
        raise NotImplementedError("hash_context")

    def load_public_key(self, public_key):
        raise NotImplementedError("load_public_key")

    def check_signature(self, signature):
        raise NotImplementedError("check_signature")

    def verify(self, loaded_key, signature, digest):
        raise NotImplementedError("verify")
