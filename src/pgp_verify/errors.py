"""
Errors raised while reading keys and signatures.

A signature that is well formed but does not match is not an error; it is
reported as an unsuccessful SignatureVerificationResult instead.
"""

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"


class PGPVerifyError(Exception):
    pass


class ArmorDecodeError(PGPVerifyError):
    pass


MalformedArmor = ArmorDecodeError


class MalformedPacket(PGPVerifyError):
    pass


class MalformedDocument(PGPVerifyError):
    pass


class UnsupportedAlgorithm(PGPVerifyError):
    pass


class KeyNotFound(PGPVerifyError):
    def __init__(self, key_id):
        self.key_id = key_id
        super(KeyNotFound, self).__init__(
            f"No public key found for key ID {key_id.hex().upper()}"
        )
