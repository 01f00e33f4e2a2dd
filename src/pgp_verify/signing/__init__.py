"""
This package handles OpenPGP signature verification.

It contains:

1) A verifier subclass of SignatureVerifier for each input shape, detached
   content plus signature and clear-signed messages, each implementing a
   'verify' method that returns a SignatureVerificationResult.

2) A provider subpackage with the CryptoProvider interface the verifiers
   hash and check signatures through, and its default implementation.
"""

from .base import SignatureVerificationResult, SignatureVerifier  # noqa: F401
from .provider import CryptoProvider, CryptographyProvider  # noqa: F401
from .verifier import (  # noqa: F401
    ClearSignedVerifier,
    DetachedSignatureVerifier,
    verify_clear,
    verify_detached,
)

__all__ = [
    "ClearSignedVerifier",
    "CryptoProvider",
    "CryptographyProvider",
    "DetachedSignatureVerifier",
    "SignatureVerificationResult",
    "SignatureVerifier",
    "verify_clear",
    "verify_detached",
]
