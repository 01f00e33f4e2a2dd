"""
Cryptographic backends for signature verification.
"""

from .base import CryptoProvider  # noqa: F401
from .cryptography_backend import CryptographyProvider  # noqa: F401

__all__ = [
    "CryptoProvider",
    "CryptographyProvider",
]
