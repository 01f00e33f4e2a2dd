"""
This module checks OpenPGP signatures over detached content and over
clear-signed messages. Hashing and the public key math are delegated to a
CryptoProvider; the default one uses the ``cryptography`` package.
"""

import logging

from pgp_verify import armor
from pgp_verify.armor import ClearSignedReader, ClearTextCanonicalizer
from pgp_verify.errors import KeyNotFound, MalformedDocument
from pgp_verify.packet import read_signature
from pgp_verify.signing.base import SignatureVerificationResult, SignatureVerifier
from pgp_verify.signing.provider import CryptographyProvider
from pgp_verify.signing.provider.base import HASH_ALGORITHM_NAMES
from pgp_verify.source import DEFAULT_ENCODING, open_input, read_all

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"

log = logging.getLogger(__name__)

CHUNK_SIZE = 65536


class TextModeHash:
    """
    Wraps a hash context for canonical text signatures (type 0x01), turning
    every CR, LF or CRLF line ending into CRLF. CRLF-only input passes
    through unchanged.
    """

    def __init__(self, context):
        self._context = context
        self._pending_cr = False

    def update(self, data):
        if not data:
            return
        if self._pending_cr and data[:1] == b"\n":
            data = data[1:]
        self._pending_cr = data[-1:] == b"\r"
        data = data.replace(b"\r\n", b"\n").replace(b"\r", b"\n")
        self._context.update(data.replace(b"\n", b"\r\n"))

    def finalize(self):
        return self._context.finalize()


def _resolve_key(key_ring, signature):
    if signature.issuer_key_id is None:
        raise MalformedDocument("Signature does not identify its issuer key")
    public_key = key_ring.lookup(signature.issuer_key_id)
    if public_key is None:
        raise KeyNotFound(signature.issuer_key_id)
    log.debug("Signature %r made by %r", signature, public_key)
    return public_key


class _Verification:
    """
    One pass through the verification states: the signature has been
    decoded; prepare() resolves the key and starts hashing, update() feeds
    the signed octets and finish() produces the result.
    """

    def __init__(self, provider, key_ring, signature):
        self.provider = provider
        self.key_ring = key_ring
        self.signature = signature
        self.public_key = None
        self.loaded_key = None
        self.raw_context = None
        self.context = None

    def prepare(self):
        self.public_key = _resolve_key(self.key_ring, self.signature)
        self.provider.check_signature(self.signature)
        self.loaded_key = self.provider.load_public_key(self.public_key)
        self.raw_context = self.provider.hash_context(self.signature.hash_algorithm)
        if self.signature.is_text:
            self.context = TextModeHash(self.raw_context)
        else:
            self.context = self.raw_context
        return self

    def update(self, data):
        self.context.update(data)

    def finish(self, plaintext=None, encoding=DEFAULT_ENCODING):
        signature = self.signature
        # The trailer is binary even for text signatures.
        self.raw_context.update(signature.hash_trailer)
        digest = self.raw_context.finalize()

        if digest[:2] != signature.hash_prefix:
            log.debug(
                "Digest prefix %s does not match signature %s",
                digest[:2].hex(),
                signature.hash_prefix.hex(),
            )
            success = False
        else:
            success = self.provider.verify(self.loaded_key, signature, digest)

        extra = {
            "fingerprint": self.public_key.fingerprint_hex,
            "key_algorithm": self.public_key.algorithm_name,
            "hash_algorithm": HASH_ALGORITHM_NAMES.get(signature.hash_algorithm),
            "signature_type": signature.signature_type,
            "creation_date": signature.created,
        }
        if success:
            summary = "OpenPGP signature verification succeeded."
        else:
            summary = "OpenPGP signature verification failed."
        log.debug("%s (key %s)", summary, self.public_key.key_id_hex)

        return SignatureVerificationResult(
            success=success,
            summary=summary,
            key_id=self.public_key.key_id,
            plaintext=plaintext,
            encoding=encoding,
            extra_information=extra,
        )


class DetachedSignatureVerifier(SignatureVerifier):
    """
    Verifies content against a separate signature object. The content is
    hashed exactly as given; the signature may be armored or binary and may
    be wrapped in one compressed data packet.
    """

    def __init__(self, content, signature, key_ring, provider=None):
        super(DetachedSignatureVerifier, self).__init__()

        if content is None:
            raise RuntimeError("content must not be None")
        self.content = content

        if signature is None:
            raise RuntimeError("signature must not be None")
        self.signature = signature

        if key_ring is None:
            raise RuntimeError("key_ring must not be None")
        self.key_ring = key_ring

        self.provider = provider if provider is not None else CryptographyProvider()

    def verify(self) -> SignatureVerificationResult:
        signature = read_signature(armor.decode(read_all(self.signature)))
        verification = _Verification(self.provider, self.key_ring, signature).prepare()

        stream = open_input(self.content)
        while True:
            chunk = stream.read(CHUNK_SIZE)
            if not chunk:
                break
            verification.update(chunk)

        return verification.finish()


class ClearSignedVerifier(SignatureVerifier):
    """
    Verifies a clear-signed message and recovers its text.

    The recovered plaintext has trailing whitespace removed from every line
    and ``line_separator`` (default os.linesep) after every line. It is set
    on the result whether or not the signature matched.
    """

    def __init__(
        self, message, key_ring, provider=None, line_separator=None, encoding=None
    ):
        super(ClearSignedVerifier, self).__init__()

        if message is None:
            raise RuntimeError("message must not be None")
        self.message = message

        if key_ring is None:
            raise RuntimeError("key_ring must not be None")
        self.key_ring = key_ring

        self.provider = provider if provider is not None else CryptographyProvider()
        self.line_separator = line_separator
        self.encoding = encoding or DEFAULT_ENCODING

    def verify(self) -> SignatureVerificationResult:
        reader = ClearSignedReader(open_input(self.message))
        canonicalizer = ClearTextCanonicalizer(self.line_separator)
        canonicalizer.feed_all(reader)
        plaintext = canonicalizer.plaintext()

        signature = read_signature(reader.signature_octets())
        log.debug("Clear-signed message declares hash(es) %s", reader.hash_names)
        verification = _Verification(self.provider, self.key_ring, signature).prepare()
        for chunk in canonicalizer.hash_chunks():
            verification.update(chunk)

        return verification.finish(plaintext=plaintext, encoding=self.encoding)


def verify_detached(content, signature, key_ring, provider=None):
    return DetachedSignatureVerifier(content, signature, key_ring, provider).verify()


def verify_clear(message, key_ring, provider=None, line_separator=None, encoding=None):
    """
    Returns a (SignatureVerificationResult, plaintext) tuple. Check the
    result before trusting the plaintext.
    """
    result = ClearSignedVerifier(
        message,
        key_ring,
        provider=provider,
        line_separator=line_separator,
        encoding=encoding,
    ).verify()
    return result, result.plaintext
