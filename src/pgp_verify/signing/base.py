from pgp_verify.source import DEFAULT_ENCODING

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"


class SignatureVerificationResult:
    """
    Represents the result after performing signature verification.

    ``success`` is False only when the signature was checked and did not
    match. Anything that prevented the check (bad input, unknown key,
    unsupported algorithm) is raised instead and never shows up here.
    """

    def __init__(
        self,
        success,
        summary,
        key_id=None,
        plaintext=None,
        encoding=DEFAULT_ENCODING,
        extra_information=None,
    ):
        self.success = success
        self.summary = summary
        self.key_id = key_id
        self.plaintext = plaintext
        self.encoding = encoding
        self.extra_information = extra_information or {}

    def __bool__(self):
        return self.success

    @property
    def key_id_hex(self):
        if self.key_id is None:
            return None
        return self.key_id.hex().upper()

    @property
    def text(self):
        """The recovered plaintext decoded with its declared encoding."""
        if self.plaintext is None:
            return None
        return self.plaintext.decode(self.encoding)

    def __repr__(self):
        outcome = "verified" if self.success else "failed"
        return f"<SignatureVerificationResult {outcome} key={self.key_id_hex}>"


class SignatureVerifier:
    """
    Represents a way of performing content verification. Subclasses take
    their inputs in the constructor and check them in verify().
    """

    def verify(self) -> SignatureVerificationResult:
        """
        Does the actual verification.

        Returns an instance of SignatureVerificationResult.
        """
        raise NotImplementedError("verify")
