"""
Reading and canonicalizing the clear-text section of a clear-signed message
(RFC 4880 section 7).

The signed text is hashed with trailing whitespace removed from every line
and with CRLF between lines. The line ending before the signature armor is
not part of the signed text, so no CRLF follows the last line.
"""

import os

from pgp_verify.armor.base import SIGNED_MESSAGE, decode, parse_header
from pgp_verify.errors import ArmorDecodeError

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"

SIGNED_MESSAGE_HEADER = b"-----BEGIN PGP " + SIGNED_MESSAGE + b"-----"
SIGNATURE_HEADER = b"-----BEGIN PGP SIGNATURE-----"
CRLF = b"\r\n"
# Line endings count as trailing whitespace too.
TRAILING_WHITESPACE = b" \t\r\n"


def canonical_line(line):
    return line.rstrip(TRAILING_WHITESPACE)


class ClearSignedReader:
    """
    Line-at-a-time reader over a clear-signed message.

    Iterating yields the clear-text lines, dash-escaping removed and line
    endings intact, while ``is_clear_text`` is True. Once the signature
    armor is reached iteration stops and signature_octets() decodes the
    remainder of the stream.
    """

    def __init__(self, stream):
        self.stream = stream
        self.headers = []
        self.is_clear_text = False
        self._signature_header = None
        self._read_preamble()

    def _read_preamble(self):
        while True:
            line = self.stream.readline()
            if isinstance(line, str):
                raise TypeError("Clear-signed messages must be read in binary mode")
            if not line:
                raise ArmorDecodeError("No clear-signed message header found")
            if line.strip() == SIGNED_MESSAGE_HEADER:
                break

        while True:
            line = self.stream.readline()
            if not line:
                raise ArmorDecodeError("Clear-signed message ends inside its headers")
            if not line.strip():
                break
            header = parse_header(line)
            if header is None:
                raise ArmorDecodeError(f"Invalid armor header line: {line!r}")
            self.headers.append(header)

        self.is_clear_text = True

    def __iter__(self):
        return self

    def __next__(self):
        if not self.is_clear_text:
            raise StopIteration

        line = self.stream.readline()
        if not line:
            raise ArmorDecodeError("Clear-signed message has no signature block")
        if line.rstrip() == SIGNATURE_HEADER:
            self.is_clear_text = False
            self._signature_header = line
            raise StopIteration

        if line.startswith(b"- "):
            return line[2:]
        return line

    @property
    def hash_names(self):
        """Hash algorithm names declared by the ``Hash:`` armor headers."""
        names = []
        for name, value in self.headers:
            if name == "Hash":
                names.extend(v.strip() for v in value.split(","))
        return names

    def signature_octets(self):
        for _ in self:
            pass
        return decode(self._signature_header + self.stream.read())


class ClearTextCanonicalizer:
    """
    Collects clear-text lines and produces both the exact octets that were
    hashed by the signer and the plaintext handed back to the caller.
    """

    def __init__(self, line_separator=None):
        if line_separator is None:
            line_separator = os.linesep
        if isinstance(line_separator, str):
            line_separator = line_separator.encode("ascii")
        self.line_separator = line_separator
        self.lines = []

    def feed(self, line):
        self.lines.append(canonical_line(line))

    def feed_all(self, lines):
        for line in lines:
            self.feed(line)
        return self

    def hash_chunks(self):
        for index, line in enumerate(self.lines):
            if index:
                yield CRLF + line
            else:
                yield line

    def canonical_bytes(self):
        return b"".join(self.hash_chunks())

    def plaintext(self):
        return b"".join(line + self.line_separator for line in self.lines)
