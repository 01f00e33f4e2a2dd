"""
ASCII armor (RFC 4880 section 6) handling.

Armored data is radix-64 text framed by ``-----BEGIN PGP ...-----`` and
``-----END PGP ...-----`` lines, optionally followed by a CRC24 checksum
line. Binary input is recognised by its first octet, which for any OpenPGP
packet has the high bit set, and is passed through untouched.
"""

import base64
import binascii
import re

from pgp_verify.errors import ArmorDecodeError

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"

CRC24_INIT = 0xB704CE
CRC24_POLY = 0x1864CFB

BEGIN_RE = re.compile(rb"^-----BEGIN PGP (?P<type>[A-Z0-9 ,/]+)-----$")
END_RE = re.compile(rb"^-----END PGP (?P<type>[A-Z0-9 ,/]+)-----$")
HEADER_RE = re.compile(rb"^(?P<name>[!-9;-~]+): ?(?P<value>.*)$")

SIGNED_MESSAGE = b"SIGNED MESSAGE"


def crc24(data):
    crc = CRC24_INIT
    for octet in data:
        crc ^= octet << 16
        for _ in range(8):
            crc <<= 1
            if crc & 0x1000000:
                crc ^= CRC24_POLY
    return crc & 0xFFFFFF


def is_armored(data):
    return bool(data) and not data[0] & 0x80


def parse_header(line):
    """
    Parse a single ``Name: value`` armor header line, returning a tuple of
    strings, or None if the line is not a header.
    """
    match = HEADER_RE.match(line.strip())
    if match is None:
        return None
    return (
        match.group("name").decode("ascii"),
        match.group("value").decode("utf-8", errors="replace"),
    )


def _decode_body(lines, checksum):
    try:
        octets = base64.b64decode(b"".join(lines), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ArmorDecodeError(f"Invalid radix-64 data in armor body: {e}")

    if checksum is None:
        return octets

    try:
        expected = int.from_bytes(base64.b64decode(checksum, validate=True), "big")
    except (binascii.Error, ValueError):
        raise ArmorDecodeError(f"Invalid armor checksum line: ={checksum.decode()}")
    actual = crc24(octets)
    if actual != expected:
        raise ArmorDecodeError(
            f"Armor checksum ({expected:06x}) does not match body ({actual:06x})"
        )
    return octets


def _read_block(lines, block_type):
    """
    Consume header, body and tail lines of one armored block from the
    ``lines`` iterator, whose BEGIN line has already been read.
    """
    body = []
    checksum = None
    in_headers = True
    for raw in lines:
        line = raw.strip()
        if in_headers:
            if not line:
                in_headers = False
                continue
            if parse_header(line) is not None:
                continue
            # Some producers omit the blank line when there are no headers.
            in_headers = False

        end = END_RE.match(line)
        if end is not None:
            if end.group("type") != block_type:
                raise ArmorDecodeError(
                    f"Armor tail {end.group('type').decode()} does not match "
                    f"header {block_type.decode()}"
                )
            return _decode_body(body, checksum)

        if line.startswith(b"=") and len(line) == 5:
            checksum = line[1:]
        elif line:
            body.append(line)

    raise ArmorDecodeError(f"Missing armor tail for {block_type.decode()}")


def decode(data):
    """
    Turn armored or binary OpenPGP data into raw packet octets.

    Every armored block in ``data`` is decoded and the results concatenated
    in order. The clear-text part of a clear-signed message is skipped; use
    ClearSignedReader to get at it.
    """
    data = bytes(data)
    if not is_armored(data):
        return data

    blocks = []
    lines = iter(data.splitlines())
    for raw in lines:
        begin = BEGIN_RE.match(raw.strip())
        if begin is None or begin.group("type") == SIGNED_MESSAGE:
            continue
        blocks.append(_read_block(lines, begin.group("type")))

    if not blocks:
        if not data.strip():
            return b""
        raise ArmorDecodeError("No armor header found in input")
    return b"".join(blocks)


def encode(data, block_type="SIGNATURE", headers=()):
    """Armor ``data`` as a single block of the given type."""
    block_type = block_type.encode("ascii")
    lines = [b"-----BEGIN PGP " + block_type + b"-----"]
    for name, value in headers:
        lines.append(f"{name}: {value}".encode("utf-8"))
    lines.append(b"")

    body = base64.b64encode(data)
    lines.extend(body[i : i + 64] for i in range(0, len(body), 64))
    lines.append(b"=" + base64.b64encode(crc24(data).to_bytes(3, "big")))
    lines.append(b"-----END PGP " + block_type + b"-----")
    return b"\n".join(lines) + b"\n"
