import io

import pytest

from pgp_verify import armor
from pgp_verify.errors import MalformedDocument, MalformedPacket
from pgp_verify.packet import (
    PublicKey,
    SignaturePacket,
    UserIDPacket,
    parse_packets,
    read_packet,
    read_signature,
)

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"

SIGNER_FINGERPRINT = "D6F530F10712182BF6B4200D0D3DD2E6CA93E066"
SIGNER_KEY_ID = "0D3DD2E6CA93E066"
P256_OID = bytes.fromhex("2A8648CE3D030107")
ED25519_OID = bytes.fromhex("2B06010401DA470F01")


def _packets(octets, **kwargs):
    return list(parse_packets(io.BytesIO(octets), **kwargs))


def _signature_body(fixture_bytes):
    # Old-format header with a two-octet length: 0x89 LL LL.
    octets = fixture_bytes("detached", "hello.txt.signer.sig")
    assert octets[0] == 0x89
    return octets[3:]


def test_public_key_packet(fixture_bytes):
    packets = _packets(fixture_bytes("keys", "signer.gpg"))
    assert [type(p) for p in packets] == [PublicKey, UserIDPacket, SignaturePacket]

    key = packets[0]
    assert key.version == 4
    assert key.algorithm == 1
    assert key.algorithm_name == "RSA"
    assert key.fingerprint_hex == SIGNER_FINGERPRINT
    assert key.key_id_hex == SIGNER_KEY_ID
    assert not key.is_subkey
    n, e = key.material
    assert e == 65537
    assert n.bit_length() == 2048

    assert packets[1].user_id == "Test Signer <signer@example.com>"


def test_subkey_packets(fixture_bytes):
    keys = _packets(fixture_bytes("keys", "subkey.gpg"), wanted={6, 14})
    assert [k.key_id_hex for k in keys] == ["87BEA74D75C1B74A", "8F6DF3DC8E4DFFD3"]
    assert [k.is_subkey for k in keys] == [False, True]


@pytest.mark.parametrize(
    "name, algorithm, oid, point_length",
    [
        ("ecdsa", 19, P256_OID, 65),
        ("eddsa", 22, ED25519_OID, 33),
    ],
)
def test_curve_keys(fixture_bytes, name, algorithm, oid, point_length):
    key = _packets(fixture_bytes("keys", f"{name}.gpg"), wanted={6})[0]
    assert key.algorithm == algorithm
    assert key.curve_oid == oid
    assert len(key.material[0]) == point_length


def test_dsa_key(fixture_bytes):
    key = _packets(fixture_bytes("keys", "dsa.gpg"), wanted={6})[0]
    assert key.algorithm_name == "DSA"
    p, q, g, y = key.material
    assert p.bit_length() == 2048
    assert key.key_id_hex == "5DD84368BE85240C"


def test_read_signature(fixture_bytes):
    signature = read_signature(fixture_bytes("detached", "hello.txt.signer.sig"))
    assert signature.version == 4
    assert signature.signature_type == 0x00
    assert not signature.is_text
    assert signature.public_key_algorithm == 1
    assert signature.hash_algorithm == 8
    assert signature.issuer_key_id_hex == SIGNER_KEY_ID
    assert isinstance(signature.created, int)
    assert len(signature.hash_prefix) == 2
    assert len(signature.values) == 1
    # version, type, algorithms, hashed area, then 0x04 0xFF and its length
    hashed_length = int.from_bytes(signature.hash_trailer[-4:], "big")
    assert signature.hash_trailer[-6:-4] == b"\x04\xff"
    assert len(signature.hash_trailer) == hashed_length + 6


def test_text_signature_type(fixture_bytes):
    signature = read_signature(armor.decode(fixture_bytes("detached", "text.txt.asc")))
    assert signature.signature_type == 0x01
    assert signature.is_text


def test_eddsa_signature_values(fixture_bytes):
    signature = read_signature(fixture_bytes("detached", "hello.txt.eddsa.sig"))
    assert signature.public_key_algorithm == 22
    r, s = signature.values
    assert r.bit_length() <= 256
    assert s.bit_length() <= 256


def test_issuer_from_fingerprint_subpacket(fixture_bytes, new_format_packet):
    body = bytearray(_signature_body(fixture_bytes))
    # Drop the unhashed area, which holds the issuer subpacket; the hashed
    # area still has the issuer fingerprint.
    hashed_length = int.from_bytes(body[4:6], "big")
    unhashed_start = 6 + hashed_length
    unhashed_length = int.from_bytes(
        body[unhashed_start : unhashed_start + 2], "big"
    )
    stripped = (
        body[:unhashed_start]
        + b"\x00\x00"
        + body[unhashed_start + 2 + unhashed_length :]
    )
    signature = read_signature(new_format_packet(2, bytes(stripped)))
    assert signature.unhashed_subpackets == []
    assert signature.issuer_key_id_hex == SIGNER_KEY_ID


def test_unknown_packets_are_skipped(fixture_bytes):
    marker = bytes([0x80 | (10 << 2), 3]) + b"PGP"
    octets = marker + fixture_bytes("detached", "hello.txt.signer.sig")
    packets = _packets(octets)
    assert len(packets) == 1
    assert isinstance(packets[0], SignaturePacket)


def test_wanted_filters_packets(fixture_bytes):
    packets = _packets(fixture_bytes("keys", "signer.gpg"), wanted={13})
    assert [type(p) for p in packets] == [UserIDPacket]


def test_new_format_header(fixture_bytes, new_format_packet):
    body = _signature_body(fixture_bytes)
    signature = read_signature(new_format_packet(2, body))
    assert signature.body == body


def test_new_format_two_octet_length(fixture_bytes):
    body = _signature_body(fixture_bytes)
    length = len(body) - 192
    assert 0 <= length < 8192
    octets = bytes([0xC2, (length >> 8) + 192, length & 0xFF]) + body
    assert read_packet(io.BytesIO(octets)) == (2, body)


def test_partial_body_lengths(fixture_bytes):
    body = _signature_body(fixture_bytes)
    # A 2-octet partial chunk (0xE1), a 1-octet one (0xE0), then the rest.
    rest = body[3:]
    assert len(rest) < 192 + 8192
    length = len(rest) - 192
    octets = (
        bytes([0xC2, 0xE1])
        + body[:2]
        + bytes([0xE0])
        + body[2:3]
        + bytes([(length >> 8) + 192, length & 0xFF])
        + rest
    )
    assert read_packet(io.BytesIO(octets)) == (2, body)


def test_indeterminate_length(fixture_bytes):
    body = _signature_body(fixture_bytes)
    octets = bytes([0x80 | (2 << 2) | 3]) + body
    assert read_packet(io.BytesIO(octets)) == (2, body)


@pytest.mark.parametrize("algorithm", [0, 1, 2, 3])
def test_compressed_signature(fixture_bytes, compressed_packet, algorithm):
    octets = fixture_bytes("detached", "hello.txt.signer.sig")
    signature = read_signature(compressed_packet(octets, algorithm))
    assert signature.issuer_key_id_hex == SIGNER_KEY_ID


def test_nested_compression(fixture_bytes, compressed_packet):
    octets = fixture_bytes("detached", "hello.txt.signer.sig")
    nested = compressed_packet(compressed_packet(octets))
    with pytest.raises(MalformedDocument) as ex:
        read_signature(nested)
    assert "Nested compressed" in str(ex.value)


def test_unknown_compression_algorithm(new_format_packet):
    with pytest.raises(MalformedDocument):
        read_signature(new_format_packet(8, b"\x09garbage"))


def test_corrupt_compressed_data(new_format_packet):
    with pytest.raises(MalformedPacket):
        read_signature(new_format_packet(8, b"\x02not zlib at all"))


@pytest.mark.parametrize(
    "octets",
    [
        b"\x00\x01\x02",
        b"\x89",
        b"\x89\x01",
        b"\xc2\xff\x00",
    ],
)
def test_malformed_headers(octets):
    with pytest.raises(MalformedPacket):
        read_signature(octets)


def test_truncated_body(fixture_bytes):
    octets = fixture_bytes("detached", "hello.txt.signer.sig")
    with pytest.raises(MalformedPacket) as ex:
        read_signature(octets[:-10])
    assert "Truncated" in str(ex.value)


def test_truncated_mpi(fixture_bytes, new_format_packet):
    body = _signature_body(fixture_bytes)
    with pytest.raises(MalformedPacket):
        read_signature(new_format_packet(2, body[:-10]))


def test_unsupported_signature_version(fixture_bytes):
    octets = bytearray(fixture_bytes("detached", "hello.txt.signer.sig"))
    octets[3] = 5
    with pytest.raises(MalformedPacket) as ex:
        read_signature(bytes(octets))
    assert "version 5" in str(ex.value)


@pytest.mark.parametrize("octets", [b"", b"\xb4\x03abc"])
def test_no_signature(octets):
    with pytest.raises(MalformedDocument):
        read_signature(octets)


def test_only_first_signature_is_read(fixture_bytes):
    first = fixture_bytes("detached", "hello.txt.signer.sig")
    second = fixture_bytes("detached", "hello.txt.dsa.sig")
    signature = read_signature(first + second)
    assert signature.issuer_key_id_hex == SIGNER_KEY_ID


def test_parse_is_lazy(fixture_bytes):
    octets = fixture_bytes("detached", "hello.txt.signer.sig") + b"\x00garbage"
    packets = parse_packets(io.BytesIO(octets))
    assert isinstance(next(packets), SignaturePacket)
    with pytest.raises(MalformedPacket):
        next(packets)
