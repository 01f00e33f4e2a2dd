import bz2
import os
import shutil
import tempfile
import zlib

import gnupg
import pytest

from pgp_verify.keyring import KeyRing

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"


FIXTURES_DIR = os.path.join(
    os.path.dirname(os.path.abspath(__file__)),
    "fixtures",
)


def _read_fixture(*parts):
    with open(os.path.join(FIXTURES_DIR, *parts), "rb") as f:
        return f.read()


def _new_format_packet(tag, body):
    """Frame ``body`` as a new-format packet with a five-octet length."""
    return bytes([0xC0 | tag, 0xFF]) + len(body).to_bytes(4, "big") + body


def _compressed_packet(octets, algorithm=2):
    if algorithm == 0:
        data = octets
    elif algorithm == 1:
        deflater = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        data = deflater.compress(octets) + deflater.flush()
    elif algorithm == 2:
        data = zlib.compress(octets)
    else:
        data = bz2.compress(octets)
    return _new_format_packet(8, bytes([algorithm]) + data)


@pytest.fixture
def fixture_bytes():
    return _read_fixture


@pytest.fixture
def fixture_path():
    return lambda *parts: os.path.join(FIXTURES_DIR, *parts)


@pytest.fixture
def new_format_packet():
    return _new_format_packet


@pytest.fixture
def compressed_packet():
    return _compressed_packet


@pytest.fixture
def signer_ring():
    return KeyRing.build(_read_fixture("keys", "signer.asc"))


@pytest.fixture(scope="session")
def full_ring():
    return KeyRing.build(_read_fixture("keys", "ring.asc"))


@pytest.fixture
def gpg_home_with_secret_key():
    """
    A throwaway GnuPG home holding one unprotected RSA signing key. Yields
    a (gpg, fingerprint) tuple.
    """
    if shutil.which("gpg") is None:
        pytest.skip("gpg binary not available")

    # Short path: gpg-agent socket names have a length limit.
    home = tempfile.mkdtemp(prefix="pgpv-")
    try:
        gpg = gnupg.GPG(gnupghome=home)
        key_input = gpg.gen_key_input(
            key_type="RSA",
            key_length=2048,
            key_usage="sign",
            name_real="Round Trip",
            name_email="roundtrip@example.com",
            no_protection=True,
        )
        key = gpg.gen_key(key_input)
        if not key.fingerprint:
            pytest.skip(f"gpg could not generate a key: {key.stderr}")
        yield gpg, key.fingerprint
    finally:
        shutil.rmtree(home, ignore_errors=True)
