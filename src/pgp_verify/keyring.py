"""
An immutable collection of public keys indexed by key ID.
"""

import io
import logging
from types import MappingProxyType

from pgp_verify import armor
from pgp_verify.packet import TAG_PUBLIC_KEY, TAG_PUBLIC_SUBKEY, parse_packets
from pgp_verify.source import read_all

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"

log = logging.getLogger(__name__)


def normalize_key_id(key_id):
    """Accept a key ID as 8 octets, 16 hex digits, or an integer."""
    if isinstance(key_id, int):
        return key_id.to_bytes(8, "big")
    if isinstance(key_id, str):
        key_id = key_id.strip()
        if key_id[:2].lower() == "0x":
            key_id = key_id[2:]
        return bytes.fromhex(key_id)
    return bytes(key_id)


class KeyRing:
    """
    Public keys and subkeys, in the order they were parsed.

    When two keys share a key ID the first one wins. A ring is never
    modified after construction, so one instance can serve any number of
    concurrent verifications.
    """

    def __init__(self, keys=()):
        keys = tuple(keys)
        index = {}
        for key in keys:
            index.setdefault(key.key_id, key)
        self._keys = keys
        self._index = MappingProxyType(index)

    @classmethod
    def build(cls, data):
        """
        Build a ring from armored or binary key material. ``data`` may be
        bytes, text or a binary stream. User IDs, signatures and any other
        packets in between the keys are ignored.
        """
        octets = armor.decode(read_all(data))
        packets = parse_packets(
            io.BytesIO(octets), wanted={TAG_PUBLIC_KEY, TAG_PUBLIC_SUBKEY}
        )
        ring = cls(packets)
        log.debug("Built key ring with %d key(s): %s", len(ring), ring.key_ids)
        return ring

    @classmethod
    def from_keys(cls, keys):
        return cls(keys)

    def lookup(self, key_id):
        return self._index.get(normalize_key_id(key_id))

    @property
    def key_ids(self):
        return [key.key_id_hex for key in self._keys]

    def __len__(self):
        return len(self._keys)

    def __iter__(self):
        return iter(self._keys)

    def __contains__(self, key_id):
        return self.lookup(key_id) is not None

    def __repr__(self):
        return f"<KeyRing {len(self)} key(s)>"
