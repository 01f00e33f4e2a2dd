"""
Normalize the different shapes input can arrive in (raw bytes, text with a
known encoding, or an open binary stream) into a binary stream.
"""

import io

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"

DEFAULT_ENCODING = "utf-8"


class TextWithEncoding:
    """Text that must be encoded before it is hashed or parsed."""

    def __init__(self, text, encoding=DEFAULT_ENCODING):
        self.text = text
        self.encoding = encoding

    def to_bytes(self):
        return self.text.encode(self.encoding)


def open_input(data):
    """
    Return a binary stream for ``data``.

    ``str`` is treated as TextWithEncoding(data, "utf-8"). Objects with a
    ``read`` method are returned as-is; the caller keeps ownership. A closed
    stream is an OSError.
    """
    if isinstance(data, str):
        data = TextWithEncoding(data)
    if isinstance(data, TextWithEncoding):
        return io.BytesIO(data.to_bytes())
    if isinstance(data, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(data))
    if hasattr(data, "read"):
        if getattr(data, "closed", False):
            raise OSError("Input stream is closed")
        return data
    raise TypeError(f"Cannot read input of type {type(data).__name__}")


def read_all(data):
    """Read ``data`` (see open_input) to the end and return bytes."""
    stream = open_input(data)
    content = stream.read()
    if isinstance(content, str):
        raise TypeError("Input streams must be opened in binary mode")
    return content
