"""
Text encodings for binary values (IVs, ciphertext, random tokens).
"""

import base64
import binascii

from .exceptions import InvalidArgumentError

SUPPORTED_ENCODINGS = ("hex", "base64", "base64url", "binary")


def _check(encoding: str) -> None:
    if encoding not in SUPPORTED_ENCODINGS:
        raise InvalidArgumentError(
            f"Unsupported encoding {encoding!r}; expected one of {', '.join(SUPPORTED_ENCODINGS)}"
        )


def encode_bytes(data: bytes, encoding: str = "hex") -> str:
    """
    Render bytes as text.

    Args:
        data: Raw bytes
        encoding: One of "hex", "base64", "base64url" or "binary" (latin-1)

    Returns:
        Encoded string
    """
    _check(encoding)
    if encoding == "hex":
        return data.hex()
    if encoding == "base64":
        return base64.b64encode(data).decode("ascii")
    if encoding == "base64url":
        return base64.urlsafe_b64encode(data).decode("ascii")
    return data.decode("latin-1")


def decode_text(text: str, encoding: str = "hex") -> bytes:
    """
    Parse text produced by encode_bytes back into bytes.

    Raises:
        InvalidArgumentError: If the encoding is unsupported
        ValueError: If the text is not valid for the encoding
    """
    _check(encoding)
    try:
        if encoding == "hex":
            return bytes.fromhex(text)
        if encoding == "base64":
            return base64.b64decode(text, validate=True)
        if encoding == "base64url":
            return base64.urlsafe_b64decode(text)
        return text.encode("latin-1")
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid {encoding} data: {e}") from e
