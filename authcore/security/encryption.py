"""
Payload encryption utilities using AES in CBC mode.

Every encryption call draws a fresh random initialization vector (IV). The
IV is not secret and travels alongside the ciphertext, either as a separate
field of an EncryptedEnvelope or in the compact ``"<iv>:<ciphertext>"`` form.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .encoding import decode_text, encode_bytes
from .exceptions import DecryptionError, DeserializationError, InvalidArgumentError
from .secure_random import random_bytes

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "aes-256-cbc"
IV_LENGTH = 16  # AES block size
COMPACT_SEPARATOR = ":"

# Algorithm name -> required key length in bytes
KEY_LENGTHS = {
    "aes-128-cbc": 16,
    "aes-192-cbc": 24,
    "aes-256-cbc": 32,
}


@dataclass(frozen=True)
class EncryptionConfig:
    """Cipher algorithm and raw key owned by one EncryptionService."""

    key: bytes
    algorithm: str = DEFAULT_ALGORITHM

    def __post_init__(self):
        if not isinstance(self.key, bytes):
            raise InvalidArgumentError("Encryption key must be bytes; use from_hex() for hex strings")
        if self.algorithm not in KEY_LENGTHS:
            raise InvalidArgumentError(f"Unsupported encryption algorithm: {self.algorithm!r}")
        expected = KEY_LENGTHS[self.algorithm]
        if len(self.key) != expected:
            raise InvalidArgumentError(
                f"Encryption key for {self.algorithm} must be {expected} bytes, got {len(self.key)}"
            )

    @classmethod
    def from_hex(cls, encryption_key: str | None, algorithm: str | None = None) -> "EncryptionConfig":
        """
        Build a config from a hex-encoded key.

        Args:
            encryption_key: Hex string, e.g. 64 hex characters for aes-256-cbc
            algorithm: Cipher name (default: aes-256-cbc)

        Raises:
            InvalidArgumentError: If the key is missing, not hex, or the wrong length
        """
        if not encryption_key:
            raise InvalidArgumentError("Encryption key is missing")
        try:
            key = bytes.fromhex(encryption_key)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError("Encryption key must be a hex string") from e
        return cls(key=key, algorithm=algorithm or DEFAULT_ALGORITHM)


@dataclass(frozen=True)
class EncryptedEnvelope:
    """IV and ciphertext, both rendered in the same text encoding."""

    iv: str
    encrypted: str

    def to_compact(self) -> str:
        return f"{self.iv}{COMPACT_SEPARATOR}{self.encrypted}"

    @classmethod
    def from_compact(cls, text: str) -> "EncryptedEnvelope":
        """
        Split a compact string on its first separator.

        Raises:
            DecryptionError: If the text has no separator
        """
        if not isinstance(text, str):
            raise DecryptionError("Compact payload must be a string")
        iv, separator, encrypted = text.partition(COMPACT_SEPARATOR)
        if not separator:
            raise DecryptionError("Malformed compact payload: missing IV separator")
        return cls(iv=iv, encrypted=encrypted)


class EncryptionService:
    """Encrypt and decrypt text or JSON-serializable objects."""

    def __init__(
        self,
        encryption_key: str | None = None,
        algorithm: str = DEFAULT_ALGORITHM,
        config: EncryptionConfig | None = None,
    ):
        """
        Initialize with a hex-encoded key or a prebuilt EncryptionConfig.

        Args:
            encryption_key: Hex key matching the algorithm's key size
                (example: 6b42ea8281fb0056b868e1614a1dfe58c47d74536e979af8b193828050db5d31)
            algorithm: Cipher name (default: aes-256-cbc)
            config: Ready-made config; takes precedence over encryption_key

        Raises:
            InvalidArgumentError: If the key is missing or invalid
        """
        if config is None:
            config = EncryptionConfig.from_hex(encryption_key, algorithm)
        self._config = config

    @property
    def algorithm(self) -> str:
        return self._config.algorithm

    def create_iv(self) -> bytes:
        """Return a fresh random IV. IVs must never be reused with the same key."""
        return random_bytes(IV_LENGTH)

    def _cipher(self, iv: bytes) -> Cipher:
        return Cipher(algorithms.AES(self._config.key), modes.CBC(iv))

    def encrypt(self, text: str, encoding: str = "hex") -> EncryptedEnvelope:
        """
        Encrypt a string value under a newly generated IV.

        Args:
            text: Plain text to encrypt
            encoding: Text encoding of the returned IV and ciphertext

        Returns:
            EncryptedEnvelope with iv and encrypted fields
        """
        if not isinstance(text, str):
            raise InvalidArgumentError("Text to encrypt must be a string")

        iv = self.create_iv()
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(text.encode("utf-8")) + padder.finalize()

        encryptor = self._cipher(iv).encryptor()
        encrypted = encryptor.update(padded) + encryptor.finalize()

        return EncryptedEnvelope(
            iv=encode_bytes(iv, encoding),
            encrypted=encode_bytes(encrypted, encoding),
        )

    def encrypt_object(self, obj: Any, encoding: str = "hex") -> EncryptedEnvelope:
        """Serialize *obj* to compact JSON and encrypt it."""
        try:
            text = json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Object is not JSON serializable: {e}") from e
        return self.encrypt(text, encoding)

    def encrypt_compact(self, text: str, encoding: str = "hex") -> str:
        """Encrypt *text* and return ``"<iv>:<encrypted>"``."""
        return self.encrypt(text, encoding).to_compact()

    def encrypt_object_compact(self, obj: Any, encoding: str = "hex") -> str:
        """Encrypt *obj* as JSON and return ``"<iv>:<encrypted>"``."""
        return self.encrypt_object(obj, encoding).to_compact()

    def decrypt(self, iv: str, encrypted: str, encoding: str = "hex") -> str:
        """
        Decrypt a ciphertext produced by encrypt().

        Args:
            iv: Encoded IV
            encrypted: Encoded ciphertext
            encoding: Text encoding of iv and encrypted

        Returns:
            Decrypted plain text

        Raises:
            DecryptionError: If the key, IV, or ciphertext is invalid or corrupted
        """
        try:
            iv_bytes = decode_text(iv, encoding)
            encrypted_bytes = decode_text(encrypted, encoding)
        except InvalidArgumentError:
            raise
        except (TypeError, ValueError) as e:
            raise DecryptionError(f"Failed to decode encrypted payload: {e}") from e

        if len(iv_bytes) != IV_LENGTH:
            raise DecryptionError(f"IV must be {IV_LENGTH} bytes, got {len(iv_bytes)}")

        try:
            decryptor = self._cipher(iv_bytes).decryptor()
            padded = decryptor.update(encrypted_bytes) + decryptor.finalize()
            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            plain = unpadder.update(padded) + unpadder.finalize()
            return plain.decode("utf-8")
        except ValueError as e:
            # Bad padding, partial block, or non UTF-8 output
            logger.debug("Decryption failed: %s", e)
            raise DecryptionError(f"Failed to decrypt payload: {e}") from e

    def decrypt_compact(self, text: str, encoding: str = "hex") -> str:
        """
        Decrypt a ``"<iv>:<encrypted>"`` string.

        The text is split on its first separator. With the "binary" encoding
        the IV itself may contain the separator, so the fixed-length IV prefix
        is taken instead.
        """
        if encoding == "binary" and isinstance(text, str):
            if text[IV_LENGTH : IV_LENGTH + 1] != COMPACT_SEPARATOR:
                raise DecryptionError("Malformed compact payload: missing IV separator")
            envelope = EncryptedEnvelope(iv=text[:IV_LENGTH], encrypted=text[IV_LENGTH + 1 :])
        else:
            envelope = EncryptedEnvelope.from_compact(text)
        return self.decrypt(envelope.iv, envelope.encrypted, encoding)

    def decrypt_object_compact(self, text: str, encoding: str = "hex") -> Any:
        """
        Decrypt a compact string and parse the JSON inside it.

        Raises:
            DecryptionError: If decryption fails
            DeserializationError: If the decrypted text is not valid JSON
        """
        decrypted = self.decrypt_compact(text, encoding)
        try:
            return json.loads(decrypted)
        except json.JSONDecodeError as e:
            raise DeserializationError(f"Decrypted payload is not valid JSON: {e}") from e
