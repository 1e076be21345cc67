"""Symmetric cipher boundary used by the token codec.

The codec only relies on the :class:`Cipher` protocol: ``decrypt`` must
invert ``encrypt`` under the same key and IV, and the IV has a fixed,
known length.  :class:`AESCipher` is the default implementation.
"""

import hashlib
from typing import Protocol, runtime_checkable

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher as _CryptoCipher
from cryptography.hazmat.primitives.ciphers import algorithms, modes

from apitoken.constants import AES_BLOCK_SIZE_BITS, AES_IV_SIZE
from apitoken.sources import RandomSource, system_random


class CipherError(Exception):
    """The cipher could not encrypt or decrypt the given data."""


@runtime_checkable
class Cipher(Protocol):
    """Symmetric cipher with an explicit, transmittable IV."""

    @property
    def iv_size(self) -> int: ...

    @property
    def iv(self) -> bytes: ...

    def set_key(self, secret: str) -> None: ...

    def set_iv(self, iv: bytes) -> None: ...

    def encrypt(self, plaintext: bytes) -> bytes: ...

    def decrypt(self, ciphertext: bytes) -> bytes: ...


class AESCipher:
    """AES-256-CBC with PKCS7 padding.

    The 256-bit key is the SHA-256 digest of the secret string.  Every call
    to :meth:`encrypt` draws a fresh 16-byte IV, readable afterwards via
    :attr:`iv` so the caller can transmit it alongside the ciphertext.
    """

    def __init__(self, random_source: RandomSource = system_random) -> None:
        self._random = random_source
        self._key: bytes | None = None
        self._iv: bytes | None = None

    @property
    def iv_size(self) -> int:
        return AES_IV_SIZE

    @property
    def iv(self) -> bytes:
        if self._iv is None:
            raise CipherError("No IV available: encrypt() or set_iv() first")
        return self._iv

    def set_key(self, secret: str) -> None:
        self._key = hashlib.sha256(secret.encode("utf-8")).digest()

    def set_iv(self, iv: bytes) -> None:
        if len(iv) != AES_IV_SIZE:
            raise CipherError(f"IV must be {AES_IV_SIZE} bytes, got {len(iv)}")
        self._iv = bytes(iv)

    def encrypt(self, plaintext: bytes) -> bytes:
        """Pad and encrypt *plaintext* under a newly generated IV."""
        iv = self._random(AES_IV_SIZE)
        if len(iv) != AES_IV_SIZE:
            raise CipherError(f"Random source returned a {len(iv)}-byte IV, expected {AES_IV_SIZE}")
        self._iv = iv
        padder = padding.PKCS7(AES_BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext) + padder.finalize()
        encryptor = self._cipher().encryptor()
        return encryptor.update(padded) + encryptor.finalize()

    def decrypt(self, ciphertext: bytes) -> bytes:
        """Decrypt and unpad *ciphertext* using the IV set via :meth:`set_iv`."""
        decryptor = self._cipher().decryptor()
        unpadder = padding.PKCS7(AES_BLOCK_SIZE_BITS).unpadder()
        try:
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as exc:
            raise CipherError(f"Decryption failed: {exc}") from exc

    def _cipher(self) -> _CryptoCipher:  # type: ignore[type-arg]
        if self._key is None:
            raise CipherError("No key set: call set_key() first")
        return _CryptoCipher(algorithms.AES(self._key), modes.CBC(self.iv))
