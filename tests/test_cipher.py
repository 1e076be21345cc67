"""Tests for AESCipher and the cipher protocol."""

import pytest

from apitoken.cipher import AESCipher, Cipher, CipherError
from conftest import FakeCipher

PLAINTEXT = b"eighteen-byte-data"


@pytest.fixture
def encrypting_cipher() -> AESCipher:
    cipher = AESCipher()
    cipher.set_key("s3cr3t")
    return cipher


def _decrypt(key: str, iv: bytes, ciphertext: bytes) -> bytes:
    cipher = AESCipher()
    cipher.set_key(key)
    cipher.set_iv(iv)
    return cipher.decrypt(ciphertext)


def test_encrypt_decrypt_roundtrip(encrypting_cipher: AESCipher) -> None:
    """Decrypting with the same key and IV returns the original plaintext."""
    ciphertext = encrypting_cipher.encrypt(PLAINTEXT)
    assert _decrypt("s3cr3t", encrypting_cipher.iv, ciphertext) == PLAINTEXT


def test_ciphertext_is_block_padded(encrypting_cipher: AESCipher) -> None:
    """18 bytes of plaintext pad to two AES blocks."""
    assert len(encrypting_cipher.encrypt(PLAINTEXT)) == 32
    assert encrypting_cipher.iv_size == 16
    assert len(encrypting_cipher.iv) == 16


def test_encrypt_generates_fresh_iv(encrypting_cipher: AESCipher) -> None:
    """Same plaintext encrypted twice yields different IVs and ciphertexts."""
    ct1 = encrypting_cipher.encrypt(PLAINTEXT)
    iv1 = encrypting_cipher.iv
    ct2 = encrypting_cipher.encrypt(PLAINTEXT)
    iv2 = encrypting_cipher.iv
    assert iv1 != iv2
    assert ct1 != ct2
    assert _decrypt("s3cr3t", iv1, ct1) == PLAINTEXT
    assert _decrypt("s3cr3t", iv2, ct2) == PLAINTEXT


def test_iv_comes_from_random_source() -> None:
    cipher = AESCipher(random_source=lambda size: b"\x07" * size)
    cipher.set_key("s3cr3t")
    cipher.encrypt(PLAINTEXT)
    assert cipher.iv == b"\x07" * 16


def test_decrypt_with_wrong_key_does_not_recover_plaintext(encrypting_cipher: AESCipher) -> None:
    """A different key either fails padding or yields different bytes."""
    ciphertext = encrypting_cipher.encrypt(PLAINTEXT)
    try:
        recovered = _decrypt("other", encrypting_cipher.iv, ciphertext)
    except CipherError:
        return
    assert recovered != PLAINTEXT


def test_decrypt_rejects_partial_block(encrypting_cipher: AESCipher) -> None:
    ciphertext = encrypting_cipher.encrypt(PLAINTEXT)
    with pytest.raises(CipherError, match="Decryption failed"):
        _decrypt("s3cr3t", encrypting_cipher.iv, ciphertext[:-1])


def test_set_iv_rejects_wrong_length() -> None:
    with pytest.raises(CipherError, match="16 bytes"):
        AESCipher().set_iv(b"\x00" * 8)


def test_key_required() -> None:
    cipher = AESCipher()
    with pytest.raises(CipherError, match="No key set"):
        cipher.encrypt(PLAINTEXT)


def test_iv_unavailable_before_use() -> None:
    with pytest.raises(CipherError, match="No IV available"):
        _ = AESCipher().iv


def test_implementations_satisfy_protocol() -> None:
    assert isinstance(AESCipher(), Cipher)
    assert isinstance(FakeCipher(lambda size: b"\x00" * size), Cipher)


def test_encrypt_rejects_wrong_length_iv_from_random_source() -> None:
    cipher = AESCipher(random_source=lambda size: b"\x07" * 8)
    cipher.set_key("s3cr3t")
    with pytest.raises(CipherError, match="8-byte IV, expected 16"):
        cipher.encrypt(PLAINTEXT)
