"""Shared fixtures: deterministic clock, random source and cipher."""

from collections.abc import Callable
from itertools import count

import pytest

from apitoken.cipher import CipherError
from apitoken.token import TokenCodec

NOW = 1_700_000_000
SALT = "s3cr3t"


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: int = NOW) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class CountingRandom:
    """Predictable 'random' bytes: each call returns a distinct repeated byte."""

    def __init__(self) -> None:
        self._counter = count(1)

    def __call__(self, size: int) -> bytes:
        return bytes([next(self._counter) % 256]) * size


class FakeCipher:
    """XOR 'cipher' with a 4-byte IV; decrypt(encrypt(x)) == x under the same key and IV."""

    IV_SIZE = 4

    def __init__(self, random_source: Callable[[int], bytes]) -> None:
        self._random = random_source
        self._key = b""
        self._iv: bytes | None = None

    @property
    def iv_size(self) -> int:
        return self.IV_SIZE

    @property
    def iv(self) -> bytes:
        if self._iv is None:
            raise CipherError("no IV")
        return self._iv

    def set_key(self, secret: str) -> None:
        self._key = secret.encode("utf-8")

    def set_iv(self, iv: bytes) -> None:
        self._iv = iv

    def encrypt(self, plaintext: bytes) -> bytes:
        self._iv = self._random(self.IV_SIZE)
        return self._xor(plaintext)

    def decrypt(self, ciphertext: bytes) -> bytes:
        return self._xor(ciphertext)

    def _xor(self, data: bytes) -> bytes:
        stream = (self._key + self.iv) * (len(data) // len(self._key + self.iv) + 1)
        return bytes(a ^ b for a, b in zip(data, stream, strict=False))


class BrokenCipher(FakeCipher):
    """Cipher that fails in both directions."""

    def encrypt(self, plaintext: bytes) -> bytes:
        raise CipherError("encrypt exploded")

    def decrypt(self, ciphertext: bytes) -> bytes:
        raise CipherError("decrypt exploded")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def random_source() -> CountingRandom:
    return CountingRandom()


@pytest.fixture
def codec(clock: FakeClock, random_source: CountingRandom) -> TokenCodec:
    """Real AES codec with a controlled clock and random source."""
    return TokenCodec(clock=clock, random_source=random_source)


@pytest.fixture
def fake_codec(clock: FakeClock, random_source: CountingRandom) -> TokenCodec:
    """Codec backed by the deterministic XOR cipher."""
    return TokenCodec(cipher_factory=lambda: FakeCipher(random_source), clock=clock, random_source=random_source)
