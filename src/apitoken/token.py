"""Token value object, its builder, and the encrypt/decrypt codec.

Issuing::

    codec = TokenCodec()
    token = codec.builder().with_key_salt(salt).with_auth_id(42).with_expiration_delay(3600).build()
    wire = codec.encrypt(token.unwrap()).unwrap()

Verifying::

    result = codec.decrypt(wire, salt)
    if result.ok and not codec.is_expired(result.unwrap()):
        ...

Decryption checks authenticity only.  Freshness is a separate predicate so
that an expired-but-genuine token can be told apart from a forged one.
"""

import base64
import binascii
import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

from apitoken.cipher import AESCipher, Cipher, CipherError
from apitoken.constants import PAYLOAD_SIZE, UINT32_MAX
from apitoken.exceptions import TokenError, TokenErrorKind, error_for
from apitoken.packing import fits_uint32, generate_nonce, pack_payload, unpack_payload
from apitoken.result import TokenResult
from apitoken.sources import Clock, RandomSource, system_clock, system_random

logger = logging.getLogger(__name__)

CipherFactory = Callable[[], Cipher]

_CONSTRUCTION_KEY = object()


@dataclass(frozen=True, slots=True)
class Token:
    """An authentication ID bound to an absolute expiration time.

    Only :meth:`TokenBuilder.build` and :meth:`TokenCodec.decrypt` can create
    instances; calling the constructor directly raises ``TypeError``.  The
    salt key is kept for re-encryption but never shown in ``repr`` or
    compared.
    """

    auth_id: int
    expiration_time: int
    key_salt: str = field(default="", repr=False, compare=False)
    _construction_key: object = field(default=None, repr=False, compare=False, kw_only=True)

    def __post_init__(self) -> None:
        if self._construction_key is not _CONSTRUCTION_KEY:
            raise TypeError("Token instances are created by TokenBuilder.build() or TokenCodec.decrypt()")
        if self.auth_id <= 0:
            raise error_for(TokenErrorKind.INVALID_AUTH_ID, "Auth ID must be greater than 0")
        if self.expiration_time <= 0:
            raise error_for(TokenErrorKind.INVALID_EXPIRATION_TIME, "Expiration time must be greater than 0")

    def is_expired(self, now: int | None = None) -> bool:
        """True once *now* (default: wall clock) is past the expiration time."""
        if now is None:
            now = system_clock()
        return self.expiration_time < now


def _make_token(auth_id: int, expiration_time: int, key_salt: str) -> Token:
    return Token(auth_id, expiration_time, key_salt, _construction_key=_CONSTRUCTION_KEY)


def _coerce_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _checked_auth_id(value: Any) -> TokenResult[int]:
    auth_id = _coerce_int(value)
    if auth_id is None or auth_id <= 0:
        return TokenResult.failure(TokenErrorKind.INVALID_AUTH_ID, "Auth ID must be greater than 0")
    if auth_id > UINT32_MAX:
        return TokenResult.failure(TokenErrorKind.INVALID_AUTH_ID, "Auth ID must fit in 32 bits")
    return TokenResult.success(auth_id)


def _checked_expiration_time(value: Any) -> TokenResult[int]:
    # Decode path only: the builder never accepts an arbitrary expiration time.
    expiration_time = _coerce_int(value)
    if expiration_time is None or expiration_time <= 0:
        return TokenResult.failure(
            TokenErrorKind.INVALID_EXPIRATION_TIME, "Expiration time must be greater than 0"
        )
    return TokenResult.success(expiration_time)


@dataclass(frozen=True, slots=True)
class TokenBuilder:
    """Immutable builder that carries the first validation error it meets.

    Each ``with_*`` call returns a new builder.  An invalid value produces a
    builder whose :attr:`error` is set and whose fields are unchanged; once
    an error is carried, later calls keep it and :meth:`build` reports it.
    """

    clock: Clock = field(default=system_clock, repr=False, compare=False)
    auth_id: int | None = None
    expiration_time: int | None = None
    key_salt: str | None = field(default=None, repr=False)
    error: TokenError | None = None

    def with_auth_id(self, value: Any) -> "TokenBuilder":
        if self.error is not None:
            return self
        checked = _checked_auth_id(value)
        if checked.error is not None:
            return replace(self, error=checked.error)
        return replace(self, auth_id=checked.value)

    def with_expiration_delay(self, seconds: Any) -> "TokenBuilder":
        """Set the expiration to ``clock() + seconds``."""
        if self.error is not None:
            return self
        delay = _coerce_int(seconds)
        if delay is None or delay <= 0:
            return self._fail(TokenErrorKind.INVALID_EXPIRATION_DELAY, "Expiration delay must be greater than 0")
        expiration_time = self.clock() + delay
        if expiration_time > UINT32_MAX:
            return self._fail(TokenErrorKind.INVALID_EXPIRATION_DELAY, "Expiration delay overflows a 32-bit timestamp")
        return replace(self, expiration_time=expiration_time)

    def with_key_salt(self, key: Any) -> "TokenBuilder":
        if self.error is not None:
            return self
        key_salt = "" if key is None else str(key)
        if not key_salt:
            return self._fail(TokenErrorKind.EMPTY_SALT_KEY, "Secret key cannot be empty")
        return replace(self, key_salt=key_salt)

    def build(self) -> TokenResult[Token]:
        if self.error is not None:
            return TokenResult(error=self.error)
        if not self.key_salt:
            return TokenResult.failure(
                TokenErrorKind.MISSING_SALT_KEY, "The salt key must be set before building a token"
            )
        if self.auth_id is None:
            return TokenResult.failure(TokenErrorKind.INVALID_AUTH_ID, "Auth ID must be set before building a token")
        if self.expiration_time is None:
            return TokenResult.failure(
                TokenErrorKind.INVALID_EXPIRATION_TIME, "Expiration delay must be set before building a token"
            )
        return TokenResult.success(_make_token(self.auth_id, self.expiration_time, self.key_salt))

    def _fail(self, kind: TokenErrorKind, detail: str) -> "TokenBuilder":
        return replace(self, error=error_for(kind, detail))


class TokenCodec:
    """Encrypts tokens to wire strings and decrypts them back.

    Wire format: ``base64(iv ‖ cipher.encrypt(nonce ‖ auth_id ‖ expiration_time ‖ crc32))``.
    The codec holds no per-token state; a fresh cipher is created for every
    call, so one instance can be shared across threads.
    """

    def __init__(
        self,
        cipher_factory: CipherFactory | None = None,
        clock: Clock = system_clock,
        random_source: RandomSource = system_random,
    ) -> None:
        self._cipher_factory = cipher_factory or functools.partial(AESCipher, random_source)
        self._clock = clock
        self._random = random_source

    def builder(self) -> TokenBuilder:
        """A fresh builder sharing this codec's clock."""
        return TokenBuilder(clock=self._clock)

    def is_expired(self, token: Token) -> bool:
        return token.is_expired(self._clock())

    def encrypt(self, token: Token) -> TokenResult[str]:
        """Pack, checksum and encrypt *token* into a base64 wire string."""
        if not token.key_salt:
            return self._reject(
                TokenErrorKind.MISSING_SALT_KEY, "The salt key must be defined before encrypting the token"
            )
        if token.auth_id <= 0 or not fits_uint32(token.auth_id):
            return self._reject(TokenErrorKind.INVALID_AUTH_ID, "Auth ID must be defined to create the token")
        if token.expiration_time <= 0 or not fits_uint32(token.expiration_time):
            return self._reject(TokenErrorKind.INVALID_EXPIRATION_TIME, "Expiration time must be a 32-bit timestamp")
        if token.expiration_time < self._clock():
            return self._reject(TokenErrorKind.TOKEN_ALREADY_EXPIRED, "Expired token")

        try:
            nonce = generate_nonce(self._random)
        except ValueError as exc:
            return self._reject(TokenErrorKind.ENCRYPTION_FAILURE, f"Cannot generate nonce: {exc}")
        plaintext = pack_payload(nonce, token.auth_id, token.expiration_time)

        cipher = self._cipher_factory()
        try:
            cipher.set_key(token.key_salt)
            ciphertext = cipher.encrypt(plaintext)
            iv = cipher.iv
        except CipherError as exc:
            return self._reject(TokenErrorKind.ENCRYPTION_FAILURE, f"Cannot encrypt token: {exc}")

        logger.debug("Issued token for auth_id=%d (nonce=%s)", token.auth_id, nonce.hex())
        return TokenResult.success(base64.b64encode(iv + ciphertext).decode("ascii"))

    def decrypt(self, wire: str | bytes, key_salt: str) -> TokenResult[Token]:
        """Decrypt and verify *wire*; does not check expiry."""
        if not key_salt:
            return self._reject(
                TokenErrorKind.MISSING_SALT_KEY, "The salt key must be defined before decrypting the token"
            )

        cipher = self._cipher_factory()
        try:
            data = base64.b64decode(wire.strip(), validate=True)
        except (binascii.Error, ValueError):
            return self._reject(TokenErrorKind.MALFORMED_TOKEN, "Token is not valid base64")

        iv_size = cipher.iv_size
        if len(data) < iv_size + PAYLOAD_SIZE:
            return self._reject(
                TokenErrorKind.MALFORMED_TOKEN,
                f"Token too short: {len(data)} bytes, need at least {iv_size + PAYLOAD_SIZE}",
            )

        try:
            cipher.set_key(key_salt)
            cipher.set_iv(data[:iv_size])
            plaintext = cipher.decrypt(data[iv_size:])
        except CipherError as exc:
            return self._reject(TokenErrorKind.DECRYPTION_FAILURE, f"Cannot decrypt token: {exc}")

        unpacked = unpack_payload(plaintext)
        if unpacked.error is not None:
            return self._reject(unpacked.error.kind, unpacked.error.detail)
        payload = unpacked.unwrap()

        if not payload.checksum_matches():
            return self._reject(
                TokenErrorKind.INTEGRITY_MISMATCH, "CRC value of the token does not match the expected value"
            )

        auth_id = _checked_auth_id(payload.auth_id)
        if auth_id.error is not None:
            return self._reject(auth_id.error.kind, auth_id.error.detail)
        expiration_time = _checked_expiration_time(payload.expiration_time)
        if expiration_time.error is not None:
            return self._reject(expiration_time.error.kind, expiration_time.error.detail)

        logger.debug("Verified token for auth_id=%d (nonce=%s)", auth_id.unwrap(), payload.nonce_hex)
        return TokenResult.success(_make_token(auth_id.unwrap(), expiration_time.unwrap(), key_salt))

    @staticmethod
    def _reject(kind: TokenErrorKind, detail: str) -> TokenResult[Any]:
        logger.debug("Token rejected: %s", detail, extra={"token_error": str(kind)})
        return TokenResult.failure(kind, detail)
