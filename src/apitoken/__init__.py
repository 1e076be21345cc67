"""Compact, stateless encrypted authentication tokens for APIs."""

from apitoken.cipher import AESCipher, Cipher, CipherError
from apitoken.exceptions import (
    DecryptionFailureError,
    EmptySaltKeyError,
    EncryptionFailureError,
    IntegrityMismatchError,
    InvalidAuthIdError,
    InvalidExpirationDelayError,
    InvalidExpirationTimeError,
    MalformedTokenError,
    MissingSaltKeyError,
    TokenAlreadyExpiredError,
    TokenError,
    TokenErrorKind,
    TokenExpiredError,
    UnpackFailureError,
)
from apitoken.logging import JSONLogFormatter, configure_logging
from apitoken.packing import (
    PackedPayload,
    checksum,
    generate_nonce,
    pack_payload,
    pack_record,
    unpack_payload,
)
from apitoken.result import TokenResult
from apitoken.service import TokenService
from apitoken.settings import TokenSettings, get_settings
from apitoken.token import Token, TokenBuilder, TokenCodec

__all__ = [
    "AESCipher",
    "Cipher",
    "CipherError",
    "DecryptionFailureError",
    "EmptySaltKeyError",
    "EncryptionFailureError",
    "IntegrityMismatchError",
    "InvalidAuthIdError",
    "InvalidExpirationDelayError",
    "InvalidExpirationTimeError",
    "JSONLogFormatter",
    "MalformedTokenError",
    "MissingSaltKeyError",
    "PackedPayload",
    "Token",
    "TokenAlreadyExpiredError",
    "TokenBuilder",
    "TokenCodec",
    "TokenError",
    "TokenErrorKind",
    "TokenExpiredError",
    "TokenResult",
    "TokenService",
    "TokenSettings",
    "UnpackFailureError",
    "checksum",
    "configure_logging",
    "generate_nonce",
    "get_settings",
    "pack_payload",
    "pack_record",
    "unpack_payload",
]
