"""Typed token errors and the error-kind taxonomy."""

import enum


class TokenErrorKind(enum.StrEnum):
    """Every way issuing or verifying a token can fail."""

    INVALID_AUTH_ID = "invalid_auth_id"
    INVALID_EXPIRATION_DELAY = "invalid_expiration_delay"
    INVALID_EXPIRATION_TIME = "invalid_expiration_time"
    EMPTY_SALT_KEY = "empty_salt_key"
    MISSING_SALT_KEY = "missing_salt_key"
    MALFORMED_TOKEN = "malformed_token"
    INTEGRITY_MISMATCH = "integrity_mismatch"
    UNPACK_FAILURE = "unpack_failure"
    TOKEN_ALREADY_EXPIRED = "token_already_expired"
    DECRYPTION_FAILURE = "decryption_failure"
    ENCRYPTION_FAILURE = "encryption_failure"
    TOKEN_EXPIRED = "token_expired"


class TokenError(Exception):
    """Base exception for token errors.

    Carries the :class:`TokenErrorKind`, a stable numeric ``code`` and a
    human-readable ``detail``.  The detail never contains the salt key.
    """

    kind: TokenErrorKind
    code: int

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"[{self.code}] {detail}")


class InvalidAuthIdError(TokenError):
    """Auth ID is missing, not an integer, or not greater than 0."""

    kind = TokenErrorKind.INVALID_AUTH_ID
    code = 16001


class InvalidExpirationDelayError(TokenError):
    """Expiration delay is not a positive number of seconds."""

    kind = TokenErrorKind.INVALID_EXPIRATION_DELAY
    code = 16002


class InvalidExpirationTimeError(TokenError):
    """Expiration timestamp is missing or not greater than 0."""

    kind = TokenErrorKind.INVALID_EXPIRATION_TIME
    code = 16003


class EmptySaltKeyError(TokenError):
    """An empty salt key was supplied."""

    kind = TokenErrorKind.EMPTY_SALT_KEY
    code = 16004


class MissingSaltKeyError(TokenError):
    """The salt key was never set before encrypting or decrypting."""

    kind = TokenErrorKind.MISSING_SALT_KEY
    code = 16005


class MalformedTokenError(TokenError):
    """Wire token is not valid base64 or is too short."""

    kind = TokenErrorKind.MALFORMED_TOKEN
    code = 16006


class IntegrityMismatchError(TokenError):
    """Recomputed CRC-32 does not match the transmitted checksum."""

    kind = TokenErrorKind.INTEGRITY_MISMATCH
    code = 16007


class UnpackFailureError(TokenError):
    """Decrypted plaintext does not have the fixed payload width."""

    kind = TokenErrorKind.UNPACK_FAILURE
    code = 16008


class TokenAlreadyExpiredError(TokenError):
    """Refusing to encrypt a token whose expiration is already in the past."""

    kind = TokenErrorKind.TOKEN_ALREADY_EXPIRED
    code = 16009


class DecryptionFailureError(TokenError):
    """The cipher rejected the ciphertext."""

    kind = TokenErrorKind.DECRYPTION_FAILURE
    code = 16010


class EncryptionFailureError(TokenError):
    """The cipher failed while encrypting the payload."""

    kind = TokenErrorKind.ENCRYPTION_FAILURE
    code = 16011


class TokenExpiredError(TokenError):
    """Token is authentic but its expiration time has passed."""

    kind = TokenErrorKind.TOKEN_EXPIRED
    code = 16012


ERRORS_BY_KIND: dict[TokenErrorKind, type[TokenError]] = {
    cls.kind: cls
    for cls in (
        InvalidAuthIdError,
        InvalidExpirationDelayError,
        InvalidExpirationTimeError,
        EmptySaltKeyError,
        MissingSaltKeyError,
        MalformedTokenError,
        IntegrityMismatchError,
        UnpackFailureError,
        TokenAlreadyExpiredError,
        DecryptionFailureError,
        EncryptionFailureError,
        TokenExpiredError,
    )
}


def error_for(kind: TokenErrorKind, detail: str) -> TokenError:
    """Build the typed exception matching *kind*."""
    return ERRORS_BY_KIND[kind](detail)
