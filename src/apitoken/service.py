"""Settings-driven facade for issuing and authenticating API tokens."""

import logging

from apitoken.exceptions import TokenErrorKind
from apitoken.result import TokenResult
from apitoken.settings import TokenSettings
from apitoken.token import Token, TokenCodec

logger = logging.getLogger(__name__)


class TokenService:
    """Issues and authenticates tokens with the server's configured salt.

    Rejections are logged with their error kind so operators can tell a
    forged or corrupted token from an expired one.  Callers should still
    treat every failure as a plain "reject" towards the client.
    """

    def __init__(self, settings: TokenSettings, codec: TokenCodec | None = None) -> None:
        key_salt = settings.TOKEN_KEY_SALT
        if not key_salt or not key_salt.strip():
            raise ValueError("TOKEN_KEY_SALT must be set to a non-empty value for token encryption")
        if settings.TOKEN_EXPIRATION_DELAY_SECONDS <= 0:
            raise ValueError("TOKEN_EXPIRATION_DELAY_SECONDS must be greater than 0")
        self._key_salt = key_salt
        self._expire_seconds = settings.TOKEN_EXPIRATION_DELAY_SECONDS
        self._codec = codec or TokenCodec()

    @property
    def expire_seconds(self) -> int:
        """Default token lifetime in seconds."""
        return self._expire_seconds

    def issue(self, auth_id: int, expiration_delay: int | None = None) -> str:
        """Create a wire token for *auth_id*.

        Raises:
            TokenError: If the auth ID or delay is invalid, or encryption fails.
        """
        delay = self._expire_seconds if expiration_delay is None else expiration_delay
        token = (
            self._codec.builder()
            .with_key_salt(self._key_salt)
            .with_auth_id(auth_id)
            .with_expiration_delay(delay)
            .build()
            .unwrap()
        )
        return self._codec.encrypt(token).unwrap()

    def authenticate(self, wire: str) -> TokenResult[Token]:
        """Verify *wire* and enforce freshness.

        An authentic token past its expiration time fails with
        ``TOKEN_EXPIRED``; every other failure keeps the codec's kind.
        """
        result = self._codec.decrypt(wire, self._key_salt)
        if result.error is not None:
            logger.warning("Rejected token: %s", result.error.detail, extra={"token_error": str(result.error.kind)})
            return result

        token = result.unwrap()
        if self._codec.is_expired(token):
            logger.info(
                "Expired token for auth_id=%d (expired at %d)",
                token.auth_id,
                token.expiration_time,
                extra={"token_error": str(TokenErrorKind.TOKEN_EXPIRED)},
            )
            return TokenResult.failure(TokenErrorKind.TOKEN_EXPIRED, "Token has expired")
        return result

    def authenticate_or_raise(self, wire: str) -> int:
        """Return the auth ID carried by a valid, fresh token.

        Raises:
            TokenExpiredError: If the token is authentic but expired.
            TokenError: For any other rejection.
        """
        return self.authenticate(wire).map(lambda token: token.auth_id).unwrap()
