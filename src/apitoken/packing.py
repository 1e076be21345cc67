"""Fixed-width packing of the token payload and its CRC-32 checksum.

Plaintext layout (18 bytes, little-endian)::

    offset  size  field
    0       6     nonce
    6       4     auth_id          (u32)
    10      4     expiration_time  (u32 unix timestamp)
    14      4     checksum         (u32, CRC-32 of bytes [0, 14))
"""

import zlib
from typing import NamedTuple

from apitoken.constants import (
    CHECKSUM_STRUCT,
    NONCE_SIZE,
    PAYLOAD_SIZE,
    PAYLOAD_STRUCT,
    RECORD_STRUCT,
    UINT32_MAX,
)
from apitoken.exceptions import TokenErrorKind
from apitoken.result import TokenResult
from apitoken.sources import RandomSource, system_random


class PackedPayload(NamedTuple):
    """Fields recovered from a decrypted payload."""

    nonce: bytes
    auth_id: int
    expiration_time: int
    checksum: int

    @property
    def nonce_hex(self) -> str:
        return self.nonce.hex()

    def record(self) -> bytes:
        """Rebuild the 14-byte record the checksum was computed over."""
        return pack_record(self.nonce, self.auth_id, self.expiration_time)

    def checksum_matches(self) -> bool:
        return checksum(self.record()) == self.checksum


def generate_nonce(random_source: RandomSource = system_random) -> bytes:
    """Draw a fresh 6-byte nonce."""
    nonce = random_source(NONCE_SIZE)
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"Random source returned {len(nonce)} bytes, expected {NONCE_SIZE}")
    return nonce


def fits_uint32(value: int) -> bool:
    return 0 <= value <= UINT32_MAX


def pack_record(nonce: bytes, auth_id: int, expiration_time: int) -> bytes:
    """Pack ``nonce ‖ auth_id ‖ expiration_time`` into 14 bytes.

    Raises ValueError if the nonce has the wrong width or a field does not
    fit in an unsigned 32-bit integer.
    """
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"Nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")
    if not fits_uint32(auth_id) or not fits_uint32(expiration_time):
        raise ValueError("auth_id and expiration_time must fit in an unsigned 32-bit integer")
    return RECORD_STRUCT.pack(nonce, auth_id, expiration_time)


def checksum(record: bytes) -> int:
    """CRC-32 of *record* as an unsigned 32-bit integer."""
    return zlib.crc32(record) & UINT32_MAX


def pack_checksum(record: bytes) -> bytes:
    """Little-endian 4-byte CRC-32 of *record*."""
    return CHECKSUM_STRUCT.pack(checksum(record))


def pack_payload(nonce: bytes, auth_id: int, expiration_time: int) -> bytes:
    """Build the full 18-byte plaintext: record followed by its checksum."""
    record = pack_record(nonce, auth_id, expiration_time)
    return record + pack_checksum(record)


def unpack_payload(data: bytes) -> TokenResult[PackedPayload]:
    """Split an 18-byte plaintext back into its fields.

    Any other length is an ``UNPACK_FAILURE``; the checksum is returned as
    transmitted and is not verified here.
    """
    if len(data) != PAYLOAD_SIZE:
        return TokenResult.failure(
            TokenErrorKind.UNPACK_FAILURE,
            f"Cannot unpack token data: expected {PAYLOAD_SIZE} bytes, got {len(data)}",
        )
    return TokenResult.success(PackedPayload(*PAYLOAD_STRUCT.unpack(data)))
