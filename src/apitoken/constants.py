"""Wire-format sizes, struct layouts and defaults for API tokens."""

import struct

# --- Packed payload layout ---

NONCE_SIZE = 6
"""Random bytes prepended to every record (12 hex characters)."""

RECORD_STRUCT = struct.Struct(f"<{NONCE_SIZE}sII")
"""nonce ‖ auth_id (u32 LE) ‖ expiration_time (u32 LE)."""

CHECKSUM_STRUCT = struct.Struct("<I")
"""CRC-32 of the record, u32 LE."""

PAYLOAD_STRUCT = struct.Struct(f"<{NONCE_SIZE}sIII")
"""Full plaintext: record ‖ checksum."""

RECORD_SIZE = RECORD_STRUCT.size  # 14
PAYLOAD_SIZE = PAYLOAD_STRUCT.size  # 18

UINT32_MAX = 0xFFFFFFFF

# --- AES cipher ---

AES_BLOCK_SIZE_BITS = 128
AES_IV_SIZE = 16

# --- Defaults ---

DEFAULT_EXPIRATION_DELAY_SECONDS = 3600
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SERVICE_NAME = "apitoken"
