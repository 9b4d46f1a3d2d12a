"""Runtime helpers for aptclient"""

from .errors import AptClientError, ErrorCode, probe_error_envelope
from .codec import hex_to_bytes, bytes_to_hex, decode_private_key

__all__ = [
    "AptClientError",
    "ErrorCode",
    "probe_error_envelope",
    "hex_to_bytes",
    "bytes_to_hex",
    "decode_private_key",
]
