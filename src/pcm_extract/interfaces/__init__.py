"""External boundary adapters."""

from .bridge import (
    DECODE_METHOD,
    BridgeError,
    DecodeRequest,
    DecodeSuccess,
    ErrorKind,
    handle_decode_request,
    handle_method_call,
    parse_decode_request,
)

__all__ = [
    "DECODE_METHOD",
    "BridgeError",
    "DecodeRequest",
    "DecodeSuccess",
    "ErrorKind",
    "handle_decode_request",
    "handle_method_call",
    "parse_decode_request",
]
