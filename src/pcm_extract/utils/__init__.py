from .config import DecodeSettings, load_decode_settings

__all__ = [
    "DecodeSettings",
    "load_decode_settings",
]
