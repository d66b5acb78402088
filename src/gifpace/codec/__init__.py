"""
Codec Module
============

Minimal GIF container support working on raw indexed frames.

This module provides the I/O boundary of gifpace:
    - GifDecoder: Sequential frame extraction, palettes, canvas size
    - GifEncoder: Sequential frame serialization with looping
    - DecodingError / EncodingError: Typed failures

Example:
    from gifpace.codec import GifDecoder, GifEncoder

    with open("in.gif", "rb") as src:
        decoder = GifDecoder(src).read_info()
        frames = list(decoder)
"""

from gifpace.codec.decoder import GifDecoder
from gifpace.codec.encoder import GifEncoder
from gifpace.codec.errors import (
    DecodingError,
    DecodingIoError,
    EncodingError,
    FormatError,
    InternalError,
)


__all__ = [
    "GifDecoder",
    "GifEncoder",
    "DecodingError",
    "DecodingIoError",
    "EncodingError",
    "FormatError",
    "InternalError",
]
