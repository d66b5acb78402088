"""
Codec Errors
============

Exception types raised by the GIF decoder and encoder.

Decoding failures come in three kinds, so callers can report each the
right way:
    - FormatError: the stream is malformed
    - InternalError: the decoder reached a state it cannot handle
    - DecodingIoError: reading the underlying file failed
"""


class DecodingError(Exception):
    """Base class for all GIF decoding failures."""
    pass


class FormatError(DecodingError):
    """Raised when the stream violates the GIF format."""
    pass


class InternalError(DecodingError):
    """Raised on a decoder fault unrelated to the input bytes."""
    pass


class DecodingIoError(DecodingError):
    """
    Raised when the source cannot be read.

    The wrapped OSError is kept as ``error`` and its description is the
    message of this exception.
    """

    def __init__(self, error: OSError) -> None:
        super().__init__(str(error))
        self.error = error


class EncodingError(Exception):
    """Raised when a frame or palette cannot be serialized as GIF."""
    pass
