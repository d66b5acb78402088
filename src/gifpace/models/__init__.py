"""
Data Models
===========

Frame-level data model shared by the codec and the timing pipeline.

Models:
    - DisposalMethod: Per-frame canvas disposal instruction
    - Frame: Indexed-color frame with timing and transparency metadata
"""

from gifpace.models.frame import DisposalMethod, Frame

__all__ = [
    "DisposalMethod",
    "Frame",
]
