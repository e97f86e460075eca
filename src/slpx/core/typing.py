"""
Lightweight typing aliases used across slpx models.

This module contains no runtime logic and is zero-IO.
"""

from __future__ import annotations

from typing import Any, NewType

__all__ = [
    "FrameIndex",
    "JsonDict",
]

# Frame index as recorded in the replay (may be negative during the countdown).
FrameIndex = NewType("FrameIndex", int)

# Free-form JSON-like mapping (replay metadata block, pre/post frame state).
JsonDict = dict[str, Any]
