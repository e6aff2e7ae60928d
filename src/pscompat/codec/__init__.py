"""Profile codec.

Exports the ``ProfileSerializer`` class and the module-level
``encode``/``decode``/``load_profile``/``save_profile`` helpers.
"""
from __future__ import annotations

from pscompat.codec.serializer import (
    ProfileSerializer,
    decode,
    encode,
    load_profile,
    save_profile,
)

__all__ = [
    "ProfileSerializer",
    "encode",
    "decode",
    "load_profile",
    "save_profile",
]
