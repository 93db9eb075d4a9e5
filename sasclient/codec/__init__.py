"""Binary encoding helpers."""

from .binary import BinaryReader, BinaryWriter

__all__ = ["BinaryReader", "BinaryWriter"]
