"""
Little-endian binary writer/reader for program instruction data and
account layouts.

Variable-length values (strings, byte blobs, arrays) carry a u32 length
prefix; integers are fixed width.
"""

from typing import Callable, List, TypeVar

from ..address import Address, PUBLIC_KEY_LENGTH

T = TypeVar("T")


class BinaryWriter:
    """Append-only encoder."""

    def __init__(self):
        self._buf = bytearray()

    def integer(self, value: int, size: int, signed: bool = False) -> "BinaryWriter":
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"integer expected, got {type(value).__name__}")
        try:
            self._buf += value.to_bytes(size, "little", signed=signed)
        except OverflowError:
            kind = "i" if signed else "u"
            raise ValueError(f"{value} does not fit in {kind}{size * 8}")
        return self

    def u8(self, value: int) -> "BinaryWriter":
        return self.integer(value, 1)

    def u16(self, value: int) -> "BinaryWriter":
        return self.integer(value, 2)

    def u32(self, value: int) -> "BinaryWriter":
        return self.integer(value, 4)

    def u64(self, value: int) -> "BinaryWriter":
        return self.integer(value, 8)

    def i64(self, value: int) -> "BinaryWriter":
        return self.integer(value, 8, signed=True)

    def boolean(self, value: bool) -> "BinaryWriter":
        if not isinstance(value, bool):
            raise ValueError(f"bool expected, got {type(value).__name__}")
        self._buf.append(1 if value else 0)
        return self

    def raw(self, data: bytes) -> "BinaryWriter":
        self._buf += data
        return self

    def address(self, value: Address) -> "BinaryWriter":
        return self.raw(bytes(value))

    def blob(self, data: bytes) -> "BinaryWriter":
        """u32 length prefix followed by the bytes."""
        self.u32(len(data))
        return self.raw(bytes(data))

    def string(self, value: str) -> "BinaryWriter":
        if not isinstance(value, str):
            raise ValueError(f"string expected, got {type(value).__name__}")
        return self.blob(value.encode("utf-8"))

    def array(self, items, encode: Callable[["BinaryWriter", T], object]) -> "BinaryWriter":
        """u32 item count followed by each encoded item."""
        items = list(items)
        self.u32(len(items))
        for item in items:
            encode(self, item)
        return self

    def to_bytes(self) -> bytes:
        return bytes(self._buf)


class BinaryReader:
    """Cursor-based decoder; raises ValueError on truncated input."""

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def take(self, size: int) -> bytes:
        if size < 0 or self._offset + size > len(self._data):
            raise ValueError(
                f"unexpected end of data: need {size} bytes at offset {self._offset}, "
                f"have {self.remaining}"
            )
        chunk = self._data[self._offset:self._offset + size]
        self._offset += size
        return chunk

    def integer(self, size: int, signed: bool = False) -> int:
        return int.from_bytes(self.take(size), "little", signed=signed)

    def u8(self) -> int:
        return self.integer(1)

    def u16(self) -> int:
        return self.integer(2)

    def u32(self) -> int:
        return self.integer(4)

    def u64(self) -> int:
        return self.integer(8)

    def i64(self) -> int:
        return self.integer(8, signed=True)

    def boolean(self) -> bool:
        value = self.u8()
        if value not in (0, 1):
            raise ValueError(f"invalid bool byte {value}")
        return value == 1

    def address(self) -> Address:
        return Address(self.take(PUBLIC_KEY_LENGTH))

    def blob(self) -> bytes:
        return self.take(self.u32())

    def string(self) -> str:
        raw = self.blob()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueError(f"invalid utf-8 string: {e}")

    def array(self, decode: Callable[["BinaryReader"], T]) -> List[T]:
        count = self.u32()
        return [decode(self) for _ in range(count)]
