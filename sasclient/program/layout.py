"""
Attestation data encoding driven by a schema layout.

A schema stores one type byte per field; attestation data is the fields
encoded back to back in schema order. Integers are little-endian, chars are
u32 code points, strings and vectors carry a u32 length prefix.
"""

from enum import IntEnum
from typing import Any, Dict, Mapping, Sequence, Tuple

from ..codec import BinaryReader, BinaryWriter
from ..errors import AttestationDataError


class SchemaDataType(IntEnum):
    U8 = 0
    U16 = 1
    U32 = 2
    U64 = 3
    U128 = 4
    I8 = 5
    I16 = 6
    I32 = 7
    I64 = 8
    I128 = 9
    BOOL = 10
    CHAR = 11
    STRING = 12
    VEC_U8 = 13
    VEC_U16 = 14
    VEC_U32 = 15
    VEC_U64 = 16
    VEC_U128 = 17
    VEC_I8 = 18
    VEC_I16 = 19
    VEC_I32 = 20
    VEC_I64 = 21
    VEC_I128 = 22
    VEC_BOOL = 23
    VEC_CHAR = 24
    VEC_STRING = 25

    @property
    def is_vec(self) -> bool:
        return self >= SchemaDataType.VEC_U8

    @property
    def element(self) -> "SchemaDataType":
        """Scalar type of a vector's elements (the type itself for scalars)."""
        if self.is_vec:
            return SchemaDataType(self - SchemaDataType.VEC_U8)
        return self


# (byte size, signed) for the integer types
_INTEGERS: Dict[SchemaDataType, Tuple[int, bool]] = {
    SchemaDataType.U8: (1, False),
    SchemaDataType.U16: (2, False),
    SchemaDataType.U32: (4, False),
    SchemaDataType.U64: (8, False),
    SchemaDataType.U128: (16, False),
    SchemaDataType.I8: (1, True),
    SchemaDataType.I16: (2, True),
    SchemaDataType.I32: (4, True),
    SchemaDataType.I64: (8, True),
    SchemaDataType.I128: (16, True),
}


def parse_layout(layout: bytes) -> Tuple[SchemaDataType, ...]:
    try:
        return tuple(SchemaDataType(b) for b in bytes(layout))
    except ValueError as e:
        raise AttestationDataError(f"unknown layout type: {e}")


def _encode_scalar(writer: BinaryWriter, kind: SchemaDataType, value: Any) -> None:
    if kind in _INTEGERS:
        size, signed = _INTEGERS[kind]
        writer.integer(value, size, signed=signed)
    elif kind is SchemaDataType.BOOL:
        writer.boolean(value)
    elif kind is SchemaDataType.CHAR:
        if not isinstance(value, str) or len(value) != 1:
            raise ValueError(f"char expects a single character, got {value!r}")
        writer.u32(ord(value))
    elif kind is SchemaDataType.STRING:
        writer.string(value)
    else:
        raise ValueError(f"{kind.name} is not a scalar type")


def _decode_scalar(reader: BinaryReader, kind: SchemaDataType) -> Any:
    if kind in _INTEGERS:
        size, signed = _INTEGERS[kind]
        return reader.integer(size, signed=signed)
    if kind is SchemaDataType.BOOL:
        return reader.boolean()
    if kind is SchemaDataType.CHAR:
        code = reader.u32()
        try:
            return chr(code)
        except ValueError:
            raise ValueError(f"invalid char code point {code}")
    if kind is SchemaDataType.STRING:
        return reader.string()
    raise ValueError(f"{kind.name} is not a scalar type")


def encode_value(writer: BinaryWriter, kind: SchemaDataType, value: Any) -> None:
    if kind.is_vec:
        if isinstance(value, (str, bytes)) and kind is not SchemaDataType.VEC_U8:
            raise ValueError(f"{kind.name} expects a list, got {type(value).__name__}")
        if not isinstance(value, (list, tuple, bytes, bytearray)):
            raise ValueError(f"{kind.name} expects a list, got {type(value).__name__}")
        element = kind.element
        writer.array(value, lambda w, item: _encode_scalar(w, element, item))
    else:
        _encode_scalar(writer, kind, value)


def decode_value(reader: BinaryReader, kind: SchemaDataType) -> Any:
    if kind.is_vec:
        element = kind.element
        return reader.array(lambda r: _decode_scalar(r, element))
    return _decode_scalar(reader, kind)


def _fields(schema) -> Tuple[Sequence[str], Tuple[SchemaDataType, ...]]:
    types = parse_layout(schema.layout)
    names = list(schema.field_names)
    if len(names) != len(types):
        raise AttestationDataError(
            f"schema has {len(names)} field names but {len(types)} layout entries"
        )
    return names, types


def serialize_attestation_data(schema, values: Mapping[str, Any]) -> bytes:
    """Encode `values` in the field order of `schema` (anything with
    `layout` and `field_names`)."""
    names, types = _fields(schema)
    missing = [n for n in names if n not in values]
    if missing:
        raise AttestationDataError(f"missing attestation fields: {', '.join(missing)}")
    unknown = sorted(set(values) - set(names))
    if unknown:
        raise AttestationDataError(f"unknown attestation fields: {', '.join(unknown)}")

    writer = BinaryWriter()
    for name, kind in zip(names, types):
        try:
            encode_value(writer, kind, values[name])
        except ValueError as e:
            raise AttestationDataError(f"field {name!r} ({kind.name}): {e}")
    return writer.to_bytes()


def deserialize_attestation_data(schema, data: bytes) -> Dict[str, Any]:
    """Decode attestation bytes into a field name -> value mapping."""
    names, types = _fields(schema)
    reader = BinaryReader(data)
    out: Dict[str, Any] = {}
    for name, kind in zip(names, types):
        try:
            out[name] = decode_value(reader, kind)
        except ValueError as e:
            raise AttestationDataError(f"field {name!r} ({kind.name}): {e}")
    if reader.remaining:
        raise AttestationDataError(f"{reader.remaining} trailing bytes after attestation data")
    return out
