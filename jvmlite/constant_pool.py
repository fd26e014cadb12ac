"""The class file constant pool and its entry kinds."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, Iterator, Optional

from .class_reader import ClassReader


class ClassFormatError(ValueError):
    """Raised when class file data is malformed."""


class ConstantTag(IntEnum):
    """Tags that identify the kind of each constant pool entry."""

    UTF8 = 1
    INTEGER = 3
    FLOAT = 4
    LONG = 5
    DOUBLE = 6
    CLASS = 7
    STRING = 8
    FIELDREF = 9
    METHODREF = 10
    INTERFACE_METHODREF = 11
    NAME_AND_TYPE = 12
    METHOD_HANDLE = 15
    METHOD_TYPE = 16
    INVOKE_DYNAMIC = 18


def _utf16_units_to_chars(units: list[int]) -> Iterator[str]:
    high: Optional[int] = None
    for unit in units:
        if high is not None:
            if 0xDC00 <= unit <= 0xDFFF:
                yield chr(0x10000 + ((high - 0xD800) << 10) + (unit - 0xDC00))
                high = None
                continue
            yield "\ufffd"
            high = None
        if 0xD800 <= unit <= 0xDBFF:
            high = unit
        elif 0xDC00 <= unit <= 0xDFFF:
            yield "\ufffd"
        else:
            yield chr(unit)
    if high is not None:
        yield "\ufffd"


def decode_mutf8(data: bytes) -> str:
    """Decode modified UTF-8 as stored in class files.

    Unpaired surrogates become U+FFFD; malformed input raises ClassFormatError.
    """
    data = bytes(data)
    size = len(data)
    units: list[int] = []
    count = 0
    while count < size:
        c = data[count]
        kind = c >> 4
        if kind <= 7:
            count += 1
            units.append(c)
        elif kind in (12, 13):
            count += 2
            if count > size:
                raise ClassFormatError("malformed input: partial character at end")
            c2 = data[count - 1]
            if c2 & 0xC0 != 0x80:
                raise ClassFormatError(f"malformed input around byte {count}")
            units.append((c & 0x1F) << 6 | (c2 & 0x3F))
        elif kind == 14:
            count += 3
            if count > size:
                raise ClassFormatError("malformed input: partial character at end")
            c2 = data[count - 2]
            c3 = data[count - 1]
            if c2 & 0xC0 != 0x80 or c3 & 0xC0 != 0x80:
                raise ClassFormatError(f"malformed input around byte {count - 1}")
            units.append((c & 0x0F) << 12 | (c2 & 0x3F) << 6 | (c3 & 0x3F))
        else:
            raise ClassFormatError(f"malformed input around byte {count}")
    return "".join(_utf16_units_to_chars(units))


@dataclass(frozen=True)
class ConstantIntegerInfo:
    tag: ClassVar[ConstantTag] = ConstantTag.INTEGER
    value: int

    @classmethod
    def _read(cls, reader: ClassReader, pool: ConstantPool) -> ConstantIntegerInfo:
        return cls(struct.unpack(">i", reader.read_bytes(4))[0])


@dataclass(frozen=True)
class ConstantFloatInfo:
    tag: ClassVar[ConstantTag] = ConstantTag.FLOAT
    value: float

    @classmethod
    def _read(cls, reader: ClassReader, pool: ConstantPool) -> ConstantFloatInfo:
        return cls(struct.unpack(">f", reader.read_bytes(4))[0])


@dataclass(frozen=True)
class ConstantLongInfo:
    tag: ClassVar[ConstantTag] = ConstantTag.LONG
    value: int

    @classmethod
    def _read(cls, reader: ClassReader, pool: ConstantPool) -> ConstantLongInfo:
        return cls(struct.unpack(">q", reader.read_bytes(8))[0])


@dataclass(frozen=True)
class ConstantDoubleInfo:
    tag: ClassVar[ConstantTag] = ConstantTag.DOUBLE
    value: float

    @classmethod
    def _read(cls, reader: ClassReader, pool: ConstantPool) -> ConstantDoubleInfo:
        return cls(struct.unpack(">d", reader.read_bytes(8))[0])


@dataclass(frozen=True)
class ConstantUtf8Info:
    tag: ClassVar[ConstantTag] = ConstantTag.UTF8
    value: str

    @classmethod
    def _read(cls, reader: ClassReader, pool: ConstantPool) -> ConstantUtf8Info:
        length = reader.read_u16()
        return cls(decode_mutf8(reader.read_bytes(length)))


@dataclass
class ConstantStringInfo:
    tag: ClassVar[ConstantTag] = ConstantTag.STRING
    pool: ConstantPool = field(repr=False, compare=False)
    string_index: int

    def string(self) -> str:
        """The string literal this entry refers to."""
        return self.pool.get_utf8(self.string_index)

    @classmethod
    def _read(cls, reader: ClassReader, pool: ConstantPool) -> ConstantStringInfo:
        return cls(pool, reader.read_u16())


@dataclass
class ConstantClassInfo:
    tag: ClassVar[ConstantTag] = ConstantTag.CLASS
    pool: ConstantPool = field(repr=False, compare=False)
    name_index: int

    def name(self) -> str:
        """The internal name of the class or interface."""
        return self.pool.get_utf8(self.name_index)

    @classmethod
    def _read(cls, reader: ClassReader, pool: ConstantPool) -> ConstantClassInfo:
        return cls(pool, reader.read_u16())


@dataclass
class ConstantMemberRefInfo:
    """Common shape of field, method and interface method references."""

    tag: ClassVar[ConstantTag]
    pool: ConstantPool = field(repr=False, compare=False)
    class_index: int
    name_and_type_index: int

    def class_name(self) -> str:
        return self.pool.get_class_name(self.class_index)

    def name_and_descriptor(self) -> tuple[str, str]:
        return self.pool.get_name_and_type(self.name_and_type_index)

    @classmethod
    def _read(cls, reader: ClassReader, pool: ConstantPool) -> ConstantMemberRefInfo:
        class_index = reader.read_u16()
        return cls(pool, class_index, reader.read_u16())


class ConstantFieldrefInfo(ConstantMemberRefInfo):
    tag = ConstantTag.FIELDREF


class ConstantMethodrefInfo(ConstantMemberRefInfo):
    tag = ConstantTag.METHODREF


class ConstantInterfaceMethodrefInfo(ConstantMemberRefInfo):
    tag = ConstantTag.INTERFACE_METHODREF


@dataclass(frozen=True)
class ConstantNameAndTypeInfo:
    tag: ClassVar[ConstantTag] = ConstantTag.NAME_AND_TYPE
    name_index: int
    descriptor_index: int

    @classmethod
    def _read(cls, reader: ClassReader, pool: ConstantPool) -> ConstantNameAndTypeInfo:
        name_index = reader.read_u16()
        return cls(name_index, reader.read_u16())


@dataclass(frozen=True)
class ConstantMethodTypeInfo:
    tag: ClassVar[ConstantTag] = ConstantTag.METHOD_TYPE
    descriptor_index: int

    @classmethod
    def _read(cls, reader: ClassReader, pool: ConstantPool) -> ConstantMethodTypeInfo:
        return cls(reader.read_u16())


@dataclass(frozen=True)
class ConstantMethodHandleInfo:
    tag: ClassVar[ConstantTag] = ConstantTag.METHOD_HANDLE
    reference_kind: int
    reference_index: int

    @classmethod
    def _read(cls, reader: ClassReader, pool: ConstantPool) -> ConstantMethodHandleInfo:
        kind = reader.read_u8()
        return cls(kind, reader.read_u16())


@dataclass(frozen=True)
class ConstantInvokeDynamicInfo:
    tag: ClassVar[ConstantTag] = ConstantTag.INVOKE_DYNAMIC
    bootstrap_method_attr_index: int
    name_and_type_index: int

    @classmethod
    def _read(cls, reader: ClassReader, pool: ConstantPool) -> ConstantInvokeDynamicInfo:
        bootstrap_index = reader.read_u16()
        return cls(bootstrap_index, reader.read_u16())


_CONSTANT_TYPES = {
    cls.tag: cls
    for cls in (
        ConstantIntegerInfo,
        ConstantFloatInfo,
        ConstantLongInfo,
        ConstantDoubleInfo,
        ConstantUtf8Info,
        ConstantStringInfo,
        ConstantClassInfo,
        ConstantFieldrefInfo,
        ConstantMethodrefInfo,
        ConstantInterfaceMethodrefInfo,
        ConstantNameAndTypeInfo,
        ConstantMethodTypeInfo,
        ConstantMethodHandleInfo,
        ConstantInvokeDynamicInfo,
    )
}

_WIDE_TYPES = (ConstantLongInfo, ConstantDoubleInfo)


class ConstantPool:
    """Constant pool entries by index; index 0 and the slot after a long or double are empty."""

    def __init__(self, entries: Optional[list] = None) -> None:
        self._entries: list = list(entries) if entries is not None else [None]

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int):
        return self._entries[index]

    def __iter__(self):
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"ConstantPool({len(self._entries)} slots)"

    def get_constant_info(self, index: int):
        """Return the entry at ``index``, raising ClassFormatError if there is none."""
        if 0 <= index < len(self._entries):
            info = self._entries[index]
            if info is not None:
                return info
        raise ClassFormatError("Invalid constant pool index!")

    def _get_typed(self, index: int, kind: type):
        info = self.get_constant_info(index)
        if not isinstance(info, kind):
            raise ClassFormatError(
                f"constant pool entry {index} is {type(info).__name__}, expected {kind.__name__}"
            )
        return info

    def get_utf8(self, index: int) -> str:
        return self._get_typed(index, ConstantUtf8Info).value

    def get_class_name(self, index: int) -> str:
        return self.get_utf8(self._get_typed(index, ConstantClassInfo).name_index)

    def get_name_and_type(self, index: int) -> tuple[str, str]:
        info = self._get_typed(index, ConstantNameAndTypeInfo)
        return self.get_utf8(info.name_index), self.get_utf8(info.descriptor_index)


def read_constant_info(reader: ClassReader, pool: ConstantPool):
    """Read one tagged constant pool entry."""
    tag = reader.read_u8()
    kind = _CONSTANT_TYPES.get(tag)
    if kind is None:
        raise ClassFormatError("java.lang.ClassFormatError: constant pool tag!")
    return kind._read(reader, pool)


def read_constant_pool(reader: ClassReader) -> ConstantPool:
    """Read the constant pool count and its entries."""
    count = reader.read_u16()
    entries: list = [None] * count
    pool = ConstantPool(entries)
    index = 1
    while index < count:
        info = read_constant_info(reader, pool)
        pool._entries[index] = info
        index += 2 if isinstance(info, _WIDE_TYPES) else 1
    return pool